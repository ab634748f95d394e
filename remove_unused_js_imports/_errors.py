from __future__ import annotations


class ImportAnalysisError(Exception):
    """Base class for errors raised while analyzing or fixing imports."""


class ParseError(ImportAnalysisError):
    """The source text could not be parsed; no edits are produced."""

    def __init__(self, file_identity: str, line: int, column: int) -> None:
        self.file_identity = file_identity
        self.line = line  # 1-based
        self.column = column  # 1-based
        super().__init__(f"{file_identity}:{line}:{column}: syntax error")


class ApplyError(ImportAnalysisError):
    """An edit set could not be applied to a text."""


class ConfigurationWarning(UserWarning):
    """An exclusion pattern was empty or malformed and has been ignored."""
