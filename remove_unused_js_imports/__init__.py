from __future__ import annotations

from remove_unused_js_imports._ast_helpers import collect_used_names
from remove_unused_js_imports._ast_helpers import extract_imports
from remove_unused_js_imports._autofix import analyze
from remove_unused_js_imports._autofix import apply_edits
from remove_unused_js_imports._autofix import remove_unused_imports
from remove_unused_js_imports._data import BindingKind
from remove_unused_js_imports._data import BoundName
from remove_unused_js_imports._data import DeleteRange
from remove_unused_js_imports._data import Edit
from remove_unused_js_imports._data import ImportStatement
from remove_unused_js_imports._data import ImportTable
from remove_unused_js_imports._data import Position
from remove_unused_js_imports._data import ReplaceRange
from remove_unused_js_imports._data import StatementVerdict
from remove_unused_js_imports._detection import classify
from remove_unused_js_imports._detection import find_unused_imports
from remove_unused_js_imports._errors import ApplyError
from remove_unused_js_imports._errors import ConfigurationWarning
from remove_unused_js_imports._errors import ImportAnalysisError
from remove_unused_js_imports._errors import ParseError
from remove_unused_js_imports._main import check_file
from remove_unused_js_imports._main import main
from remove_unused_js_imports._parser import SourceFile
from remove_unused_js_imports._parser import parse
from remove_unused_js_imports._sweep import CancellationToken
from remove_unused_js_imports._sweep import SweepResult
from remove_unused_js_imports._sweep import collect_source_files
from remove_unused_js_imports._sweep import fix_file
from remove_unused_js_imports._sweep import sweep

__all__ = [
    # Data types
    "BindingKind",
    "BoundName",
    "ImportStatement",
    "ImportTable",
    "StatementVerdict",
    "Position",
    "DeleteRange",
    "ReplaceRange",
    "Edit",
    # Errors
    "ImportAnalysisError",
    "ParseError",
    "ApplyError",
    "ConfigurationWarning",
    # Single-file analysis
    "SourceFile",
    "parse",
    "collect_used_names",
    "extract_imports",
    "classify",
    "find_unused_imports",
    "analyze",
    "apply_edits",
    "remove_unused_imports",
    # Batch runs
    "CancellationToken",
    "SweepResult",
    "collect_source_files",
    "fix_file",
    "sweep",
    # CLI
    "check_file",
    "main",
]
