"""Tests for batch runs, file discovery and exclusion patterns."""
from __future__ import annotations

from pathlib import Path

import pytest

from remove_unused_js_imports import ApplyError
from remove_unused_js_imports import CancellationToken
from remove_unused_js_imports import ConfigurationWarning
from remove_unused_js_imports import DeleteRange
from remove_unused_js_imports import collect_source_files
from remove_unused_js_imports import fix_file
from remove_unused_js_imports import sweep
from remove_unused_js_imports._sweep import _write_fixed
from remove_unused_js_imports._sweep import is_excluded


class _CancelAfter(CancellationToken):
    """Cancels itself once ``n`` files have been allowed to start."""

    def __init__(self, n: int) -> None:
        super().__init__()
        self.checks = 0
        self.n = n

    @property
    def cancelled(self) -> bool:
        self.checks += 1
        return self.checks > self.n


def _write(tmp_path: Path, name: str, content: str) -> Path:
    path = tmp_path / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


# =============================================================================
# sweep
# =============================================================================


def test_sweep_reports_unused(tmp_path):
    dirty = _write(tmp_path, 'dirty.ts', "import { a, b } from './m';\nb();\n")
    clean = _write(tmp_path, 'clean.ts', "import { b } from './m';\nb();\n")

    result = sweep([dirty, clean])

    assert list(result.unused_imports) == [dirty]
    assert [imp.local_name for imp in result.unused_imports[dirty]] == ['a']
    assert result.total_unused == 1
    assert result.changed == []
    assert dirty.read_text() == "import { a, b } from './m';\nb();\n"


def test_sweep_fix(tmp_path):
    dirty = _write(tmp_path, 'dirty.ts', "import { a, b } from './m';\nb();\n")

    result = sweep([dirty], fix=True)

    assert result.changed == [dirty]
    assert dirty.read_text() == "import { b } from './m';\nb();\n"


def test_sweep_fix_keeps_crlf(tmp_path):
    path = tmp_path / 'crlf.ts'
    path.write_bytes(b"import { a } from './a';\r\nimport { b } from './b';\r\nb();\r\n")

    sweep([path], fix=True)

    assert path.read_bytes() == b"import { b } from './b';\r\nb();\r\n"


def test_sweep_isolates_parse_errors(tmp_path):
    broken = _write(tmp_path, 'broken.ts', "import { a from './m';\n")
    dirty = _write(tmp_path, 'dirty.ts', "import { a } from './m';\n")

    result = sweep([broken, dirty], fix=True)

    assert list(result.errors) == [broken]
    assert 'syntax error' in result.errors[broken]
    assert broken.read_text() == "import { a from './m';\n"
    assert result.changed == [dirty]
    assert dirty.read_text() == ""


def test_sweep_isolates_read_errors(tmp_path):
    bad = tmp_path / 'bad.ts'
    bad.write_bytes(b'\xff\xfe invalid utf-8 \x80\x81')
    dirty = _write(tmp_path, 'dirty.ts', "import { a } from './m';\n")

    result = sweep([bad, dirty])

    assert 'Error reading' in result.errors[bad]
    assert list(result.unused_imports) == [dirty]


def test_sweep_cancelled_before_start(tmp_path):
    files = [
        _write(tmp_path, f'f{i}.ts', "import { a } from './m';\n")
        for i in range(3)
    ]
    token = CancellationToken()
    token.cancel()

    result = sweep(files, fix=True, cancel=token)

    assert result.cancelled
    assert result.skipped == files
    assert result.unused_imports == {}
    assert all(f.read_text() == "import { a } from './m';\n" for f in files)


def test_sweep_cancelled_between_files(tmp_path):
    files = [
        _write(tmp_path, f'f{i}.ts', "import { a } from './m';\n")
        for i in range(3)
    ]

    result = sweep(files, fix=True, cancel=_CancelAfter(1))

    assert result.cancelled
    assert result.changed == files[:1]
    assert result.skipped == files[1:]
    assert files[0].read_text() == ""
    assert files[1].read_text() == "import { a } from './m';\n"


def test_cancellation_token():
    token = CancellationToken()
    assert not token.cancelled
    token.cancel()
    assert token.cancelled


# =============================================================================
# Applying to files
# =============================================================================


def test_fix_file(tmp_path):
    path = _write(tmp_path, 'a.ts', "import { a } from './m';\nx();\n")
    assert fix_file(path) is True
    assert path.read_text() == "x();\n"
    assert fix_file(path) is False


def test_write_fixed_detects_concurrent_change(tmp_path):
    path = _write(tmp_path, 'a.ts', "import { a } from './m';\nedited();\n")

    with pytest.raises(ApplyError):
        _write_fixed(path, "import { a } from './m';\n", [DeleteRange(0, 1)])

    assert path.read_text() == "import { a } from './m';\nedited();\n"


# =============================================================================
# File discovery
# =============================================================================


def test_collect_source_files(tmp_path):
    ts = _write(tmp_path, 'src/a.ts', '')
    tsx = _write(tmp_path, 'src/b.tsx', '')
    js = _write(tmp_path, 'src/lib/c.js', '')
    mjs = _write(tmp_path, 'd.mjs', '')
    _write(tmp_path, 'readme.md', '')
    _write(tmp_path, 'node_modules/pkg/index.js', '')

    files = collect_source_files([tmp_path])

    assert sorted(files) == sorted([ts, tsx, js, mjs])


def test_collect_non_source_file(tmp_path):
    txt_file = _write(tmp_path, 'readme.txt', 'hello')
    assert collect_source_files([txt_file]) == []


def test_collect_with_custom_exclude(tmp_path):
    kept = _write(tmp_path, 'src/a.ts', '')
    _write(tmp_path, 'dist/a.js', '')
    vendored = _write(tmp_path, 'node_modules/pkg/index.js', '')

    files = collect_source_files([tmp_path], exclude=['**/dist/**'])

    assert sorted(files) == sorted([kept, vendored])


@pytest.mark.parametrize(
    'pattern',
    (
        pytest.param('', id='empty'),
        pytest.param('   ', id='blank'),
        pytest.param('**/[dist/**', id='unbalanced bracket'),
    ),
)
def test_invalid_exclude_pattern_excludes_nothing(tmp_path, pattern):
    path = _write(tmp_path, 'dist/a.ts', '')

    with pytest.warns(ConfigurationWarning):
        files = collect_source_files([tmp_path], exclude=[pattern])

    assert files == [path]


@pytest.mark.parametrize(
    ('path', 'pattern', 'expected'),
    (
        pytest.param('node_modules/x/a.js', '**/node_modules/**', True, id='leading dir'),
        pytest.param('/p/node_modules/x/a.js', '**/node_modules/**', True, id='nested dir'),
        pytest.param('/p/src/a.js', '**/node_modules/**', False, id='no match'),
        pytest.param('/p/src/a.test.ts', '*.test.ts', True, id='suffix glob'),
    ),
)
def test_is_excluded(path, pattern, expected):
    assert is_excluded(Path(path), [pattern]) is expected
