from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory

from whoimports.file_walker import (
    find_common_ancestor,
    ignore_patterns_for,
    is_within_folders,
    iter_typescript_files,
    matches_pattern,
    module_key,
)


def test_iter_typescript_files_filters_non_sources():
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        (root / "a.ts").write_text("export const a = 1;", encoding="utf-8")
        (root / "b.txt").write_text("nope", encoding="utf-8")
        (root / "c.tsx").write_text("export const c = 1;", encoding="utf-8")
        sub = root / "sub"
        sub.mkdir()
        (sub / "d.js").write_text("export const d = 1;", encoding="utf-8")
        (root / "node_modules").mkdir()
        (root / "node_modules" / "dep.ts").write_text("", encoding="utf-8")
        (root / ".cache").mkdir()
        (root / ".cache" / "hidden.ts").write_text("", encoding="utf-8")

        matches = iter_typescript_files(root)
        names = [Path(path).name for path in matches]

        assert names == ["a.ts", "c.tsx", "d.js"]


def test_iter_typescript_files_applies_ignore_patterns():
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        for name in ("a.ts", "a.test.ts", "a.test.tsx", "a.spec.ts", "globals.d.ts"):
            (root / name).write_text("", encoding="utf-8")

        matches = iter_typescript_files(root, ignore_patterns_for([".test.*", ".spec.ts"]))
        names = {Path(path).name for path in matches}

        assert names == {"a.ts"}

        matches = iter_typescript_files(root, ignore_patterns_for(include_declarations=True))
        names = {Path(path).name for path in matches}

        assert "globals.d.ts" in names


def test_iter_typescript_files_missing_root_returns_empty():
    with TemporaryDirectory() as tmpdir:
        assert iter_typescript_files(Path(tmpdir) / "missing") == []


def test_matches_pattern():
    assert matches_pattern("file.test.ts", ".test.ts")
    assert matches_pattern("file.test.tsx", ".test.*")
    assert not matches_pattern("file.ts", ".test.ts")
    assert not matches_pattern("testts", ".test.ts")


def test_find_common_ancestor():
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir).resolve()
        a = root / "project" / "src"
        b = root / "project" / "lib"

        assert find_common_ancestor([a]) == a
        assert find_common_ancestor([a, a]) == a
        assert find_common_ancestor([a, b]) == root / "project"


def test_is_within_folders():
    folders = ["/project/src", "/project/lib"]

    assert is_within_folders("/project/src/file.ts", folders)
    assert is_within_folders("/project/src/nested/file.ts", folders)
    assert is_within_folders("/project/lib/file.ts", folders)
    assert not is_within_folders("/project/other/file.ts", folders)
    assert not is_within_folders("/other/src/file.ts", folders)


def test_module_key_is_posix_relative():
    with TemporaryDirectory() as tmpdir:
        root = Path(tmpdir)
        path = root / "exports" / "shared.ts"

        assert module_key(path, root) == "exports/shared.ts"
