"""Tests for archmap.repo_scanner."""

from __future__ import annotations

from pathlib import Path

import pytest

from archmap.repo_scanner import RepoScanner, build_ignore_rule


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


def test_scan_builds_sorted_manifest_with_language(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()

    _write(repo_root / "src" / "app.py", "print('hi')\n")
    _write(repo_root / "src" / "web" / "index.ts", "export {};\n")
    _write(repo_root / "README.md", "# Readme\n")
    _write(repo_root / "Dockerfile", "FROM python:3.11-slim\n")
    _write(repo_root / ".venv" / "should_ignore.py", "print('nope')\n")
    _write(repo_root / "node_modules" / "react" / "index.js", "module.exports = {};\n")
    _write(repo_root / "src" / "__pycache__" / "app.cpython-311.pyc", "")

    manifest = RepoScanner().scan(str(repo_root))

    assert manifest.root == str(repo_root.resolve())
    assert manifest.paths() == ["Dockerfile", "README.md", "src/app.py", "src/web/index.ts"]
    languages = {meta.path: meta.language for meta in manifest.files}
    assert languages["src/app.py"] == "Python"
    assert languages["src/web/index.ts"] == "TypeScript"
    assert languages["Dockerfile"] is None
    sizes = {meta.path: meta.size for meta in manifest.files}
    assert sizes["src/app.py"] == len("print('hi')\n")


def test_scan_rejects_missing_directory(tmp_path: Path) -> None:
    missing = tmp_path / "missing"

    with pytest.raises(FileNotFoundError, match="missing"):
        RepoScanner().scan(str(missing))


def test_scan_rejects_file_path(tmp_path: Path) -> None:
    target = tmp_path / "file.py"
    _write(target, "x = 1\n")

    with pytest.raises(NotADirectoryError):
        RepoScanner().scan(str(target))


def test_scan_respects_gitignore(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()

    _write(repo_root / ".gitignore", "build/\n*.log\n!keep.log\n")
    _write(repo_root / "src" / "main.py", "print('ok')\n")
    _write(repo_root / "build" / "artifact.txt", "binary data\n")
    _write(repo_root / "notes.log", "ignore me\n")
    _write(repo_root / "keep.log", "keep me\n")

    paths = RepoScanner().scan(str(repo_root)).paths()

    assert "src/main.py" in paths
    assert "build/artifact.txt" not in paths
    assert "notes.log" not in paths
    assert "keep.log" in paths


def test_scan_respects_exclude_paths_and_skip_files(tmp_path: Path) -> None:
    repo_root = tmp_path / "repo"
    repo_root.mkdir()

    _write(repo_root / "src" / "main.py", "print('ok')\n")
    _write(repo_root / "data" / "ignored.txt", "secret\n")
    _write(repo_root / "report.generated", "generated output\n")
    _write(repo_root / "ARCHITECTURE.md", "# old map\n")

    scanner = RepoScanner(
        exclude_paths=["data/", "*.generated"], skip_files=["ARCHITECTURE.md"]
    )
    paths = scanner.scan(str(repo_root)).paths()

    assert paths == ["src/main.py"]


def test_anchored_ignore_rule_only_matches_from_root() -> None:
    rule = build_ignore_rule("/dist/")

    assert rule is not None
    assert rule.matches("dist", True)
    assert not rule.matches("packages/app/dist", True)
    assert build_ignore_rule("   ") is None
