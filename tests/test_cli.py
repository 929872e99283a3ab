"""CLI parser and entrypoint behaviour tests."""

from __future__ import annotations

import pytest

from archmap.cli import _build_parser, main
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "map"])
    assert args.verbose is True
    assert args.command == "map"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["map", "--verbose"])
    assert args.verbose is True
    assert args.command == "map"


def test_map_defaults() -> None:
    args = _build_parser().parse_args(["map"])

    assert args.path == "."
    assert args.budget is None
    assert args.depth is None
    assert args.full_signals is False
    assert args.show_orphans is False


def test_map_accepts_all_options() -> None:
    args = _build_parser().parse_args(
        [
            "map",
            "repo",
            "--out",
            "docs/MAP.md",
            "--focus",
            "src/api",
            "--focus-file",
            "src/api/users.ts",
            "--depth",
            "2",
            "--budget",
            "large",
            "--full-signals",
            "--show-orphans",
        ]
    )

    assert args.path == "repo"
    assert args.out == "docs/MAP.md"
    assert args.focus == "src/api"
    assert args.focus_file == "src/api/users.ts"
    assert args.depth == 2
    assert args.budget == "large"
    assert args.full_signals is True
    assert args.show_orphans is True


@pytest.mark.parametrize("argv", [["map", "--budget", "huge"], ["map", "--depth", "-1"]])
def test_invalid_map_options_exit(argv: list) -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args(argv)


def test_serve_options() -> None:
    args = _build_parser().parse_args(["serve", "--host", "0.0.0.0", "--port", "9000"])

    assert args.command == "serve"
    assert args.host == "0.0.0.0"
    assert args.port == 9000


def test_main_writes_map(repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]) -> None:
    repo_builder.write({"app.py": "import helpers\n", "helpers.py": "VALUE = 1\n"})

    main(["map", str(repo_builder.path())])

    output = repo_builder.path() / "ARCHITECTURE.md"
    assert output.exists()
    assert "`helpers.py`" in output.read_text(encoding="utf-8")
    assert "Architecture map written to" in capsys.readouterr().out


def test_main_stdout_prints_map(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.py": "import helpers\n", "helpers.py": "VALUE = 1\n"})

    main(["map", str(repo_builder.path()), "--stdout"])

    assert capsys.readouterr().out.startswith("# Architecture Map: repo")
    assert not (repo_builder.path() / "ARCHITECTURE.md").exists()


def test_main_prints_warnings(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"broken.py": "def broken(:\n    pass\n"})

    main(["map", str(repo_builder.path())])

    err = capsys.readouterr().err
    assert "1 warning(s):" in err
    assert "broken.py: PARSE-ERROR" in err


def test_main_exits_for_missing_repository(
    tmp_path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["map", str(tmp_path / "missing")])

    assert excinfo.value.code == 1
    assert "Repository path not found" in capsys.readouterr().err


def test_main_exits_for_unknown_focus_file(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.py": "x = 1\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["map", str(repo_builder.path()), "--focus-file", "nope.py"])

    assert excinfo.value.code == 1
    assert "Error: --focus-file not found: nope.py" in capsys.readouterr().err


def test_main_writes_log_file(repo_builder: RepoBuilder, tmp_path) -> None:
    repo_builder.write({"app.py": "x = 1\n"})
    log_path = tmp_path / "archmap.log"

    main(["--log-file", str(log_path), "map", str(repo_builder.path()), "--stdout"])

    assert "archmap.pipeline: [repo] Scanned 1 files" in log_path.read_text(encoding="utf-8")
