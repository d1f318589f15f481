"""CLI behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from runecho.cli import _build_parser, main
from runecho.stores import load_ir
from tests._fixtures.repo_builder import RepoBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["update", "--verbose"])
    assert args.verbose is True
    assert args.command == "update"


def test_cli_accepts_quiet_before_or_after_command() -> None:
    parser = _build_parser()
    assert parser.parse_args(["-q", "generate"]).quiet is True
    assert parser.parse_args(["show", "--quiet"]).quiet is True
    assert parser.parse_args(["verify"]).quiet is False


def test_cli_accepts_output_and_runs() -> None:
    parser = _build_parser()
    assert parser.parse_args(["generate", "src", "-o", "ir.json"]).output == "ir.json"
    assert parser.parse_args(["verify", "--runs", "5"]).runs == 5


def test_cli_requires_command() -> None:
    with pytest.raises(SystemExit):
        _build_parser().parse_args([])


def test_generate_writes_ir_to_default_location(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.js": "function app() {}"})

    main(["generate", str(repo_builder.path())])

    target = repo_builder.path() / ".ai" / "ir.json"
    payload = json.loads(target.read_text(encoding="utf-8"))
    assert list(payload["files"]) == ["app.js"]
    assert "1 files" in capsys.readouterr().out


def test_generate_honours_config_file(repo_builder: RepoBuilder) -> None:
    repo_builder.write(
        {
            ".runecho.yml": """
                ir:
                  ignored_paths: [vendor]
                  output: build/ir.json
            """,
            "vendor/lib.js": "function vendored() {}",
            "app.js": "function app() {}",
        }
    )

    main(["generate", str(repo_builder.path())])

    ir = load_ir(repo_builder.path() / "build" / "ir.json")
    assert list(ir.files) == ["app.js"]


def test_update_reports_reused_entries(
    repo_builder: RepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"a.js": "function a() {}", "b.js": "function b() {}"})
    output = tmp_path / "ir.json"
    main(["generate", str(repo_builder.path()), "-o", str(output)])
    capsys.readouterr()

    repo_builder.write({"b.js": "function b2() {}"})
    main(["update", str(repo_builder.path()), "-o", str(output)])

    assert "1 reused" in capsys.readouterr().out
    assert load_ir(output).files["b.js"].functions == ("b2",)


def test_update_without_changes_reports_up_to_date(
    repo_builder: RepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"a.js": "function a() {}"})
    output = tmp_path / "ir.json"
    main(["generate", str(repo_builder.path()), "-o", str(output)])
    capsys.readouterr()

    main(["update", str(repo_builder.path()), "-o", str(output)])

    assert "already up to date" in capsys.readouterr().out


def test_update_regenerates_when_stored_ir_is_corrupt(
    repo_builder: RepoBuilder, tmp_path: Path
) -> None:
    repo_builder.write({"a.js": "function a() {}"})
    output = tmp_path / "ir.json"
    output.write_text("{ not json", encoding="utf-8")

    main(["update", str(repo_builder.path()), "-o", str(output)])

    assert list(load_ir(output).files) == ["a.js"]


def test_update_without_stored_ir_generates(repo_builder: RepoBuilder, tmp_path: Path) -> None:
    repo_builder.write({"a.js": "function a() {}"})
    output = tmp_path / "fresh" / "ir.json"

    main(["update", str(repo_builder.path()), "-o", str(output)])

    assert list(load_ir(output).files) == ["a.js"]


def test_verify_passes_for_stable_tree(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"a.ts": "export class A {}", "lib/b.js": "const b = () => 1;"})

    main(["verify", str(repo_builder.path()), "--runs", "3"])

    out = capsys.readouterr().out
    assert "PASS repeat" in out
    assert "PASS path-variants" in out
    assert "PASS round-trip" in out
    assert "FAIL" not in out
    assert not (repo_builder.path() / ".ai").exists()


def test_show_prints_symbols(
    repo_builder: RepoBuilder, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.js": "import x from 'x';\nfunction app() {}"})
    output = tmp_path / "ir.json"
    main(["generate", str(repo_builder.path()), "-o", str(output)])
    capsys.readouterr()

    main(["show", str(repo_builder.path()), "-o", str(output)])

    out = capsys.readouterr().out
    assert "app.js" in out
    assert "imports: x" in out
    assert "functions: app" in out


def test_missing_root_exits_with_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(tmp_path / "missing")])

    assert excinfo.value.code == 1


def test_invalid_config_exits_with_error(repo_builder: RepoBuilder) -> None:
    repo_builder.write({".runecho.yml": "ir: [unclosed\n"})

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(repo_builder.path())])

    assert excinfo.value.code == 1


def test_generate_logs_progress_by_default(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.js": "function app() {}"})

    main(["generate", str(repo_builder.path())])

    assert "[runecho] INFO Generated IR for 1 files" in capsys.readouterr().err


def test_quiet_suppresses_info_logs(
    repo_builder: RepoBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    repo_builder.write({"app.js": "function app() {}"})

    main(["generate", str(repo_builder.path()), "--quiet"])

    captured = capsys.readouterr()
    assert "INFO" not in captured.err
    assert "1 files" in captured.out
