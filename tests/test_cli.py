"""CLI parser and command behaviour tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from refdocs.cli import _build_parser, main
from tests._fixtures.project_builder import ProjectBuilder


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "generate"])
    assert args.verbose is True
    assert args.command == "generate"
    assert args.path == "."


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["generate", "--verbose"])
    assert args.verbose is True
    assert args.command == "generate"


def test_cli_parses_generate_options() -> None:
    parser = _build_parser()
    args = parser.parse_args(
        ["generate", "project", "--output-dir", "out", "--concurrency", "3", "--dry-run"]
    )
    assert args.path == "project"
    assert args.output_dir == Path("out")
    assert args.concurrency == 3
    assert args.dry_run is True


def test_cli_rejects_non_positive_concurrency() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["generate", "--concurrency", "0"])


def test_inspect_prints_units(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    source = tmp_path / "shapes.ts"
    source.write_text(
        "/**\n * Docs.\n */\nexport type Point = { x: number };\n\n"
        "export function origin(): Point {\n    return { x: 0 };\n}\n",
        encoding="utf-8",
    )

    main(["inspect", str(source)])

    assert capsys.readouterr().out.splitlines() == [
        "type type Point L3-L4",
        "function origin L5-L5",
    ]


def test_generate_writes_references(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.write_metadata()
    project_builder.write({"src/index.ts": "export function main() {\n}\n"})

    main(["generate", str(project_builder.path())])

    assert "Wrote 1 reference files (1 units)" in capsys.readouterr().out
    assert project_builder.read("docs/src/index.md").startswith("## main\n")


def test_generate_exits_on_config_error(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(tmp_path)])
    assert excinfo.value.code == 1


def test_generate_exits_non_zero_when_a_file_fails(project_builder: ProjectBuilder) -> None:
    project_builder.write_metadata()
    project_builder.write({"src/index.ts": "export function main() {\n}\n"})
    (project_builder.path() / "src" / "broken.ts").write_bytes(b"\xff\xff")

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(project_builder.path())])

    assert excinfo.value.code == 1
    assert (project_builder.path() / "docs" / "src" / "index.md").exists()


def test_verbose_logs_each_file_and_quiet_hides_progress(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.write_metadata()
    project_builder.write({"src/index.ts": "export function main() {\n}\n"})

    main(["-v", "generate", str(project_builder.path())])
    verbose_err = capsys.readouterr().err
    main(["generate", "--quiet", str(project_builder.path())])
    quiet_err = capsys.readouterr().err

    assert "[refdocs] DEBUG Found src/index.ts" in verbose_err
    assert "[refdocs] INFO" in verbose_err
    assert "[refdocs] INFO" not in quiet_err
    assert "DEBUG" not in quiet_err


def test_generate_exits_when_package_json_is_not_utf8(project_builder: ProjectBuilder) -> None:
    project_builder.write_metadata()
    (project_builder.path() / "package.json").write_bytes(b'{"homepage": "\xff"}')

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(project_builder.path())])

    assert excinfo.value.code == 1


def test_generate_exits_on_broken_fragment_template(
    project_builder: ProjectBuilder, capsys: pytest.CaptureFixture[str]
) -> None:
    project_builder.write_metadata()
    project_builder.write(
        {
            "src/index.ts": "export function main() {\n}\n",
            ".refdocs.yml": "templates_dir: tpl\n",
            "tpl/fragment.md.j2": "## {{ title \n",
        }
    )

    with pytest.raises(SystemExit) as excinfo:
        main(["generate", str(project_builder.path())])

    assert excinfo.value.code == 1
    assert "Invalid fragment template" in capsys.readouterr().err
