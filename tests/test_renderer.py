"""Tests for refdocs.renderer."""

from __future__ import annotations

from pathlib import Path

from refdocs.extractor import extract
from refdocs.models import ExportedUnit, LineSpan, UnitKind
from refdocs.renderer import FragmentRenderer, render, render_file, source_url

REPO = "https://github.com/example/widgets"


def _add_unit() -> ExportedUnit:
    return ExportedUnit(
        kind=UnitKind.FUNCTION,
        signature_lines=("export function add(a: number, b: number): number {",),
        doc_lines=("/**", " * Adds two numbers.", " */"),
        span=LineSpan(start=3, end=3),
    )


def test_render_produces_heading_signature_docs_and_link() -> None:
    fragment = render(REPO, "src/math.ts", _add_unit())

    assert fragment == (
        "## add\n"
        "```javascript\n"
        "export function add(a: number, b: number): number {\n"
        "```\n"
        "/**\n"
        " * Adds two numbers.\n"
        " */\n"
        "[View source](https://github.com/example/widgets/blob/main/src/math.ts#L3-L3)"
    )


def test_render_without_docs_leaves_empty_line() -> None:
    unit = ExportedUnit(
        kind=UnitKind.TYPE,
        signature_lines=("export type Id = string;", ""),
        doc_lines=(),
        span=LineSpan(start=0, end=1),
    )

    fragment = render(REPO, "src/ids.ts", unit)

    assert fragment.split("\n") == [
        "## type Id",
        "```javascript",
        "export type Id = string;",
        "",
        "```",
        "",
        "[View source](https://github.com/example/widgets/blob/main/src/ids.ts#L0-L1)",
    ]


def test_render_is_deterministic() -> None:
    unit = _add_unit()
    assert render(REPO, "src/math.ts", unit) == render(REPO, "src/math.ts", unit)


def test_render_does_not_escape_markdown() -> None:
    unit = ExportedUnit(
        kind=UnitKind.FUNCTION,
        signature_lines=("export function html_<b>(x: string): string {",),
        doc_lines=("/** Returns *bold* <b>html</b> & [links](x) */",),
        span=LineSpan(start=0, end=0),
    )

    fragment = render(REPO, "src/a.ts", unit)

    assert fragment.startswith("## html_\n")
    assert "/** Returns *bold* <b>html</b> & [links](x) */" in fragment
    assert "&amp;" not in fragment


def test_render_with_unresolved_title_keeps_heading_marker() -> None:
    unit = ExportedUnit(
        kind=UnitKind.TYPE,
        signature_lines=("export type {", ""),
        doc_lines=(),
        span=LineSpan(start=0, end=1),
    )
    assert render(REPO, "src/a.ts", unit).startswith("## \n```javascript\n")


def test_source_url_uses_main_branch_and_zero_based_lines() -> None:
    assert (
        source_url(REPO, "lib/deep/file.ts", LineSpan(start=0, end=12))
        == "https://github.com/example/widgets/blob/main/lib/deep/file.ts#L0-L12"
    )


def test_render_file_joins_fragments_with_single_newline() -> None:
    text = "export function a() {\n}\nexport function b() {\n}\n"
    units = extract(text)

    markdown = render_file(REPO, "src/ab.ts", units)

    first = render(REPO, "src/ab.ts", units[0])
    second = render(REPO, "src/ab.ts", units[1])
    assert markdown == first + "\n" + second
    assert "\n\n## b" not in markdown


def test_render_file_without_units_is_empty() -> None:
    assert render_file(REPO, "src/empty.ts", []) == ""


def test_custom_template_directory_overrides_fragment(tmp_path: Path) -> None:
    templates = tmp_path / "templates"
    templates.mkdir()
    (templates / "fragment.md.j2").write_text(
        "### {{ title }} ({{ unit.kind.value }})\n{{ source_url }}\n", encoding="utf-8"
    )

    fragment = FragmentRenderer(templates).render(REPO, "src/math.ts", _add_unit())

    assert fragment == (
        "### add (function)\n"
        "https://github.com/example/widgets/blob/main/src/math.ts#L3-L3"
    )


def test_missing_custom_template_falls_back_to_builtin(tmp_path: Path) -> None:
    fragment = FragmentRenderer(tmp_path).render(REPO, "src/math.ts", _add_unit())
    assert fragment == render(REPO, "src/math.ts", _add_unit())
