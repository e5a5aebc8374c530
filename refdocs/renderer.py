"""Render exported units into Markdown reference fragments."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List

from jinja2 import Environment, FileSystemLoader

from .models import ExportedUnit, LineSpan
from .titles import resolve_title

FRAGMENT_TEMPLATE = "fragment.md.j2"
FENCE_LANGUAGE = "javascript"
SOURCE_BRANCH = "main"


def source_url(repo_base_url: str, file_path: str, span: LineSpan) -> str:
    """Deep link to ``file_path`` at ``span`` (zero-based, as scanned)."""
    return f"{repo_base_url}/blob/{SOURCE_BRANCH}/{file_path}#L{span.start}-L{span.end}"


class FragmentRenderer:
    """Turns exported units into Markdown using a Jinja fragment template."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self._env = self._create_env(templates_dir)
        self._template = self._env.get_template(FRAGMENT_TEMPLATE)

    def render(self, repo_base_url: str, file_path: str, unit: ExportedUnit) -> str:
        """Return the Markdown fragment for one unit. Markdown is not escaped."""
        return self._template.render(
            title=resolve_title(unit),
            fence_language=FENCE_LANGUAGE,
            signature="\n".join(unit.signature_lines),
            documentation="\n".join(unit.doc_lines),
            source_url=source_url(repo_base_url, file_path, unit.span),
            unit=unit,
            file_path=file_path,
        )

    def render_file(
        self, repo_base_url: str, file_path: str, units: Iterable[ExportedUnit]
    ) -> str:
        """Concatenate the fragments for every unit of one source file."""
        fragments: List[str] = [self.render(repo_base_url, file_path, unit) for unit in units]
        return "\n".join(fragments)

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        loader = FileSystemLoader(directories)
        return Environment(loader=loader, autoescape=False, trim_blocks=True, lstrip_blocks=True)


_default_renderer: FragmentRenderer | None = None


def _get_default_renderer() -> FragmentRenderer:
    global _default_renderer
    if _default_renderer is None:
        _default_renderer = FragmentRenderer()
    return _default_renderer


def render(repo_base_url: str, file_path: str, unit: ExportedUnit) -> str:
    """Render ``unit`` with the built-in fragment template."""
    return _get_default_renderer().render(repo_base_url, file_path, unit)


def render_file(repo_base_url: str, file_path: str, units: Iterable[ExportedUnit]) -> str:
    """Render every unit of one file with the built-in fragment template."""
    return _get_default_renderer().render_file(repo_base_url, file_path, units)


__all__ = [
    "FENCE_LANGUAGE",
    "FRAGMENT_TEMPLATE",
    "FragmentRenderer",
    "render",
    "render_file",
    "source_url",
]
