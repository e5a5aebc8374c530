"""Markdown API reference generator for exported declarations."""

from .extractor import extract
from .models import ExportedUnit, LineSpan, RepositoryContext, UnitKind
from .renderer import render, render_file, source_url
from .titles import resolve_title

__all__ = [
    "ExportedUnit",
    "LineSpan",
    "RepositoryContext",
    "UnitKind",
    "extract",
    "render",
    "render_file",
    "resolve_title",
    "source_url",
]
