"""Derive short display titles for exported units."""

from __future__ import annotations

import re

from .models import ExportedUnit, UnitKind

_TYPE_PATTERN = re.compile(r"export type (.+?)=")
_FUNCTION_PATTERN = re.compile(r"export function (.+)")


def resolve_title(unit: ExportedUnit) -> str:
    """Return the title for ``unit`` from its first signature line, or ``""``."""
    first_line = unit.signature_lines[0] if unit.signature_lines else ""

    if unit.kind is UnitKind.TYPE:
        match = _TYPE_PATTERN.search(first_line)
        if match is None:
            return ""
        return "type " + match.group(1).strip()

    if unit.kind is UnitKind.FUNCTION:
        match = _FUNCTION_PATTERN.search(first_line)
        if match is None:
            return ""
        rest = match.group(1)
        if "<" in rest:
            return rest.split("<", 1)[0].strip()
        return rest.split("(", 1)[0].strip()

    return ""


__all__ = ["resolve_title"]
