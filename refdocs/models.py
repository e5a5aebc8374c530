"""Core data models shared across refdocs components."""

from dataclasses import dataclass
from enum import Enum
from typing import Tuple


class UnitKind(str, Enum):
    """Kind of exported declaration recognised by the extractor."""

    TYPE = "type"
    FUNCTION = "function"


@dataclass(frozen=True)
class LineSpan:
    """Zero-based, inclusive line range of a unit in its source file."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Span start {self.start} is after end {self.end}")


@dataclass(frozen=True)
class ExportedUnit:
    """One exported type or function declaration with its attached docs."""

    kind: UnitKind
    signature_lines: Tuple[str, ...]
    doc_lines: Tuple[str, ...]
    span: LineSpan


@dataclass(frozen=True)
class RepositoryContext:
    """Project metadata used to build links back to the hosted repository."""

    name: str
    homepage: str

    @property
    def base_url(self) -> str:
        return self.homepage.split("#", 1)[0]
