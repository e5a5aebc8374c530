"""Resolve include patterns into the set of source files to document."""

from __future__ import annotations

from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Optional

from .logging import get_logger

GITIGNORE = ".gitignore"
EXCLUDE_PATHS = "exclude_paths"
OUTPUT_DIR = "output_dir"

_VENDORED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "node_modules",
    "__pycache__",
}

logger = get_logger("collector")


@dataclass(frozen=True)
class ExcludeRule:
    """A gitignore-style pattern together with the setting it came from."""

    pattern: str
    source: str
    directory_only: bool = False
    anchored: bool = False
    negate: bool = False

    @classmethod
    def parse(cls, raw: str, source: str) -> Optional["ExcludeRule"]:
        """Build a rule from one pattern line; blank lines and comments yield ``None``.

        Only ``.gitignore`` lines may negate with ``!``. A pattern containing a
        slash (other than a trailing one) is matched against the whole relative
        path, otherwise against single path segments.
        """
        text = raw.strip()
        if not text or text.startswith("#"):
            return None
        negate = source == GITIGNORE and text.startswith("!")
        if negate:
            text = text[1:]
        directory_only = text.endswith("/")
        text = text.rstrip("/")
        anchored = "/" in text
        text = text.lstrip("/")
        if not text:
            return None
        return cls(
            pattern=text,
            source=source,
            directory_only=directory_only,
            anchored=anchored,
            negate=negate,
        )

    def matches(self, candidate: str, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        if self.anchored:
            return fnmatchcase(candidate, self.pattern)
        return fnmatchcase(candidate.rsplit("/", 1)[-1], self.pattern)


class PathFilter:
    """Decides which collected paths are left out of the run."""

    def __init__(self, rules: Iterable[ExcludeRule] = ()) -> None:
        self.rules = list(rules)

    @classmethod
    def for_project(
        cls,
        root: Path,
        exclude_paths: Iterable[str] = (),
        output_dir: Path | None = None,
    ) -> "PathFilter":
        """Combine .gitignore, configured exclusions and the output directory."""
        rules: List[ExcludeRule] = []
        for line in _read_gitignore(root / GITIGNORE):
            rule = ExcludeRule.parse(line, GITIGNORE)
            if rule is not None:
                rules.append(rule)
        for pattern in exclude_paths:
            rule = ExcludeRule.parse(pattern, EXCLUDE_PATHS)
            if rule is not None:
                rules.append(rule)
        if output_dir is not None:
            try:
                rel_output = output_dir.resolve().relative_to(root.resolve()).as_posix()
            except ValueError:
                rel_output = "."
            if rel_output != ".":
                rules.append(
                    ExcludeRule(
                        pattern=rel_output,
                        source=OUTPUT_DIR,
                        directory_only=True,
                        anchored=True,
                    )
                )
        return cls(rules)

    def excludes(self, rel_path: str) -> bool:
        parts = rel_path.split("/")
        if any(part in _VENDORED_DIRS for part in parts[:-1]):
            return True
        # Later rules win; each rule is tried against every parent directory first.
        excluded = False
        for rule in self.rules:
            for index in range(1, len(parts) + 1):
                if rule.matches("/".join(parts[:index]), is_dir=index < len(parts)):
                    excluded = not rule.negate
                    break
        return excluded


def _read_gitignore(path: Path) -> List[str]:
    try:
        return path.read_text(encoding="utf-8").splitlines()
    except FileNotFoundError:
        return []
    except (OSError, UnicodeDecodeError) as exc:
        logger.warning("Ignoring unreadable %s: %s", path, exc)
        return []


def _expand_pattern(root: Path, pattern: str) -> Iterator[Path]:
    normalised = pattern.replace("\\", "/").strip()
    while normalised.startswith("./"):
        normalised = normalised[2:]
    normalised = normalised.strip("/")
    if not normalised:
        return

    candidate = root / normalised
    if candidate.is_dir():
        yield from candidate.rglob("*")
        return
    if not any(char in normalised for char in "*?["):
        if candidate.is_file():
            yield candidate
        return
    yield from root.glob(normalised)


def collect_files(
    root: Path,
    include: Iterable[str],
    exclude_paths: Iterable[str] = (),
    output_dir: Path | None = None,
) -> List[str]:
    """Return sorted, unique root-relative POSIX paths of files matched by ``include``."""
    root = root.resolve()
    path_filter = PathFilter.for_project(root, exclude_paths, output_dir)

    found: set[str] = set()
    for pattern in include:
        for path in _expand_pattern(root, pattern):
            if not path.is_file():
                continue
            try:
                rel_path = path.resolve().relative_to(root).as_posix()
            except ValueError:
                continue
            if path_filter.excludes(rel_path):
                continue
            found.add(rel_path)
    return sorted(found)


__all__ = ["ExcludeRule", "PathFilter", "collect_files"]
