"""Configuration loading for refdocs (package.json, tsconfig.json, .refdocs.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import json5
import yaml

from .models import RepositoryContext

PACKAGE_FILENAME = "package.json"
TSCONFIG_FILENAME = "tsconfig.json"
SETTINGS_FILENAME = ".refdocs.yml"
DEFAULT_OUTPUT_DIR = "docs"


class ConfigError(RuntimeError):
    """Raised when project configuration is missing or cannot be parsed."""


@dataclass
class ProjectConfig:
    """Effective settings for one documentation run."""

    root: Path
    repository: RepositoryContext
    include: List[str]
    output_dir: Path
    exclude_paths: List[str] = field(default_factory=list)
    templates_dir: Optional[Path] = None
    concurrency: Optional[int] = None


def load_config(root: Path) -> ProjectConfig:
    """Load project configuration from ``root``. Raises ``ConfigError`` when unusable."""
    root = root.expanduser().resolve()

    package = _read_json(root / PACKAGE_FILENAME, required=True)
    homepage = _as_str(package.get("homepage"))
    if not homepage:
        raise ConfigError(f"{PACKAGE_FILENAME} does not define a homepage")
    name = _as_str(package.get("name")) or root.name
    repository = RepositoryContext(name=name, homepage=homepage)

    settings = _read_settings(root / SETTINGS_FILENAME)

    include = _as_str_list(settings.get("include"))
    if not include:
        tsconfig = _read_json(root / TSCONFIG_FILENAME, required=False)
        include = _as_str_list(tsconfig.get("include"))
    if not include:
        raise ConfigError(
            f"No include patterns found in {SETTINGS_FILENAME} or {TSCONFIG_FILENAME}"
        )

    output_dir = root / (_as_str(settings.get("output_dir")) or DEFAULT_OUTPUT_DIR)
    templates_dir_str = _as_str(settings.get("templates_dir"))
    templates_dir = root / templates_dir_str if templates_dir_str else None
    concurrency = _as_int(settings.get("concurrency"))
    if concurrency is not None and concurrency < 1:
        concurrency = None

    return ProjectConfig(
        root=root,
        repository=repository,
        include=include,
        output_dir=output_dir,
        exclude_paths=_as_str_list(settings.get("exclude_paths")),
        templates_dir=templates_dir,
        concurrency=concurrency,
    )


def _read_json(path: Path, *, required: bool) -> Dict[str, Any]:
    """Read package.json or tsconfig.json, which may contain comments and trailing commas."""
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        if required:
            raise ConfigError(f"{path.name} not found in {path.parent}") from exc
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc

    try:
        data = json5.loads(text)
    except ValueError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"{path.name} must contain an object at the root")
    return data


def _read_settings(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return {}
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Failed to read {path.name}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, str) and item]
    return []


__all__ = ["ConfigError", "ProjectConfig", "load_config"]
