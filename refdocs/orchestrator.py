"""Pipeline orchestration: collect sources, extract units, write Markdown references."""

from __future__ import annotations

import asyncio
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from jinja2 import TemplateError

from .collector import collect_files
from .config import ConfigError, ProjectConfig, load_config
from .extractor import extract
from .logging import get_logger
from .models import RepositoryContext
from .renderer import FragmentRenderer

DOC_SUFFIX = ".md"


@dataclass
class RunReport:
    """Outcome of a documentation run."""

    written: List[Path] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    unit_count: int = 0
    dry_run: bool = False

    @property
    def ok(self) -> bool:
        return not self.failed


@dataclass
class _FileResult:
    output: Optional[Path] = None
    unit_count: int = 0
    error: Optional[str] = None


def output_path_for(output_dir: Path, rel_path: str) -> Path:
    """Mirror ``rel_path`` under ``output_dir`` with its suffix replaced by ``.md``."""
    return output_dir / Path(rel_path).with_suffix(DOC_SUFFIX)


class Orchestrator:
    """Coordinates the per-file extract/render/write pipeline."""

    def __init__(self, renderer: FragmentRenderer | None = None) -> None:
        self._renderer = renderer
        self.logger = get_logger("orchestrator")

    def run(
        self,
        path: str | Path = ".",
        *,
        output_dir: Path | None = None,
        concurrency: int | None = None,
        dry_run: bool = False,
    ) -> RunReport:
        """Generate reference docs for the project at ``path``."""
        return asyncio.run(
            self.run_async(
                path, output_dir=output_dir, concurrency=concurrency, dry_run=dry_run
            )
        )

    async def run_async(
        self,
        path: str | Path = ".",
        *,
        output_dir: Path | None = None,
        concurrency: int | None = None,
        dry_run: bool = False,
    ) -> RunReport:
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FileNotFoundError(f"Project path not found: {path}")
        if not root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {path}")

        self.logger.info("Looking for project configuration in %s", root)
        config = load_config(root)
        if output_dir is not None:
            config.output_dir = output_dir if output_dir.is_absolute() else root / output_dir
        if concurrency is not None:
            config.concurrency = concurrency
        renderer = self._renderer or self._load_renderer(config)

        repository = config.repository
        self.logger.info(
            "Generating docs for %s hosted at %s", repository.name, repository.base_url
        )
        self.logger.info("Looking for docs in %s", ", ".join(config.include))

        files = collect_files(root, config.include, config.exclude_paths, config.output_dir)
        self.logger.debug("Collector matched %d files", len(files))

        report = RunReport(dry_run=dry_run)
        files = self._drop_colliding_outputs(config.output_dir, files, report)

        with ThreadPoolExecutor(
            max_workers=config.concurrency, thread_name_prefix="refdocs-io"
        ) as executor:
            tasks = [
                self._process_file(executor, config, repository, renderer, rel_path, dry_run)
                for rel_path in files
            ]
            results = await asyncio.gather(*tasks, return_exceptions=True)

        for rel_path, result in zip(files, results):
            if isinstance(result, BaseException):
                self.logger.error("Unexpected failure for %s: %s", rel_path, result)
                report.failed[rel_path] = str(result)
                continue
            if result.error is not None:
                report.failed[rel_path] = result.error
                continue
            if result.output is not None:
                report.written.append(result.output)
            report.unit_count += result.unit_count

        self.logger.info(
            "Documented %d units across %d files (%d failed)",
            report.unit_count,
            len(report.written),
            len(report.failed),
        )
        return report

    @staticmethod
    def _load_renderer(config: ProjectConfig) -> FragmentRenderer:
        try:
            return FragmentRenderer(config.templates_dir)
        except TemplateError as exc:
            raise ConfigError(
                f"Invalid fragment template in {config.templates_dir}: {exc}"
            ) from exc

    def _drop_colliding_outputs(
        self, output_dir: Path, files: Sequence[str], report: RunReport
    ) -> List[str]:
        """Keep the first source per output path; later ones are reported as failed."""
        claimed: Dict[Path, str] = {}
        kept: List[str] = []
        for rel_path in files:
            target = output_path_for(output_dir, rel_path)
            owner = claimed.get(target)
            if owner is not None:
                self.logger.warning(
                    "Skipping %s: %s is already generated from %s", rel_path, target, owner
                )
                report.failed[rel_path] = f"output collision with {owner}: {target}"
                continue
            claimed[target] = rel_path
            kept.append(rel_path)
        return kept

    async def _process_file(
        self,
        executor: ThreadPoolExecutor,
        config: ProjectConfig,
        repository: RepositoryContext,
        renderer: FragmentRenderer,
        rel_path: str,
        dry_run: bool,
    ) -> _FileResult:
        loop = asyncio.get_running_loop()
        self.logger.debug("Found %s", rel_path)
        source = config.root / rel_path

        try:
            text = await loop.run_in_executor(executor, _read_source, source)
        except (OSError, UnicodeDecodeError) as exc:
            self.logger.error("Failed to read %s: %s", rel_path, exc)
            return _FileResult(error=f"read failed: {exc}")

        units = extract(text)
        markdown = renderer.render_file(repository.base_url, rel_path, units)
        target = output_path_for(config.output_dir, rel_path)

        if dry_run:
            self.logger.debug("Would write %d units to %s", len(units), target)
            return _FileResult(output=target, unit_count=len(units))

        try:
            await loop.run_in_executor(executor, _write_output, target, markdown)
        except OSError as exc:
            self.logger.error("Failed to write %s: %s", target, exc)
            return _FileResult(error=f"write failed: {exc}")

        self.logger.debug("Wrote %d units to %s", len(units), target)
        return _FileResult(output=target, unit_count=len(units))


def _read_source(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def _write_output(path: Path, markdown: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(markdown, encoding="utf-8")


__all__ = ["Orchestrator", "RunReport", "output_path_for"]
