"""CLI entrypoints for refdocs commands."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError
from .extractor import extract
from .logging import configure_logging
from .orchestrator import Orchestrator
from .titles import resolve_title


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_quiet_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=argparse.SUPPRESS if suppress_default else False,
        help="Only report warnings and failures.",
    )


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from exc
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="refdocs",
        description="Generate Markdown API references from exported declarations.",
    )
    _add_verbose_option(parser)
    _add_quiet_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Write one Markdown reference file per matched source file.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_quiet_option(generate_parser, suppress_default=True)
    generate_parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )
    generate_parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for generated references (defaults to docs/ or .refdocs.yml).",
    )
    generate_parser.add_argument(
        "--concurrency",
        type=_positive_int,
        default=None,
        help="Number of worker threads used for file I/O.",
    )
    generate_parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the files that would be written without touching the disk.",
    )

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Print the exported units found in a single source file.",
    )
    _add_verbose_option(inspect_parser, suppress_default=True)
    _add_quiet_option(inspect_parser, suppress_default=True)
    inspect_parser.add_argument("file", type=Path, help="Source file to scan.")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for refdocs commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet))

    if args.command == "generate":
        _run_generate(parser, args)
    elif args.command == "inspect":
        _run_inspect(parser, args)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _run_generate(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    dry_run = bool(getattr(args, "dry_run", False))
    try:
        report = Orchestrator().run(
            args.path,
            output_dir=args.output_dir,
            concurrency=args.concurrency,
            dry_run=dry_run,
        )
    except ConfigError as exc:
        parser.exit(1, f"refdocs generate failed: {exc}\n")
    except (FileNotFoundError, NotADirectoryError) as exc:
        parser.exit(1, f"{exc}\n")

    if dry_run:
        print("Reference files (dry-run):")
        for path in report.written:
            print(f"  {_relativize(path)}")
    else:
        print(f"Wrote {len(report.written)} reference files ({report.unit_count} units)")

    if not report.ok:
        failures = "\n".join(f"  {source}: {error}" for source, error in sorted(report.failed.items()))
        parser.exit(1, f"Failed to document {len(report.failed)} files:\n{failures}\n")


def _run_inspect(parser: argparse.ArgumentParser, args: argparse.Namespace) -> None:
    try:
        text = args.file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        parser.exit(1, f"Cannot read {args.file}: {exc}\n")

    for unit in extract(text):
        print(f"{unit.kind.value} {resolve_title(unit)} L{unit.span.start}-L{unit.span.end}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
