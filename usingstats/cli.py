"""CLI entrypoint for usingstats."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import ConfigError, UsingStatsConfig, load_config
from .errors import ExitCode, UsingStatsError
from .locator import resolve_target
from .logging import configure_logging, get_logger
from .models import TargetReference
from .orchestrator import CancellationToken, Orchestrator, RunOptions
from .report import Reporter


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return number


def _positive_int(value: str) -> int:
    number = _non_negative_int(value)
    if number == 0:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="usingstats",
        description=(
            "Count how often each namespace is imported across a C# project or "
            "solution, to pick candidates for global usings."
        ),
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to a .sln or MSBuild project file (such as .csproj), or a folder to search.",
    )
    parser.add_argument(
        "-c",
        "--count",
        type=_non_negative_int,
        default=None,
        help="The maximum number of results to return.",
    )
    parser.add_argument(
        "-q",
        "--no-warn",
        action="store_true",
        help="Suppress warnings.",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Configuration file (defaults to .usingstats.yml next to the target).",
    )
    parser.add_argument(
        "-j",
        "--max-workers",
        type=_positive_int,
        default=None,
        help="Number of threads used to parse documents.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write log records to this file.",
    )
    return parser


def _load_config(args: argparse.Namespace, reference: TargetReference) -> UsingStatsConfig:
    if args.config:
        return load_config(Path(args.config), required=True)
    target = Path(reference.raw)
    return load_config(target if reference.kind == "directory" else target.parent)


def _build_options(args: argparse.Namespace, config: UsingStatsConfig) -> RunOptions:
    return RunOptions(
        count=args.count if args.count is not None else config.count,
        max_workers=args.max_workers or config.max_workers,
        generated_files=tuple(config.generated_files),
        exclude_paths=tuple(config.exclude_paths),
        exclude_root=config.root,
        grammar=config.grammar,
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for usingstats."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(
        verbose=bool(args.verbose), quiet=bool(args.no_warn), log_file=args.log_file
    )
    logger = get_logger("cli")

    # Path errors take precedence over a broken config file.
    try:
        reference = resolve_target(args.path)
    except UsingStatsError as exc:
        parser.exit(int(exc.exit_code), f"{exc}\n")

    try:
        config = _load_config(args, reference)
    except ConfigError as exc:
        parser.exit(int(ExitCode.CONFIG_INVALID), f"{exc}. Cannot continue.\n")

    options = _build_options(args, config)
    show_warnings = not (args.no_warn or config.no_warn)

    token = CancellationToken()
    try:
        result = Orchestrator().run(reference, options, token)
    except KeyboardInterrupt:
        token.cancel()
        parser.exit(int(ExitCode.CANCELLED), "Operation cancelled.\n")
    except UsingStatsError as exc:
        logger.debug("Run aborted", exc_info=True)
        parser.exit(int(exc.exit_code), f"{exc}\n")

    logger.debug(
        "Reporting %d namespaces from %d documents of %s",
        len(result.rows),
        result.documents,
        result.work_item,
    )
    Reporter().report(result.rows, result.warnings, show_warnings=show_warnings)


if __name__ == "__main__":
    main(sys.argv[1:])
