"""CLI entrypoint for tenantaudit."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .auditor import Auditor
from .config import CONFIG_FILENAME, AuditConfig, ConfigError, load_config
from .logging import configure_logging, get_logger, skipped_module_tally
from .report import ReportRenderer, render_json

EXIT_OK = 0
EXIT_FATAL = 1
EXIT_BELOW_THRESHOLD = 2


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'") from None
    if number < 1:
        raise argparse.ArgumentTypeError("must be at least 1")
    return number


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got '{value}'") from None
    if number < 0:
        raise argparse.ArgumentTypeError("must not be negative")
    return number


def _score(value: str) -> int:
    number = _non_negative_int(value)
    if number > 100:
        raise argparse.ArgumentTypeError("must be between 0 and 100")
    return number


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tenantaudit",
        description="Report how far data-access modules have been retrofitted for tenant isolation.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        help=(
            "Directory containing the modules to audit (defaults to the directory "
            "holding --config, otherwise the current directory)."
        ),
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        help="Path to a .tenantaudit.yml file (defaults to one inside PATH, if present).",
    )
    parser.add_argument(
        "--format",
        choices=("text", "json"),
        default="text",
        help="Output format for the report.",
    )
    parser.add_argument(
        "-j",
        "--jobs",
        type=_positive_int,
        help="Read and count modules on this many worker threads.",
    )
    parser.add_argument(
        "-r",
        "--recursive",
        action="store_true",
        default=None,
        help="Include modules in subdirectories.",
    )
    parser.add_argument(
        "--limit",
        type=_non_negative_int,
        help="Maximum number of modules listed under next steps.",
    )
    parser.add_argument(
        "--ascii",
        action="store_true",
        default=None,
        help="Use ASCII band tags and progress bar instead of emoji.",
    )
    parser.add_argument(
        "--fail-under",
        type=_score,
        metavar="SCORE",
        help="Exit with status 2 when the average score is below SCORE.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        help="Also write log records to this file.",
    )
    return parser


def _apply_overrides(config: AuditConfig, args: argparse.Namespace) -> AuditConfig:
    if args.jobs is not None:
        config.jobs = args.jobs
    if args.recursive is not None:
        config.recursive = args.recursive
    if args.limit is not None:
        config.report.remediation_limit = args.limit
    if args.ascii is not None:
        config.report.ascii = args.ascii
    return config


def main(argv: list[str] | None = None) -> int:
    """CLI entrypoint for tenantaudit."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
    logger = get_logger("cli")

    try:
        if args.config is not None:
            config = load_config(args.config, explicit=True)
        else:
            config = load_config(Path(args.path or ".") / CONFIG_FILENAME)
    except ConfigError as exc:
        parser.exit(EXIT_FATAL, f"tenantaudit: configuration error: {exc}\n")
    config = _apply_overrides(config, args)

    try:
        report = Auditor(config).run(args.path)
    except OSError as exc:
        logger.debug("Audit aborted", exc_info=True)
        parser.exit(EXIT_FATAL, f"tenantaudit: cannot read module directory: {exc}\n")

    tally = skipped_module_tally()
    if tally is not None and tally.modules:
        logger.warning(
            "%d unreadable module(s) left out of the report: %s",
            len(tally.modules),
            ", ".join(sorted(tally.modules)),
        )

    if args.format == "json":
        output = render_json(report)
    elif config.report.ascii:
        output = ReportRenderer.ascii(
            name_width=config.report.name_width, bar_width=config.report.bar_width
        ).render(report)
    else:
        output = ReportRenderer(
            name_width=config.report.name_width, bar_width=config.report.bar_width
        ).render(report)
    sys.stdout.write(output)

    if args.fail_under is not None and report.summary.average_score < args.fail_under:
        logger.info(
            "Average score %d%% is below the required %d%%",
            report.summary.average_score,
            args.fail_under,
        )
        return EXIT_BELOW_THRESHOLD
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
