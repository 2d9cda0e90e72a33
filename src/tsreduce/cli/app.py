import argparse
import logging
import sys
from typing import Optional, Sequence

from pydantic import ValidationError

from tsreduce.cli.commands.run import build_run_config, handle as handle_run
from tsreduce.cli.commands.smooth import handle as handle_smooth
from tsreduce.config.resolution import resolve_log_level
from tsreduce.errors import TransformError

logger = logging.getLogger("tsreduce.cli")


def _configure_logging(level: int) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    console = Console(file=sys.stderr, markup=False, highlight=False, soft_wrap=True)
    handler = RichHandler(
        console=console,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    logging.basicConfig(level=level, format="%(message)s", handlers=[handler], force=True)


def build_parser() -> argparse.ArgumentParser:
    # Common options shared by top-level and subcommands
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="set logging level (default: WARNING)",
    )

    parser = argparse.ArgumentParser(
        prog="tsreduce",
        description="Downsample (LTTB) or smooth (ASAP) time series, one output series per group.",
        parents=[common],
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_run = sub.add_parser(
        "run",
        help="aggregate rows from a CSV or JSON-lines file into output series",
        parents=[common],
    )
    p_run.add_argument("--config", "-c", help="path to a transform.yaml run config")
    p_run.add_argument("--transform", "-t", help="aggregate to run (lttb | asap)")
    p_run.add_argument("--resolution", "-r", type=int, help="target output size")
    p_run.add_argument("--input", "-i", dest="input_path", help="input file (default: stdin)")
    p_run.add_argument(
        "--input-format",
        choices=["csv", "jsonl"],
        help="input format (inferred from the file suffix when omitted)",
    )
    p_run.add_argument("--time-field", help="column holding timestamps (default: time)")
    p_run.add_argument("--value-field", help="column holding values (default: value)")
    p_run.add_argument("--group-by", help="column whose values split rows into groups")
    p_run.add_argument(
        "--out-format",
        choices=["jsonl", "csv", "print"],
        help="output format (default: jsonl)",
    )
    p_run.add_argument("--output", "-o", dest="out_path", help="output file (default: stdout)")
    p_run.add_argument(
        "--progress",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="show a progress bar while reading rows",
    )

    p_smooth = sub.add_parser(
        "smooth",
        help="smooth raw numbers with the ASAP kernel (reads stdin when no values are given)",
        parents=[common],
    )
    p_smooth.add_argument("--resolution", "-r", type=int, required=True, help="target output size")
    p_smooth.add_argument("values", nargs="*", help="numbers to smooth")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.cmd == "smooth":
        _configure_logging(resolve_log_level(args.log_level).value)
        try:
            handle_smooth(resolution=args.resolution, values=args.values)
        except ValueError as exc:
            logger.error("%s", exc)
            return 1
        return 0

    try:
        config = build_run_config(
            config_path=args.config,
            transform=args.transform,
            resolution=args.resolution,
            input_path=args.input_path,
            input_format=args.input_format,
            time_field=args.time_field,
            value_field=args.value_field,
            group_by=args.group_by,
            out_format=args.out_format,
            out_path=args.out_path,
            progress=args.progress,
        )
    except (ValidationError, FileNotFoundError, TypeError, ValueError) as exc:
        parser.error(str(exc))

    _configure_logging(resolve_log_level(args.log_level, config.log_level).value)
    try:
        handle_run(config)
    except TransformError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1
    except ValueError as exc:
        logger.error("invalid input: %s", exc)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
