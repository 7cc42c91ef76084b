"""Command line entry point: ``ttlatency INPUT.xml``."""

import argparse
import logging
import sys

from .analysis import latency_report
from .config import (COMPLETION_EXACT, COMPLETION_RULES, MISS_ABSOLUTE,
                     MISS_REFERENCES, AnalysisSettings)
from .errors import LatencyAnalysisError, LoaderError
from .loader import parse_workload, trace
from .report import ReportKind, export_report, file_to_stdout, report_file_name

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="ttlatency",
        description="Per-instance latency analysis of a time-triggered "
                    "program table.")
    parser.add_argument("input", help="workload/schedule XML file")
    parser.add_argument("--format", choices=[k.value for k in ReportKind],
                        default=ReportKind.TEXT.value,
                        help="report file format (default: text)")
    parser.add_argument("-o", "--output",
                        help="report file (default: <input>_latency.<ext>)")
    parser.add_argument("--completion", choices=COMPLETION_RULES,
                        default=COMPLETION_EXACT,
                        help="instance completes when matching attempts are "
                             "exactly / at least the required count")
    parser.add_argument("--miss-reference", choices=MISS_REFERENCES,
                        default=MISS_ABSOLUTE,
                        help="compare latency with the absolute or relative "
                             "deadline")
    parser.add_argument("--workers", type=int, default=1,
                        help="analyze flows on this many threads")
    parser.add_argument("--trace", action="store_true",
                        help="print the parsed workload before analyzing")
    parser.add_argument("--stdout", action="store_true",
                        help="print the written report")
    parser.add_argument("-v", "--verbose", action="count", default=0,
                        help="-v for INFO, -vv for DEBUG logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    level = logging.WARNING
    if args.verbose == 1:
        level = logging.INFO
    elif args.verbose > 1:
        level = logging.DEBUG
    logging.basicConfig(level=level, stream=sys.stderr,
                        format="%(levelname)s %(name)s: %(message)s")

    try:
        settings = AnalysisSettings(completion_rule=args.completion,
                                    miss_reference=args.miss_reference,
                                    max_workers=args.workers)
    except ValueError as exc:
        print(f"ttlatency: {exc}", file=sys.stderr)
        return 2

    try:
        # 1. Parse
        workload, schedule = parse_workload(args.input)
        if args.trace:
            trace(workload, schedule)

        # 2. Analyze
        report = latency_report(workload, schedule, settings)
    except (LoaderError, LatencyAnalysisError) as exc:
        print(f"ttlatency: {exc}", file=sys.stderr)
        return 2

    # 3. Export
    kind = ReportKind(args.format)
    out_file = args.output or report_file_name(args.input, kind)
    export_report(report, workload, out_file, kind)
    logger.info("report written to %s", out_file)

    if args.stdout:
        file_to_stdout(out_file)
    return 0
