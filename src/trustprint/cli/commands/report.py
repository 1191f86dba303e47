"""Combined report command: exchange fingerprint and trust verdict together."""

from __future__ import annotations

import argparse
import asyncio

from ...core.exceptions import TrustprintException
from ...core.pipeline import FingerprintService
from ..output import output_error, output_result, render_text
from ..utils import build_message_store, build_signal_reader, build_threshold, parse_agents, parse_since
from .trust import add_threshold_args


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the report command on the CLI parser."""
    report_parser = subparsers.add_parser("report", help="Run the exchange and trust pipelines concurrently")
    report_parser.add_argument("--agents", help="Two agents, comma-separated, for the exchange fingerprint")
    report_parser.add_argument("--identity", help="Atom label or 0x atom id for the trust verdict")
    report_parser.add_argument("--since", help="Only consider messages at or after this ISO date")
    report_parser.add_argument("--dir", help="Intercom directory")
    add_threshold_args(report_parser)
    report_parser.set_defaults(func=cmd_report)


def cmd_report(args: argparse.Namespace) -> int:
    """Run whichever pipelines were requested; exit 1 if any failed."""
    if not args.agents and not args.identity:
        output_error("Nothing to report: pass --agents and/or --identity")
        return 1

    try:
        participants = parse_agents(args.agents) if args.agents else None
        since = parse_since(args.since)
        threshold = build_threshold(args)
        service = FingerprintService(
            message_store=build_message_store(args) if participants else None,
            signal_reader=build_signal_reader(args) if args.identity else None,
        )
        report = asyncio.run(
            service.run(participants=participants, identity_key=args.identity, threshold=threshold, since=since)
        )
    except TrustprintException as e:
        output_error(e.message)
        return 1

    output_result(report.to_dict(), text=render_text(report))
    return 0 if report.ok else 1
