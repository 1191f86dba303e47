"""Trust verification command."""

from __future__ import annotations

import argparse

from ...core.exceptions import TrustprintException
from ...core.pipeline import FingerprintService
from ...core.report import format_report
from ..output import output_error, output_result, render_text
from ..utils import build_signal_reader, build_threshold


def add_threshold_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--min-stake", type=float, help="Minimum for-stake to trust (default: $TRUSTPRINT_MIN_STAKE)")
    parser.add_argument("--min-sentiment", type=float, help="Minimum sentiment to trust (default: $TRUSTPRINT_MIN_SENTIMENT)")
    parser.add_argument("--endpoint", help="GraphQL indexer endpoint")


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the verify command on the CLI parser."""
    verify_parser = subparsers.add_parser("verify", help="Evaluate trust in an identity (name or 0x atom id)")
    verify_parser.add_argument("identity", help="Atom label or 0x-prefixed atom id")
    add_threshold_args(verify_parser)
    verify_parser.set_defaults(func=cmd_verify)


def cmd_verify(args: argparse.Namespace) -> int:
    """Evaluate trust in an identity; exit 0 only when trusted."""
    try:
        threshold = build_threshold(args)
        service = FingerprintService(signal_reader=build_signal_reader(args))
        verdict = service.evaluate_identity(args.identity, threshold)
    except TrustprintException as e:
        output_error(e.message)
        return 1

    report = format_report(verdict=verdict)
    data = {"identity": args.identity, **report.to_dict()}
    output_result(data, text=f"Identity:         {args.identity}\n" + render_text(report))
    return 0 if verdict.trusted else 1
