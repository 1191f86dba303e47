"""Exchange commands: hash, compare, attest."""

from __future__ import annotations

import argparse
import logging

from ...core.attestation import plan_exchange_attestation
from ...core.commitment import commitments_agree, normalize_hash
from ...core.exceptions import TrustprintException
from ...core.models import ExchangeFingerprint
from ...core.pipeline import FingerprintService
from ...core.report import format_report
from ..output import output_error, output_result, render_plan, render_text
from ..utils import build_message_store, parse_agents, parse_since

logger = logging.getLogger(__name__)


def _add_exchange_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--agents", required=True, help="Two agents, comma-separated (e.g. axiom,veritas)")
    parser.add_argument("--since", help="Only consider messages at or after this ISO date")
    parser.add_argument("--dir", help="Intercom directory (default: $INTERCOM_DIR or ~/.clawdbot/intercom)")


def register(subparsers: argparse._SubParsersAction) -> None:
    """Register the exchange commands on the CLI parser."""
    hash_parser = subparsers.add_parser("hash", help="Compute the exchange fingerprint between two agents")
    _add_exchange_args(hash_parser)
    hash_parser.set_defaults(func=cmd_hash)

    compare_parser = subparsers.add_parser("compare", help="Check a counterpart's exchange hash against ours")
    _add_exchange_args(compare_parser)
    compare_parser.add_argument("--hash", required=True, dest="remote_hash", help="Counterpart's exchange hash (0x...)")
    compare_parser.set_defaults(func=cmd_compare)

    attest_parser = subparsers.add_parser("attest", help="Show the attestation plan for an exchange (dry run)")
    _add_exchange_args(attest_parser)
    attest_parser.add_argument("--label-a", help="Label for the first (sorted) agent")
    attest_parser.add_argument("--label-b", help="Label for the second (sorted) agent")
    attest_parser.set_defaults(func=cmd_attest)


def _fingerprint(args: argparse.Namespace) -> ExchangeFingerprint:
    agent_a, agent_b = parse_agents(args.agents)
    service = FingerprintService(message_store=build_message_store(args))
    return service.fingerprint_exchange(agent_a, agent_b, since=parse_since(args.since))


def cmd_hash(args: argparse.Namespace) -> int:
    """Compute and print the exchange fingerprint."""
    try:
        fingerprint = _fingerprint(args)
    except TrustprintException as e:
        output_error(e.message)
        return 1

    report = format_report(commitment=fingerprint.commitment, rhythm=fingerprint.rhythm)
    text = render_text(report) + "\n\nTrust's fingerprint, not its diary.\nThe pattern is visible, the content stays private."
    output_result(report.to_dict(), text=text)
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Recompute the local exchange hash and compare it to the counterpart's."""
    try:
        remote = "0x" + normalize_hash(args.remote_hash)
        fingerprint = _fingerprint(args)
    except TrustprintException as e:
        output_error(e.message)
        return 1

    agree = commitments_agree(fingerprint.commitment, remote)
    data = {
        "agree": agree,
        "local_exchange_hash": fingerprint.commitment.exchange_hash,
        "remote_exchange_hash": remote,
        "participants": list(fingerprint.commitment.participants),
    }
    if agree:
        text = f"✓ Hashes agree: {fingerprint.commitment.exchange_hash}"
    else:
        text = (
            "✗ Hashes differ\n"
            f"  local:  {fingerprint.commitment.exchange_hash}\n"
            f"  remote: {remote}"
        )
    output_result(data, text=text)
    return 0 if agree else 1


def cmd_attest(args: argparse.Namespace) -> int:
    """Print the dry-run attestation plan for an exchange."""
    try:
        fingerprint = _fingerprint(args)
    except TrustprintException as e:
        output_error(e.message)
        return 1

    plan = plan_exchange_attestation(fingerprint.commitment, label_a=args.label_a, label_b=args.label_b)
    output_result(plan.to_dict(), text=render_plan(plan))
    return 0
