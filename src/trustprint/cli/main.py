#!/usr/bin/env python3
"""
Trustprint CLI - trust fingerprints for agent exchanges.

Commands:
  trustprint hash --agents A,B            Compute the exchange fingerprint
  trustprint compare --agents A,B --hash  Check a counterpart's exchange hash
  trustprint attest --agents A,B          Show the attestation plan (dry run)
  trustprint verify <identity>            Evaluate trust in an identity
  trustprint report --agents A,B --identity X
                                          Both pipelines, concurrently
"""

from __future__ import annotations

import argparse
import logging
import sys

from ..core.exceptions import ConfigException
from ..core.logging import configure_logging
from .commands import COMMAND_MODULES
from .config import CLIConfig, set_cli_config
from .output import output_error

logger = logging.getLogger(__name__)


def app() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="trustprint",
        description="Trust fingerprints for agent-to-agent exchanges",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  trustprint hash --agents axiom,veritas              Exchange fingerprint
  trustprint hash --agents axiom,veritas --since 2026-02-01
  trustprint compare --agents axiom,veritas --hash 0x...
  trustprint attest --agents axiom,veritas            Dry-run attestation plan
  trustprint verify Alice                             Trust verdict for an identity
  trustprint verify 0x<atom-id> --min-stake 1 --json
  trustprint report --agents axiom,veritas --identity veritas

"Trust's fingerprint, not its diary."
        """,
    )
    parser.add_argument("--json", action="store_true", help="Output as JSON")
    parser.add_argument("--log-level", help="Log level (default: $TRUSTPRINT_LOG_LEVEL or INFO)")

    subparsers = parser.add_subparsers(dest="command", required=True)
    for module in COMMAND_MODULES:
        module.register(subparsers)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point."""
    parser = app()
    args = parser.parse_args(argv)

    try:
        set_cli_config(CLIConfig.load(output="json" if args.json else None))
    except ConfigException as e:
        output_error(e.message)
        return 1

    configure_logging(level=args.log_level)
    logger.debug(f"Running command: {args.command}")
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
