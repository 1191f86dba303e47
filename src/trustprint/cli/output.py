# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Output formatting for CLI commands.

Handles JSON vs human-readable text output based on CLI config.
"""

from __future__ import annotations

import json
import sys
from typing import Any

from ..core.attestation import AttestationPlan
from ..core.report import StructuredReport
from .config import get_cli_config

RULE = "─" * 50


def _percent(value: float) -> str:
    return f"{value * 100:g}%"


def render_text(report: StructuredReport) -> str:
    """Render a structured report for a terminal."""
    lines: list[str] = []

    if report.exchange is not None:
        exchange = report.exchange.to_dict()
        lines.append("EXCHANGE HASH REPORT")
        lines.append(RULE)
        lines.append(f"Agents:           {' <-> '.join(exchange['participants'])}")
        lines.append(f"Exchange began:   {exchange['period_start']}")
        lines.append(f"Last activity:    {exchange['period_end']}")
        if report.rhythm is not None:
            rhythm = report.rhythm
            lines.append(f"Message count:    {rhythm.message_count}")
            lines.append("")
            lines.append("Rhythm Metrics:")
            lines.append(f"Avg response:     {rhythm.avg_latency_minutes} minutes")
            lines.append(f"Gap survival:     {_percent(rhythm.gap_survival_ratio)} ({rhythm.gap_count} gaps)")
            lines.append(f"Length variance:  {rhythm.length_variance_chars2} chars^2")
            lines.append(f"Time consistency: {_percent(rhythm.temporal_consistency)}")
        lines.append("")
        lines.append("Hashes:")
        lines.append(f"Commitment:       {exchange['commitment']}")
        lines.append(f"Rhythm sig:       {exchange['rhythm_signature']}")
        lines.append(f"Exchange hash:    {exchange['exchange_hash']}")

    if report.verdict is not None:
        verdict = report.verdict
        if lines:
            lines.append("")
        lines.append("TRUST VERDICT")
        lines.append(RULE)
        mark = "✓ Trusted" if verdict.trusted else "✗ Not trusted"
        lines.append(f"Verdict:          {mark} ({verdict.reason.value})")
        lines.append(f"Stake:            {verdict.stake:.4f} ({verdict.bucket.value})")
        lines.append(f"Sentiment:        {verdict.sentiment:.2f}")
        lines.append(f"Contested:        {'yes' if verdict.contested else 'no'}")
        if verdict.relationships:
            lines.append("Relationships:")
            for fact in verdict.relationships:
                lines.append(f"  [{fact.subject}] [{fact.predicate}] [{fact.object}]  {fact.stake:.4f}")

    for name, error in report.errors.items():
        if lines:
            lines.append("")
        lines.append(f"✗ {name} pipeline failed ({error['kind']}): {error['message']}")

    return "\n".join(lines)


def render_plan(plan: AttestationPlan) -> str:
    """Render a dry-run attestation plan."""
    lines = [
        "DRY RUN - no on-chain action taken",
        f"Exchange atom:    {plan.exchange_atom}",
        f"Exchange hash:    {plan.exchange_hash}",
        "Triples:",
    ]
    lines.extend(f"  {triple}" for triple in plan.triples)
    return "\n".join(lines)


def output_result(data: dict[str, Any], text: str | None = None, output_format: str | None = None) -> None:
    """Print a result in the configured output format.

    JSON output pretty-prints ``data``; text output prints ``text`` when
    given and falls back to JSON otherwise.
    """
    fmt = output_format or get_cli_config().output

    if fmt == "json" or text is None:
        print(json.dumps(data, indent=2, default=str))
    else:
        print(text)


def output_error(message: str) -> None:
    """Print error message to stderr."""
    print(f"Error: {message}", file=sys.stderr)
