"""Structured report merging the exchange and trust pipelines.

Field names are fixed and every key is always present, so downstream
consumers (CLI, attestation writers) can rely on the shape regardless of
which pipelines ran.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .exceptions import TrustprintException
from .models import ExchangeCommitment, RhythmMetrics, TrustVerdict

SCHEMA_VERSION = "1.0"


@dataclass(frozen=True)
class StructuredReport:
    """Versioned record of one fingerprint/verdict run.

    Attributes:
        exchange: Commitment hashes, or None if the exchange pipeline did not run.
        rhythm:   Rhythm metrics behind the commitment, if available.
        verdict:  Trust verdict, or None if the trust pipeline did not run.
        errors:   Per-pipeline error records, keyed by pipeline name.
    """

    exchange: ExchangeCommitment | None = None
    rhythm: RhythmMetrics | None = None
    verdict: TrustVerdict | None = None
    errors: dict[str, dict[str, Any]] = field(default_factory=dict)
    schema_version: str = SCHEMA_VERSION

    @property
    def ok(self) -> bool:
        return not self.errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "schema_version": self.schema_version,
            "exchange": self.exchange.to_dict() if self.exchange else None,
            "rhythm": self.rhythm.to_dict() if self.rhythm else None,
            "verdict": self.verdict.to_dict() if self.verdict else None,
            "errors": dict(self.errors),
        }


def format_report(
    commitment: ExchangeCommitment | None = None,
    verdict: TrustVerdict | None = None,
    rhythm: RhythmMetrics | None = None,
    errors: dict[str, TrustprintException] | None = None,
) -> StructuredReport:
    """Merge whichever pipeline outputs are present into one report."""
    return StructuredReport(
        exchange=commitment,
        rhythm=rhythm,
        verdict=verdict,
        errors={name: exc.to_dict() for name, exc in (errors or {}).items()},
    )
