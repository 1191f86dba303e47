"""Trustprint core - rhythm fingerprints, commitment hashes, trust verdicts.

Public API:
    compute_rhythm       Behavioral statistics of a transcript
    build_commitment     Three-part commitment hash for an exchange
    evaluate_trust       Five-level trust decision over protocol signals
    format_report        Versioned record merging both pipelines
    FingerprintService   Runs both pipelines over injected adapters
"""

from __future__ import annotations

from .adapters import InMemoryMessageStore, InMemorySignalReader, MessageStore, SignalReader
from .attestation import AttestationPlan, plan_exchange_attestation
from .commitment import build_commitment, commitments_agree
from .evaluation import evaluate_trust, stake_bucket
from .exceptions import (
    AdapterError,
    ConfigException,
    InsufficientDataError,
    InvalidSignalError,
    TrustprintException,
    ValidationException,
)
from .models import (
    ExchangeCommitment,
    ExchangeFingerprint,
    MessageRecord,
    RelationshipFact,
    RhythmMetrics,
    StakeBucket,
    TrustSignal,
    TrustThreshold,
    TrustVerdict,
    VerdictReason,
)
from .pipeline import FingerprintService
from .report import StructuredReport, format_report
from .rhythm import compute_rhythm

__all__ = [
    "AdapterError",
    "AttestationPlan",
    "ConfigException",
    "ExchangeCommitment",
    "ExchangeFingerprint",
    "FingerprintService",
    "InMemoryMessageStore",
    "InMemorySignalReader",
    "InsufficientDataError",
    "InvalidSignalError",
    "MessageRecord",
    "MessageStore",
    "RelationshipFact",
    "RhythmMetrics",
    "SignalReader",
    "StakeBucket",
    "StructuredReport",
    "TrustSignal",
    "TrustThreshold",
    "TrustVerdict",
    "TrustprintException",
    "ValidationException",
    "VerdictReason",
    "build_commitment",
    "commitments_agree",
    "compute_rhythm",
    "evaluate_trust",
    "format_report",
    "plan_exchange_attestation",
    "stake_bucket",
]
