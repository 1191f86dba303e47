# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Trustprint Contributors

"""Value objects shared by the rhythm, commitment and trust pipelines.

Every type here is immutable. Records are built once from adapter output
and never mutated; derived objects are freshly constructed per call.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any

from .exceptions import ValidationException

ParticipantId = str


def to_utc(moment: datetime) -> datetime:
    """Normalise a datetime to UTC; naive values are taken to be UTC."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def format_instant(moment: datetime) -> str:
    """Serialise an instant as ``YYYY-MM-DDTHH:MM:SS.mmmZ``.

    Millisecond precision with a ``Z`` suffix is the interchange form used
    for hashing, so every party must produce exactly this string.
    """
    moment = to_utc(moment)
    return moment.strftime("%Y-%m-%dT%H:%M:%S.") + f"{moment.microsecond // 1000:03d}Z"


def sort_participants(participants: tuple[ParticipantId, ParticipantId] | list[ParticipantId]) -> tuple[ParticipantId, ParticipantId]:
    """Return the participant pair in lexicographic order.

    Raises:
        ValidationException: If the pair is not exactly two distinct ids.
    """
    pair = list(participants)
    if len(pair) != 2:
        raise ValidationException("Exactly two participants are required", field="participants", value=pair)
    if pair[0] == pair[1]:
        raise ValidationException("Participants must be distinct", field="participants", value=pair)
    first, second = sorted(pair)
    return first, second


@dataclass(frozen=True)
class MessageRecord:
    """One message between two participants, reduced to non-content metadata."""

    sender: ParticipantId
    recipient: ParticipantId
    timestamp: datetime
    body_length: int

    def __post_init__(self) -> None:
        if self.body_length < 0:
            raise ValidationException("body_length must be non-negative", field="body_length", value=self.body_length)
        object.__setattr__(self, "timestamp", to_utc(self.timestamp))


@dataclass(frozen=True)
class RhythmMetrics:
    """Behavioral statistics of a transcript. Content-free."""

    response_latencies: tuple[float, ...] = ()
    avg_latency_minutes: float = 0.0
    gap_count: int = 0
    gap_survival_ratio: float = 1.0
    length_variance_chars2: int = 0
    temporal_consistency: float = 0.0
    message_count: int = 0

    def signature_fields(self) -> dict[str, Any]:
        """The four fields that make up the rhythm signature, in hashing order."""
        return {
            "avgLatency": self.avg_latency_minutes,
            "gapSurvival": self.gap_survival_ratio,
            "lengthVariance": self.length_variance_chars2,
            "temporalConsistency": self.temporal_consistency,
        }

    def to_dict(self) -> dict[str, Any]:
        return {
            "message_count": self.message_count,
            "avg_latency_minutes": self.avg_latency_minutes,
            "gap_count": self.gap_count,
            "gap_survival_ratio": self.gap_survival_ratio,
            "length_variance_chars2": self.length_variance_chars2,
            "temporal_consistency": self.temporal_consistency,
            "response_latencies": list(self.response_latencies),
        }


@dataclass(frozen=True)
class ExchangeCommitment:
    """The three layered hashes for one exchange, plus its anchoring metadata.

    Hashes are ``0x``-prefixed lowercase hex strings.
    """

    commitment: str
    rhythm_signature: str
    exchange_hash: str
    participants: tuple[ParticipantId, ParticipantId]
    period_start: datetime
    period_end: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "participants": list(self.participants),
            "period_start": format_instant(self.period_start),
            "period_end": format_instant(self.period_end),
            "commitment": self.commitment,
            "rhythm_signature": self.rhythm_signature,
            "exchange_hash": self.exchange_hash,
        }


@dataclass(frozen=True)
class ExchangeFingerprint:
    """Output of the exchange pipeline: rhythm metrics and their commitment."""

    rhythm: RhythmMetrics
    commitment: ExchangeCommitment


@dataclass(frozen=True)
class RelationshipFact:
    """A claim triple in which the evaluated identity is the subject."""

    subject: str
    predicate: str
    object: str
    triple_id: str | None = None
    stake: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "subject": self.subject,
            "predicate": self.predicate,
            "object": self.object,
            "triple_id": self.triple_id,
            "stake": self.stake,
        }


@dataclass(frozen=True)
class TrustSignal:
    """External facts about an identity, as read from the protocol."""

    identity_exists: bool
    claim_exists: bool = False
    for_stake: float = 0.0
    against_stake: float = 0.0
    relationship_claims: tuple[RelationshipFact, ...] = ()


@dataclass(frozen=True)
class TrustThreshold:
    """Gates applied to stake and sentiment for the default verdict."""

    min_stake: float = 0.1
    min_sentiment: float = 0.8

    def __post_init__(self) -> None:
        if not math.isfinite(self.min_stake) or self.min_stake < 0:
            raise ValidationException("min_stake must be a non-negative number", field="min_stake", value=self.min_stake)
        if not math.isfinite(self.min_sentiment) or not 0.0 <= self.min_sentiment <= 1.0:
            raise ValidationException("min_sentiment must be within [0, 1]", field="min_sentiment", value=self.min_sentiment)


class VerdictReason(str, Enum):
    """Why the engine reached its verdict."""

    NO_IDENTITY = "no_identity"  # Identity atom does not exist
    NO_CLAIM = "no_claim"  # Identity claim triple does not exist
    INSUFFICIENT_STAKE = "insufficient_stake"  # For-stake below min_stake
    LOW_SENTIMENT = "low_sentiment"  # Sentiment below min_sentiment
    TRUSTED = "trusted"  # All gates passed


class StakeBucket(str, Enum):
    """Reporting bucket for a for-stake amount. Never gates the verdict."""

    MINIMAL = "minimal"  # < 0.1
    LOW = "low"  # 0.1 - 1
    MODERATE = "moderate"  # 1 - 10
    STRONG = "strong"  # > 10


@dataclass(frozen=True)
class TrustVerdict:
    """Result of one trust evaluation."""

    trusted: bool
    reason: VerdictReason
    stake: float = 0.0
    sentiment: float = 0.0
    contested: bool = False
    bucket: StakeBucket = StakeBucket.MINIMAL
    relationships: tuple[RelationshipFact, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "trusted": self.trusted,
            "reason": self.reason.value,
            "stake": self.stake,
            "bucket": self.bucket.value,
            "sentiment": self.sentiment,
            "contested": self.contested,
            "relationships": [r.to_dict() for r in self.relationships],
        }
