"""Tests for trustprint.core.models."""

from __future__ import annotations

import dataclasses
import math
from datetime import UTC, datetime, timedelta, timezone

import pytest

from trustprint.core.exceptions import ValidationException
from trustprint.core.models import (
    MessageRecord,
    RelationshipFact,
    RhythmMetrics,
    StakeBucket,
    TrustThreshold,
    TrustVerdict,
    VerdictReason,
    format_instant,
    sort_participants,
    to_utc,
)


class TestInstants:
    """Tests for UTC normalisation and the hashing timestamp format."""

    def test_naive_is_utc(self):
        naive = datetime(2026, 2, 1, 10, 0)
        assert to_utc(naive) == datetime(2026, 2, 1, 10, 0, tzinfo=UTC)

    def test_offset_converted(self):
        plus_two = timezone(timedelta(hours=2))
        moment = datetime(2026, 2, 1, 12, 0, tzinfo=plus_two)
        assert to_utc(moment).hour == 10
        assert to_utc(moment).tzinfo == UTC

    def test_format_has_millis_and_z(self):
        moment = datetime(2026, 2, 1, 10, 0, 5, 123456, tzinfo=UTC)
        assert format_instant(moment) == "2026-02-01T10:00:05.123Z"

    def test_format_zero_millis(self):
        assert format_instant(datetime(2026, 2, 1, tzinfo=UTC)) == "2026-02-01T00:00:00.000Z"

    def test_format_converts_offset(self):
        moment = datetime(2026, 2, 1, 3, 0, tzinfo=timezone(timedelta(hours=-5)))
        assert format_instant(moment) == "2026-02-01T08:00:00.000Z"


class TestSortParticipants:
    def test_sorted(self):
        assert sort_participants(("veritas", "axiom")) == ("axiom", "veritas")
        assert sort_participants(["axiom", "veritas"]) == ("axiom", "veritas")

    def test_same_participant_rejected(self):
        with pytest.raises(ValidationException):
            sort_participants(("axiom", "axiom"))

    @pytest.mark.parametrize("pair", [(), ("axiom",), ("a", "b", "c")])
    def test_wrong_count_rejected(self, pair):
        with pytest.raises(ValidationException) as exc_info:
            sort_participants(pair)
        assert exc_info.value.field == "participants"


class TestMessageRecord:
    def test_timestamp_normalised(self):
        record = MessageRecord("axiom", "veritas", datetime(2026, 2, 1, 10, 0), 5)
        assert record.timestamp.tzinfo == UTC

    def test_negative_length_rejected(self):
        with pytest.raises(ValidationException):
            MessageRecord("axiom", "veritas", datetime(2026, 2, 1, tzinfo=UTC), -1)

    def test_frozen(self):
        record = MessageRecord("axiom", "veritas", datetime(2026, 2, 1, tzinfo=UTC), 5)
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.body_length = 10  # type: ignore[misc]


class TestRhythmMetrics:
    def test_defaults(self):
        metrics = RhythmMetrics()
        assert metrics.gap_survival_ratio == 1.0
        assert metrics.temporal_consistency == 0.0
        assert metrics.response_latencies == ()

    def test_signature_fields_order(self):
        fields = RhythmMetrics(avg_latency_minutes=5.5).signature_fields()
        assert list(fields) == ["avgLatency", "gapSurvival", "lengthVariance", "temporalConsistency"]
        assert fields["avgLatency"] == 5.5

    def test_to_dict(self):
        d = RhythmMetrics(response_latencies=(1.0, 2.0), message_count=3).to_dict()
        assert d["response_latencies"] == [1.0, 2.0]
        assert d["message_count"] == 3


class TestTrustThreshold:
    def test_defaults(self):
        threshold = TrustThreshold()
        assert threshold.min_stake == 0.1
        assert threshold.min_sentiment == 0.8

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"min_stake": -1},
            {"min_stake": math.inf},
            {"min_sentiment": 1.5},
            {"min_sentiment": -0.1},
            {"min_sentiment": math.nan},
        ],
    )
    def test_out_of_range_rejected(self, kwargs):
        with pytest.raises(ValidationException):
            TrustThreshold(**kwargs)


class TestTrustVerdict:
    def test_to_dict(self):
        verdict = TrustVerdict(
            trusted=True,
            reason=VerdictReason.TRUSTED,
            stake=2.0,
            sentiment=1.0,
            bucket=StakeBucket.MODERATE,
            relationships=(RelationshipFact("veritas", "follows", "axiom", "0x01", 0.5),),
        )
        d = verdict.to_dict()
        assert d["reason"] == "trusted"
        assert d["bucket"] == "moderate"
        assert d["relationships"] == [
            {"subject": "veritas", "predicate": "follows", "object": "axiom", "triple_id": "0x01", "stake": 0.5}
        ]

    def test_enums_are_strings(self):
        assert VerdictReason.NO_CLAIM == "no_claim"
        assert StakeBucket.STRONG == "strong"
