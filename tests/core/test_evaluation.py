"""Tests for trustprint.core.evaluation - the trust ladder."""

from __future__ import annotations

import math
from decimal import Decimal

import pytest

from trustprint.core.evaluation import compute_sentiment, evaluate_trust, stake_bucket, validate_signal
from trustprint.core.exceptions import InvalidSignalError
from trustprint.core.models import (
    RelationshipFact,
    StakeBucket,
    TrustSignal,
    TrustThreshold,
    VerdictReason,
)

FOLLOWS = RelationshipFact("veritas", "follows", "axiom", "0x01", 0.5)


def claimed(for_stake: float = 0.0, against_stake: float = 0.0, **kwargs) -> TrustSignal:
    return TrustSignal(identity_exists=True, claim_exists=True, for_stake=for_stake, against_stake=against_stake, **kwargs)


class TestStakeBucket:
    @pytest.mark.parametrize(
        "stake,bucket",
        [
            (0.0, StakeBucket.MINIMAL),
            (0.099, StakeBucket.MINIMAL),
            (0.1, StakeBucket.LOW),
            (0.99, StakeBucket.LOW),
            (1.0, StakeBucket.MODERATE),
            (10.0, StakeBucket.MODERATE),
            (10.01, StakeBucket.STRONG),
        ],
    )
    def test_boundaries(self, stake, bucket):
        assert stake_bucket(stake) is bucket


class TestComputeSentiment:
    def test_no_stake_is_full_agreement(self):
        assert compute_sentiment(0.0, 0.0) == 1.0

    def test_ratio(self):
        assert compute_sentiment(3.0, 1.0) == 0.75

    def test_all_against(self):
        assert compute_sentiment(0.0, 2.0) == 0.0


class TestValidateSignal:
    @pytest.mark.parametrize(
        "kwargs,field",
        [
            ({"for_stake": -1.0}, "for_stake"),
            ({"against_stake": -0.5}, "against_stake"),
            ({"for_stake": math.nan}, "for_stake"),
            ({"against_stake": math.inf}, "against_stake"),
            ({"for_stake": "1.0"}, "for_stake"),
            ({"for_stake": Decimal("-1")}, "for_stake"),
            ({"against_stake": Decimal("NaN")}, "against_stake"),
            ({"for_stake": True}, "for_stake"),
        ],
    )
    def test_rejected(self, kwargs, field):
        with pytest.raises(InvalidSignalError) as exc_info:
            validate_signal(claimed(**kwargs))
        assert exc_info.value.field == field

    def test_negative_relationship_stake(self):
        bad = RelationshipFact("a", "b", "c", stake=-1.0)
        with pytest.raises(InvalidSignalError):
            validate_signal(claimed(1.0, relationship_claims=(bad,)))

    def test_valid(self):
        assert validate_signal(claimed(1.0, 0.0)) == (1.0, 0.0)

    def test_decimal_stakes_become_floats(self):
        for_stake, against_stake = validate_signal(claimed(Decimal("5"), Decimal("0.5")))
        assert (for_stake, against_stake) == (5.0, 0.5)
        assert type(for_stake) is float


class TestEvaluateTrust:
    """Tests for evaluate_trust."""

    def test_no_identity(self):
        verdict = evaluate_trust(TrustSignal(identity_exists=False))
        assert not verdict.trusted
        assert verdict.reason is VerdictReason.NO_IDENTITY
        assert verdict.stake == 0.0
        assert verdict.sentiment == 0.0

    def test_no_identity_ignores_stray_stake(self):
        signal = TrustSignal(identity_exists=False, claim_exists=True, for_stake=50.0)
        assert evaluate_trust(signal).reason is VerdictReason.NO_IDENTITY

    def test_no_claim(self):
        verdict = evaluate_trust(TrustSignal(identity_exists=True, claim_exists=False))
        assert not verdict.trusted
        assert verdict.reason is VerdictReason.NO_CLAIM
        assert verdict.stake == 0.0

    def test_trusted(self):
        verdict = evaluate_trust(claimed(5.0, 0.0))
        assert verdict.trusted
        assert verdict.reason is VerdictReason.TRUSTED
        assert verdict.stake == 5.0
        assert verdict.sentiment == 1.0
        assert verdict.bucket is StakeBucket.MODERATE
        assert not verdict.contested

    def test_insufficient_stake(self):
        verdict = evaluate_trust(claimed(0.05))
        assert not verdict.trusted
        assert verdict.reason is VerdictReason.INSUFFICIENT_STAKE
        assert verdict.bucket is StakeBucket.MINIMAL

    def test_stake_at_threshold_passes(self):
        verdict = evaluate_trust(claimed(1.0), TrustThreshold(min_stake=1.0, min_sentiment=0.0))
        assert verdict.trusted

    def test_low_sentiment(self):
        verdict = evaluate_trust(claimed(3.0, 2.0))
        assert not verdict.trusted
        assert verdict.reason is VerdictReason.LOW_SENTIMENT
        assert verdict.sentiment == 0.6
        assert verdict.contested

    @pytest.mark.parametrize("for_stake,against_stake,sentiment", [(2.0, 3.0, 0.4), (1.0, 1.0, 0.5)])
    def test_contested_below_sentiment(self, for_stake, against_stake, sentiment):
        verdict = evaluate_trust(claimed(for_stake, against_stake))
        assert verdict.sentiment == sentiment
        assert verdict.contested
        assert not verdict.trusted
        assert verdict.reason is VerdictReason.LOW_SENTIMENT

    def test_decimal_stakes(self):
        verdict = evaluate_trust(claimed(Decimal("5"), Decimal("0")), TrustThreshold(min_stake=1.0, min_sentiment=0.8))
        assert verdict.trusted
        assert verdict.stake == 5.0
        assert not verdict.contested

    def test_sentiment_at_threshold_passes(self):
        verdict = evaluate_trust(claimed(4.0, 1.0))
        assert verdict.sentiment == 0.8
        assert verdict.trusted
        assert verdict.contested

    def test_stake_gate_checked_first(self):
        verdict = evaluate_trust(claimed(0.01, 5.0))
        assert verdict.reason is VerdictReason.INSUFFICIENT_STAKE

    def test_zero_stake_zero_threshold(self):
        """With no stake anywhere, sentiment is 1.0 and a zero threshold trusts."""
        verdict = evaluate_trust(claimed(0.0, 0.0), TrustThreshold(min_stake=0.0))
        assert verdict.sentiment == 1.0
        assert verdict.trusted

    def test_custom_threshold(self):
        verdict = evaluate_trust(claimed(5.0), TrustThreshold(min_stake=20.0))
        assert verdict.reason is VerdictReason.INSUFFICIENT_STAKE

    def test_relationships_passed_through(self):
        verdict = evaluate_trust(claimed(5.0, relationship_claims=(FOLLOWS,)))
        assert verdict.relationships == (FOLLOWS,)

    def test_relationships_on_early_exit(self):
        signal = TrustSignal(identity_exists=True, claim_exists=False, relationship_claims=(FOLLOWS,))
        assert evaluate_trust(signal).relationships == (FOLLOWS,)

    def test_invalid_signal_raises(self):
        with pytest.raises(InvalidSignalError):
            evaluate_trust(claimed(-1.0))
