"""Trust evaluation engine.

A five-level ladder over the signals read for one identity:

1. Existence     - the identity atom must exist
2. Claim         - the identity claim triple must exist
3. Stake         - for-stake on the claim (bucketed for reporting)
4. Sentiment     - for / (for + against), 1.0 when nobody staked at all
5. Relationship  - contested if anyone staked against; relationship claims
                   are surfaced but never gate the verdict

The default verdict is ``stake >= min_stake and sentiment >= min_sentiment``.
Stake, sentiment and contested are always returned so callers can layer a
stricter policy on top.
"""

from __future__ import annotations

import logging
import math
import numbers
from decimal import Decimal

from .exceptions import InvalidSignalError
from .models import StakeBucket, TrustSignal, TrustThreshold, TrustVerdict, VerdictReason

logger = logging.getLogger(__name__)

MINIMAL_STAKE_CEILING = 0.1
LOW_STAKE_CEILING = 1.0
MODERATE_STAKE_CEILING = 10.0


def stake_bucket(stake: float) -> StakeBucket:
    """Map a stake amount to its reporting bucket."""
    if stake < MINIMAL_STAKE_CEILING:
        return StakeBucket.MINIMAL
    if stake < LOW_STAKE_CEILING:
        return StakeBucket.LOW
    if stake <= MODERATE_STAKE_CEILING:
        return StakeBucket.MODERATE
    return StakeBucket.STRONG


def compute_sentiment(for_stake: float, against_stake: float) -> float:
    """Share of total stake that is in favour.

    With no stake on either side there is no dispute signal, which counts
    as full agreement.
    """
    total = for_stake + against_stake
    if total == 0:
        return 1.0
    return for_stake / total


def _as_stake(value: object, field: str) -> float:
    """Coerce a stake (int, float, Decimal, any real) to a finite, non-negative float."""
    if isinstance(value, bool) or not isinstance(value, numbers.Real | Decimal):
        raise InvalidSignalError(f"{field} must be a number", field=field, value=value)
    stake = float(value)
    if not math.isfinite(stake):
        raise InvalidSignalError(f"{field} must be finite", field=field, value=value)
    if stake < 0:
        raise InvalidSignalError(f"{field} must be non-negative", field=field, value=value)
    return stake


def validate_signal(signal: TrustSignal) -> tuple[float, float]:
    """Reject signals whose stakes are negative, not finite or not numbers.

    Returns:
        The (for, against) stakes as floats.

    Raises:
        InvalidSignalError: On the first offending field.
    """
    for_stake = _as_stake(signal.for_stake, "for_stake")
    against_stake = _as_stake(signal.against_stake, "against_stake")
    for fact in signal.relationship_claims:
        _as_stake(fact.stake, "relationship_claims")
    return for_stake, against_stake


def evaluate_trust(signal: TrustSignal, threshold: TrustThreshold | None = None) -> TrustVerdict:
    """Evaluate a trust signal against a threshold.

    Args:
        signal: Facts read for one identity.
        threshold: Stake/sentiment gates; ``TrustThreshold()`` if None.

    Returns:
        TrustVerdict with the reason of the first failing gate, or TRUSTED.

    Raises:
        InvalidSignalError: If the signal carries negative or non-finite stakes.
    """
    threshold = threshold or TrustThreshold()
    for_stake, against_stake = validate_signal(signal)

    relationships = tuple(signal.relationship_claims)

    if not signal.identity_exists:
        return TrustVerdict(trusted=False, reason=VerdictReason.NO_IDENTITY, relationships=relationships)

    if not signal.claim_exists:
        return TrustVerdict(trusted=False, reason=VerdictReason.NO_CLAIM, relationships=relationships)

    stake = for_stake
    bucket = stake_bucket(stake)
    sentiment = compute_sentiment(stake, against_stake)
    contested = against_stake > 0

    if stake < threshold.min_stake:
        reason = VerdictReason.INSUFFICIENT_STAKE
    elif sentiment < threshold.min_sentiment:
        reason = VerdictReason.LOW_SENTIMENT
    else:
        reason = VerdictReason.TRUSTED

    verdict = TrustVerdict(
        trusted=reason is VerdictReason.TRUSTED,
        reason=reason,
        stake=stake,
        sentiment=sentiment,
        contested=contested,
        bucket=bucket,
        relationships=relationships,
    )
    logger.debug(f"Trust evaluated: {reason.value} (stake={stake}, sentiment={sentiment:.2f}, contested={contested})")
    return verdict
