"""Rhythm analysis: behavioral statistics of a two-party transcript.

Turns a sequence of message records into response latency, gap survival,
length variance and time-of-day consistency. Nothing here looks at message
content; only who spoke, when, and how much.

All outputs are rounded before they are returned, so two parties holding
the same transcript compute byte-identical metrics.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Iterable, Sequence

from .models import MessageRecord, RhythmMetrics

logger = logging.getLogger(__name__)

GAP_THRESHOLD_MINUTES = 120
# 12 hours squared: an hour-of-day variance this large scores zero consistency
HOUR_VARIANCE_NORMALIZER = 144


def round_half_up(value: float, places: int = 0) -> float:
    """Round half away from zero for non-negative values.

    The built-in ``round`` uses banker's rounding, which would disagree with
    other implementations of the fingerprint on values like 2.25.
    """
    factor = 10**places
    return math.floor(value * factor + 0.5) / factor


def population_variance(values: Sequence[float]) -> float:
    """Population variance; 0 for an empty sequence."""
    if not values:
        return 0.0
    mean = sum(values) / len(values)
    return sum((v - mean) ** 2 for v in values) / len(values)


def sort_messages(messages: Iterable[MessageRecord]) -> list[MessageRecord]:
    """Stable sort by timestamp, ties kept in read order.

    Messages with identical timestamps are not reordered, so the sender
    sequence within a tie (and with it the response latencies) depends on
    the order the store returned them in. Two parties whose stores list
    tied messages differently will compute different rhythm metrics and
    hashes; the result is independent of input order only when no two
    timestamps are equal.
    """
    return sorted(messages, key=lambda m: m.timestamp)


def compute_rhythm(messages: Iterable[MessageRecord]) -> RhythmMetrics:
    """Compute rhythm metrics for a transcript.

    The input need not be sorted, though equal timestamps keep their
    input order (see ``sort_messages``). Fewer than two messages yields the
    default metrics with ``message_count`` set; the analyzer itself never
    fails on short input.

    Args:
        messages: Message records between two participants.

    Returns:
        RhythmMetrics for the transcript.
    """
    ordered = sort_messages(messages)

    if len(ordered) < 2:
        return RhythmMetrics(message_count=len(ordered))

    latencies: list[float] = []
    gap_count = 0
    for prev, curr in zip(ordered, ordered[1:]):
        diff_minutes = (curr.timestamp - prev.timestamp).total_seconds() / 60
        if curr.sender != prev.sender:
            latencies.append(diff_minutes)
        if diff_minutes > GAP_THRESHOLD_MINUTES:
            gap_count += 1

    avg_latency = sum(latencies) / len(latencies) if latencies else 0.0

    # A gap in a closed transcript is always followed by the message that
    # ends it, so every detected gap counts as survived.
    gap_survival = 1.0

    length_variance = population_variance([m.body_length for m in ordered])
    hour_variance = population_variance([m.timestamp.hour for m in ordered])
    temporal_consistency = max(0.0, 1 - hour_variance / HOUR_VARIANCE_NORMALIZER)

    metrics = RhythmMetrics(
        response_latencies=tuple(latencies),
        avg_latency_minutes=round_half_up(avg_latency, 1),
        gap_count=gap_count,
        gap_survival_ratio=round_half_up(gap_survival, 2),
        length_variance_chars2=int(round_half_up(length_variance)),
        temporal_consistency=round_half_up(temporal_consistency, 2),
        message_count=len(ordered),
    )
    logger.debug(
        f"Rhythm computed: {metrics.message_count} messages, {len(latencies)} responses, {gap_count} gaps"
    )
    return metrics
