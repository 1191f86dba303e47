"""Tests for trustprint.core.rhythm."""

from __future__ import annotations

import pytest

from trustprint.core.models import RhythmMetrics
from trustprint.core.rhythm import (
    GAP_THRESHOLD_MINUTES,
    compute_rhythm,
    population_variance,
    round_half_up,
    sort_messages,
)


class TestRoundHalfUp:
    """Half-way values must round up, unlike the built-in round."""

    @pytest.mark.parametrize(
        "value,places,expected",
        [
            (2.5, 0, 3.0),
            (0.5, 0, 1.0),
            (2.25, 1, 2.3),
            (0.125, 2, 0.13),
            (98.33333, 1, 98.3),
            (7.0, 2, 7.0),
        ],
    )
    def test_values(self, value, places, expected):
        assert round_half_up(value, places) == expected

    def test_differs_from_builtin(self):
        assert round(2.5) == 2
        assert round_half_up(2.5) == 3


class TestPopulationVariance:
    def test_empty(self):
        assert population_variance([]) == 0.0

    def test_constant(self):
        assert population_variance([4, 4, 4]) == 0.0

    def test_known(self):
        assert population_variance([120, 80, 40, 200, 60]) == 3200.0


class TestComputeRhythm:
    """Tests for compute_rhythm."""

    def test_conversation(self, conversation):
        """Latencies only on sender change; one gap over two hours."""
        metrics = compute_rhythm(conversation)
        assert metrics.message_count == 5
        assert metrics.response_latencies == (10.0, 30.0, 255.0)
        assert metrics.avg_latency_minutes == 98.3
        assert metrics.gap_count == 1
        assert metrics.gap_survival_ratio == 1.0
        assert metrics.length_variance_chars2 == 3200
        # Hours 10,10,10,10,15 -> variance 4 -> 1 - 4/144
        assert metrics.temporal_consistency == 0.97

    def test_input_order_irrelevant(self, conversation):
        assert compute_rhythm(reversed(conversation)) == compute_rhythm(conversation)

    def test_empty(self):
        assert compute_rhythm([]) == RhythmMetrics(message_count=0)

    def test_single_message(self, msg):
        metrics = compute_rhythm([msg("axiom", 0)])
        assert metrics == RhythmMetrics(message_count=1)
        assert metrics.avg_latency_minutes == 0.0
        assert metrics.gap_survival_ratio == 1.0
        assert metrics.temporal_consistency == 0.0

    def test_monologue_has_no_latency(self, msg):
        metrics = compute_rhythm([msg("axiom", 0), msg("axiom", 5), msg("axiom", 10)])
        assert metrics.response_latencies == ()
        assert metrics.avg_latency_minutes == 0.0
        assert metrics.message_count == 3

    def test_gap_threshold_is_strict(self, msg):
        at_threshold = compute_rhythm([msg("axiom", 0), msg("veritas", GAP_THRESHOLD_MINUTES)])
        over_threshold = compute_rhythm([msg("axiom", 0), msg("veritas", GAP_THRESHOLD_MINUTES + 1)])
        assert at_threshold.gap_count == 0
        assert over_threshold.gap_count == 1

    def test_same_sender_gap_counts(self, msg):
        metrics = compute_rhythm([msg("axiom", 0), msg("axiom", 180)])
        assert metrics.gap_count == 1
        assert metrics.response_latencies == ()

    def test_latency_rounds_half_up(self, msg):
        metrics = compute_rhythm([msg("axiom", 0), msg("veritas", 0.25)])
        assert metrics.avg_latency_minutes == 0.3

    def test_length_variance_integral(self, msg):
        metrics = compute_rhythm([msg("axiom", 0, 0), msg("veritas", 1, 5)])
        assert metrics.length_variance_chars2 == 6
        assert isinstance(metrics.length_variance_chars2, int)

    def test_same_hour_full_consistency(self, msg):
        metrics = compute_rhythm([msg("axiom", 0), msg("veritas", 30)])
        assert metrics.temporal_consistency == 1.0

    def test_consistency_in_unit_range(self, msg):
        # Hours 10 and 9 the next morning after a long quiet spell
        metrics = compute_rhythm([msg("axiom", 0), msg("veritas", 14 * 60), msg("axiom", 23 * 60)])
        assert 0.0 <= metrics.temporal_consistency <= 1.0

    def test_deterministic(self, conversation):
        assert compute_rhythm(conversation) == compute_rhythm(list(conversation))


class TestSortMessages:
    def test_stable_on_ties(self, msg):
        first = msg("axiom", 0, 1)
        second = msg("veritas", 0, 2)
        assert sort_messages([first, second]) == [first, second]
        assert sort_messages([second, first]) == [second, first]

    def test_tie_order_changes_latencies(self, msg):
        """Equal timestamps keep read order, so the sender sequence follows the store."""
        a0, b0, a1 = msg("axiom", 0), msg("veritas", 0), msg("axiom", 10)
        assert compute_rhythm([a0, b0, a1]).response_latencies == (0.0, 10.0)
        assert compute_rhythm([b0, a0, a1]).response_latencies == (0.0,)

    def test_order_independent_without_ties(self, conversation):
        assert compute_rhythm(list(reversed(conversation))) == compute_rhythm(conversation)
