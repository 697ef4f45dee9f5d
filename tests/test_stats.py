"""Tests for netpulse.stats aggregation and scoring."""

import itertools
import random

import pytest

from conftest import down, lost, ok
from netpulse.models import QualityGrade
from netpulse.stats import (
    BASELINE_STATS,
    aggregate,
    grade_for_score,
    quality_score,
    round_half_up,
)


class TestAggregateBasics:
    def test_empty_input_is_baseline(self):
        stats = aggregate([])

        assert stats == BASELINE_STATS
        assert stats.score == 100
        assert stats.status is QualityGrade.EXCELLENT
        assert stats.avg_latency_ms == 0
        assert stats.max_latency_ms == 0
        assert stats.jitter_ms == 0
        assert stats.packet_loss_rate_pct == 0

    def test_constant_latency(self):
        stats = aggregate([ok(10) for _ in range(10)])

        assert stats.avg_latency_ms == 10
        assert stats.max_latency_ms == 10
        assert stats.jitter_ms == 0
        assert stats.packet_loss_rate_pct == 0
        assert stats.score == 100
        assert stats.status is QualityGrade.EXCELLENT

    def test_all_lost(self):
        stats = aggregate([lost(), down(), lost()])

        assert stats.avg_latency_ms == 0
        assert stats.max_latency_ms == 0
        assert stats.jitter_ms == 0
        assert stats.packet_loss_rate_pct == 100
        assert stats.score == 0
        assert stats.status is QualityGrade.POOR

    def test_single_valid_record_has_zero_jitter(self):
        stats = aggregate([ok(42)])

        assert stats.jitter_ms == 0
        assert stats.avg_latency_ms == 42

    def test_jitter_is_sample_stdev(self):
        """Sample std-dev (n-1) of 10, 20, 30 is exactly 10."""
        stats = aggregate([ok(10), ok(20), ok(30)])

        assert stats.avg_latency_ms == 20
        assert stats.jitter_ms == 10

    def test_loss_excluded_from_latency_but_counted_in_rate(self):
        stats = aggregate([ok(10), ok(30), lost(), down()])

        assert stats.avg_latency_ms == 20
        assert stats.max_latency_ms == 30
        assert stats.packet_loss_rate_pct == 50.0

    def test_loss_rate_rounded_to_two_decimals(self):
        records = [ok(10) for _ in range(2)] + [lost()]
        stats = aggregate(records)

        assert stats.packet_loss_rate_pct == 33.33

    def test_accepts_generators(self):
        stats = aggregate(ok(10) for _ in range(3))
        assert stats.avg_latency_ms == 10


class TestScoring:
    def test_avg_above_50_at_boundary_of_excellent(self):
        """avg 60 deducts 10 -> exactly 90, which is still Excellent."""
        stats = aggregate([ok(60) for _ in range(5)])

        assert stats.score == 90
        assert stats.status is QualityGrade.EXCELLENT

    def test_avg_exactly_50_not_penalised(self):
        assert aggregate([ok(50)]).score == 100

    def test_avg_above_150_applies_both_penalties(self):
        stats = aggregate([ok(160) for _ in range(3)])

        assert stats.score == 70
        assert stats.status is QualityGrade.FAIR

    def test_max_above_200_penalty(self):
        # avg = 41, max = 201
        stats = aggregate([ok(1)] * 4 + [ok(201)])

        assert stats.max_latency_ms == 201
        # jitter = stdev(1,1,1,1,201) ~ 89 > 30 -> -15, max -> -10
        assert stats.score == 75
        assert stats.status is QualityGrade.FAIR

    def test_jitter_penalty_only(self):
        # avg 40, stdev of (0, 80) ~ 56.6
        stats = aggregate([ok(0), ok(80)])

        assert stats.jitter_ms == 57
        assert stats.score == 85
        assert stats.status is QualityGrade.GOOD

    def test_one_percent_loss_costs_ten_points(self):
        records = [ok(10) for _ in range(99)] + [lost()]
        stats = aggregate(records)

        assert stats.packet_loss_rate_pct == 1.0
        assert stats.score == 90

    def test_score_clamped_at_zero(self):
        """High jitter plus heavy loss would go negative before clamping."""
        records = [ok(0), ok(300), lost(), lost()]
        stats = aggregate(records)

        assert stats.score == 0
        assert stats.status is QualityGrade.POOR

    def test_quality_score_rounds_half_up(self):
        # 100 - 0.5% * 10 = 95.0; 100 - 0.25 * 10 = 97.5 -> 98
        assert quality_score(0, 0, 0, 0.25) == 98
        assert quality_score(0, 0, 0, 0.5) == 95


class TestGrades:
    @pytest.mark.parametrize(
        "score, grade",
        [
            (100, QualityGrade.EXCELLENT),
            (90, QualityGrade.EXCELLENT),
            (89, QualityGrade.GOOD),
            (80, QualityGrade.GOOD),
            (79, QualityGrade.FAIR),
            (60, QualityGrade.FAIR),
            (59, QualityGrade.POOR),
            (0, QualityGrade.POOR),
        ],
    )
    def test_grade_boundaries(self, score, grade):
        assert grade_for_score(score) is grade

    def test_round_half_up(self):
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round_half_up(33.333333, 2) == 33.33


class TestProperties:
    def test_score_and_status_consistent_for_random_inputs(self):
        rng = random.Random(1234)
        for _ in range(200):
            records = []
            for _ in range(rng.randint(1, 40)):
                if rng.random() < 0.1:
                    records.append(lost())
                else:
                    records.append(ok(rng.randint(0, 400)))
            stats = aggregate(records)

            assert 0 <= stats.score <= 100
            assert stats.status is grade_for_score(stats.score)

    def test_permutation_invariant(self):
        records = [ok(5), ok(250), lost(), ok(40), down(), ok(160)]
        expected = aggregate(records)

        for permutation in itertools.permutations(records):
            assert aggregate(permutation) == expected
