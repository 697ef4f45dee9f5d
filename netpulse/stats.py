"""Aggregation of ping records into quality scores and grades."""

import math
import statistics
from typing import Iterable

from netpulse.models import AggregatedStats, PingRecord, QualityGrade

GRADE_THRESHOLDS = {
    QualityGrade.EXCELLENT: 90,
    QualityGrade.GOOD: 80,
    QualityGrade.FAIR: 60,
}

# (threshold, penalty) pairs; each applies independently
AVG_LATENCY_PENALTIES = ((50, 10), (150, 20))
MAX_LATENCY_PENALTY = (200, 10)
JITTER_PENALTY = (30, 15)
LOSS_PENALTY_PER_PCT = 10

BASELINE_STATS = AggregatedStats(
    avg_latency_ms=0,
    max_latency_ms=0,
    jitter_ms=0,
    packet_loss_rate_pct=0.0,
    score=100,
    status=QualityGrade.EXCELLENT,
)


def round_half_up(value: float, digits: int = 0) -> float:
    """Round half away from zero for non-negative values (not banker's rounding)."""
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def grade_for_score(score: int) -> QualityGrade:
    """Map a score to its grade bucket."""
    for grade, threshold in GRADE_THRESHOLDS.items():
        if score >= threshold:
            return grade
    return QualityGrade.POOR


def quality_score(avg_latency: float, max_latency: float, jitter: float, loss_rate: float) -> int:
    """Compute the clamped, rounded 0-100 score from raw statistics."""
    score = 100.0
    for threshold, penalty in AVG_LATENCY_PENALTIES:
        if avg_latency > threshold:
            score -= penalty
    if max_latency > MAX_LATENCY_PENALTY[0]:
        score -= MAX_LATENCY_PENALTY[1]
    if jitter > JITTER_PENALTY[0]:
        score -= JITTER_PENALTY[1]
    score -= loss_rate * LOSS_PENALTY_PER_PCT

    score = min(100.0, max(0.0, score))
    return int(round_half_up(score))


def aggregate(records: Iterable[PingRecord]) -> AggregatedStats:
    """Aggregate a sequence of ping records into quality statistics.

    Lost and down records count toward the loss rate but never toward
    latency, maximum or jitter. An empty sequence yields BASELINE_STATS.
    """
    records = list(records)
    if not records:
        return BASELINE_STATS

    latencies = [r.latency_ms for r in records if r.is_valid]

    avg_latency = statistics.fmean(latencies) if latencies else 0.0
    max_latency = max(latencies) if latencies else 0
    jitter = statistics.stdev(latencies) if len(latencies) > 1 else 0.0
    loss_rate = (len(records) - len(latencies)) / len(records) * 100

    score = quality_score(avg_latency, max_latency, jitter, loss_rate)

    return AggregatedStats(
        avg_latency_ms=int(round_half_up(avg_latency)),
        max_latency_ms=max_latency,
        jitter_ms=int(round_half_up(jitter)),
        packet_loss_rate_pct=round_half_up(loss_rate, 2),
        score=score,
        status=grade_for_score(score),
    )
