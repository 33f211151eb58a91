"""
Weighted category scoring for performance reviews.

Metric records are bucketed by metric type into the KPI, Behavior and
Attendance categories. Each metric is scored as a percentage of its target,
scaled into the bounds of the KPI definition whose name it matches, and the
category score is the weight-averaged result. Metrics with no matching KPI are
still scored, on a plain 0–100 scale weighted by the category's mean KPI
weight.
"""
import logging
from datetime import date
from typing import Iterable, List, Optional, Sequence

from app.schemas.performance import CategoryScoreResult

logger = logging.getLogger(__name__)

DEFAULT_TARGET = 100.0
DEFAULT_MAX_SCORE = 100.0
DEFAULT_MIN_SCORE = 0.0

# (breakdown label, KPI.category, PerformanceMetric.metric_type)
CATEGORIES = (
    ("KPI", "kpi", "KPI"),
    ("Behavior", "behavior", "Behavior"),
    ("Attendance", "attendance", "Attendance"),
)

METRIC_TYPE_TO_CATEGORY = {metric_type: category for _, category, metric_type in CATEGORIES}


def metric_category(metric) -> str:
    """Scored category of a metric; anything unmapped lands in "other"."""
    return METRIC_TYPE_TO_CATEGORY.get(metric.metric_type, "other")


def clamp(value: float, lower: float, upper: float) -> float:
    return min(upper, max(lower, value))


def percentage_of_target(value: float, target: Optional[float]) -> float:
    target = DEFAULT_TARGET if target is None else float(target)
    if target <= 0:
        return 0.0
    return float(value) / target * 100


def find_matching_kpi(metric_name: str, kpis: Sequence):
    """
    First KPI whose name contains the metric name or is contained in it,
    compared case-insensitively. Definition order decides ties.
    """
    needle = metric_name.lower()
    for kpi in kpis:
        name = kpi.name.lower()
        if needle in name or name in needle:
            return kpi
    return None


def score_category(category_kpis: Sequence, category_metrics: Sequence) -> Optional[float]:
    if not category_kpis or not category_metrics:
        return None

    average_weight = sum(float(k.weight) for k in category_kpis) / len(category_kpis)

    total_weighted_score = 0.0
    total_weight = 0.0
    for metric in category_metrics:
        percentage = percentage_of_target(metric.value, metric.target)
        kpi = find_matching_kpi(metric.metric_name, category_kpis)
        if kpi is not None:
            max_score = float(kpi.max_score)
            scaled = clamp(percentage / 100 * max_score, float(kpi.min_score), max_score)
            weight = float(kpi.weight)
        else:
            scaled = clamp(percentage, DEFAULT_MIN_SCORE, DEFAULT_MAX_SCORE)
            weight = average_weight
        total_weighted_score += scaled * weight
        total_weight += weight

    if total_weight == 0:
        return None
    return total_weighted_score / total_weight


def compute_category_scores(
    employee_id: str,
    start_date: date,
    end_date: date,
    active_kpis: Iterable,
    metrics: Iterable,
) -> CategoryScoreResult:
    """
    Score `metrics` against `active_kpis` for each category.

    `metrics` are expected to be the employee's records overlapping
    [start_date, end_date] already; they are grouped and scored as given.
    Inactive KPI definitions are skipped. A category without KPIs or without
    metrics scores None.
    """
    kpis = [k for k in active_kpis if k.is_active]
    metrics = list(metrics)
    logger.debug(
        "Scoring %d metrics against %d KPIs for employee %s (%s to %s)",
        len(metrics), len(kpis), employee_id, start_date, end_date,
    )

    scores = {}
    breakdown = []
    for label, category, _ in CATEGORIES:
        category_kpis = [k for k in kpis if k.category == category]
        category_metrics = [m for m in metrics if metric_category(m) == category]
        scores[category] = score_category(category_kpis, category_metrics)
        breakdown.append({
            "category": label,
            "metrics": category_metrics,
            "calculated_score": scores[category],
        })

    return CategoryScoreResult.model_validate(
        {
            "kpi_score": scores["kpi"],
            "behavior_score": scores["behavior"],
            "attendance_score": scores["attendance"],
            "metrics": metrics,
            "breakdown": breakdown,
        },
        from_attributes=True,
    )


def calculate_total_score(
    kpi_score: Optional[float],
    behavior_score: Optional[float],
    attendance_score: Optional[float],
) -> Optional[float]:
    """Plain mean of whichever category scores are present."""
    scores: List[float] = [s for s in (kpi_score, behavior_score, attendance_score) if s is not None]
    if not scores:
        return None
    return sum(scores) / len(scores)
