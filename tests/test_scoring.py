"""Tests for weighted category scoring."""

from datetime import date

import pytest

from app.models.performance import KPI, PerformanceMetric
from app.services.scoring import (
    calculate_total_score,
    clamp,
    compute_category_scores,
    find_matching_kpi,
    percentage_of_target,
)

START = date(2025, 1, 1)
END = date(2025, 3, 31)


def kpi(name, category, weight=1.0, max_score=100.0, min_score=0.0, is_active=True):
    return KPI(name=name, description=name, category=category, weight=weight,
               max_score=max_score, min_score=min_score, is_active=is_active)


def metric(name, metric_type, value, target=None):
    return PerformanceMetric(employee_id="E-100", metric_name=name, metric_type=metric_type,
                             value=value, target=target, period="2025-Q1",
                             period_start=START, period_end=END)


def score(kpis, metrics):
    return compute_category_scores("E-100", START, END, kpis, metrics)


class TestHelpers:
    def test_clamp(self) -> None:
        assert clamp(150, 0, 100) == 100
        assert clamp(-5, 0, 100) == 0
        assert clamp(42, 0, 100) == 42

    def test_missing_target_reads_as_hundred(self) -> None:
        assert percentage_of_target(80, None) == pytest.approx(80)

    def test_zero_target_gives_zero_percent(self) -> None:
        assert percentage_of_target(80, 0) == 0
        assert percentage_of_target(80, -10) == 0

    def test_matching_is_bidirectional_and_case_insensitive(self) -> None:
        kpis = [kpi("Teaching Quality", "kpi")]
        assert find_matching_kpi("teaching", kpis) is kpis[0]
        assert find_matching_kpi("Overall TEACHING QUALITY score", kpis) is kpis[0]
        assert find_matching_kpi("Research", kpis) is None

    def test_first_match_wins(self) -> None:
        first = kpi("Class Punctuality", "attendance")
        second = kpi("Punctuality", "attendance")
        assert find_matching_kpi("Punctuality", [first, second]) is first
        assert find_matching_kpi("Punctuality", [second, first]) is second


class TestScenarios:
    def test_matched_metric_scores_percentage_of_target(self) -> None:
        result = score(
            [kpi("Punctuality", "attendance", weight=2)],
            [metric("Punctuality", "Attendance", 95, 100)],
        )
        assert result.attendance_score == pytest.approx(95)

    def test_matched_metric_is_clamped_to_max_score(self) -> None:
        result = score(
            [kpi("Punctuality", "attendance", weight=2)],
            [metric("Punctuality", "Attendance", 150, 100)],
        )
        assert result.attendance_score == pytest.approx(100)

    def test_unmatched_metric_uses_average_weight(self) -> None:
        kpis = [kpi("Lesson Planning", "kpi", weight=2), kpi("Grading Timeliness", "kpi", weight=4)]
        result = score(kpis, [metric("Research Output", "KPI", 50, 100)])
        assert result.kpi_score == pytest.approx(50)

    def test_inactive_kpis_excluded_from_average_weight(self) -> None:
        # active weights 2 and 4 give a mean of 3; the inactive 100 must not count
        kpis = [
            kpi("Lesson Planning", "kpi", weight=2),
            kpi("Grading", "kpi", weight=4),
            kpi("Retired Measure", "kpi", weight=100, is_active=False),
        ]
        result = score(kpis, [
            metric("Grading", "KPI", 80, 100),
            metric("Research Output", "KPI", 50, 100),
        ])
        assert result.kpi_score == pytest.approx((80 * 4 + 50 * 3) / 7)

    def test_unmatched_weight_against_matched(self) -> None:
        # matched: 80 at weight 4; unmatched: 50 at mean weight 3
        kpis = [kpi("Lesson Planning", "kpi", weight=2), kpi("Grading", "kpi", weight=4)]
        result = score(kpis, [
            metric("Grading", "KPI", 80, 100),
            metric("Research Output", "KPI", 50, 100),
        ])
        assert result.kpi_score == pytest.approx((80 * 4 + 50 * 3) / 7)

    def test_category_without_kpis_is_none(self) -> None:
        result = score(
            [kpi("Punctuality", "attendance")],
            [metric("Teamwork", "Behavior", 90), metric("Punctuality", "Attendance", 90)],
        )
        assert result.behavior_score is None
        assert result.attendance_score == pytest.approx(90)

    def test_total_score_averages_present_scores(self) -> None:
        assert calculate_total_score(80, None, 90) == pytest.approx(85)


class TestProperties:
    def test_no_metrics_gives_none(self) -> None:
        result = score([kpi("Teamwork", "behavior")], [metric("Punctuality", "Attendance", 90)])
        assert result.behavior_score is None

    def test_clamped_to_min_score(self) -> None:
        result = score(
            [kpi("Student Feedback", "kpi", max_score=5, min_score=1)],
            [metric("Student Feedback", "KPI", 5, 100)],
        )
        assert result.kpi_score == pytest.approx(1)

    def test_scaled_into_kpi_max_score(self) -> None:
        result = score(
            [kpi("Student Feedback", "kpi", max_score=5, min_score=1)],
            [metric("Student Feedback", "KPI", 80, 100)],
        )
        assert result.kpi_score == pytest.approx(4)

    def test_zero_target_contributes_zero(self) -> None:
        result = score(
            [kpi("Punctuality", "attendance")],
            [metric("Punctuality", "Attendance", 95, 0)],
        )
        assert result.attendance_score == 0

    def test_unmatched_metric_clamped_to_hundred(self) -> None:
        result = score([kpi("Teamwork", "behavior")], [metric("Mentoring", "Behavior", 300, 100)])
        assert result.behavior_score == pytest.approx(100)

    def test_single_matched_metric_weight_cancels(self) -> None:
        result = score([kpi("Teamwork", "behavior", weight=7.5)], [metric("Teamwork", "Behavior", 64, 80)])
        assert result.behavior_score == pytest.approx(80)

    def test_zero_total_weight_gives_none(self) -> None:
        result = score([kpi("Teamwork", "behavior", weight=0)], [metric("Teamwork", "Behavior", 64, 80)])
        assert result.behavior_score is None

    def test_repeat_calls_are_identical(self) -> None:
        kpis = [kpi("Grading", "kpi", weight=3), kpi("Teamwork", "behavior")]
        metrics = [metric("Grading", "KPI", 70), metric("Teamwork", "Behavior", 88, 110)]
        assert score(kpis, metrics) == score(kpis, metrics)

    def test_inactive_kpis_are_ignored(self) -> None:
        result = score(
            [kpi("Punctuality", "attendance", is_active=False)],
            [metric("Punctuality", "Attendance", 95)],
        )
        assert result.attendance_score is None

    def test_total_score_none_when_all_missing(self) -> None:
        assert calculate_total_score(None, None, None) is None


class TestBreakdown:
    def test_always_three_categories(self) -> None:
        result = score([], [])
        assert [b.category for b in result.breakdown] == ["KPI", "Behavior", "Attendance"]
        assert all(b.calculated_score is None for b in result.breakdown)
        assert result.metrics == []

    def test_other_metric_types_are_listed_but_not_scored(self) -> None:
        kpis = [kpi("Quality", "kpi"), kpi("Quality", "other")]
        metrics = [metric("Quality", "Quality", 90), metric("Grading", "KPI", 60)]
        result = score(kpis, metrics)

        assert len(result.metrics) == 2
        kpi_entry = result.breakdown[0]
        assert [m.metric_name for m in kpi_entry.metrics] == ["Grading"]
        # Grading is unmatched against "Quality": plain 60
        assert kpi_entry.calculated_score == pytest.approx(60)
        assert sum(len(b.metrics) for b in result.breakdown) == 1
