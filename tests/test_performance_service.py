"""Tests for performance data access and summaries."""

from datetime import date

import pytest
from sqlalchemy import select

from app.config import settings
from app.models.employee import Employee
from app.models.goal import PerformanceGoal
from app.models.performance import KPI, PerformanceMetric, PerformanceReview
from app.services import performance as service

START = date(2025, 1, 1)
END = date(2025, 3, 31)


def add_metric(session, name, period_start, period_end, metric_type="KPI", value=80.0, employee_id="E-100"):
    session.add(PerformanceMetric(
        employee_id=employee_id, metric_name=name, metric_type=metric_type, value=value,
        period="custom", period_start=period_start, period_end=period_end,
    ))


def review(total, kpi=None, status="completed", employee=None, improvement_areas=None):
    r = PerformanceReview(
        employee_id=employee.employee_id if employee else "E-100",
        start_date=START, end_date=END, status=status,
        kpi_score=kpi, total_score=total, improvement_areas=improvement_areas,
    )
    r.employee = employee
    return r


class TestMetricWindow:
    @pytest.fixture
    def seeded(self, people, sync_session):
        add_metric(sync_session, "starts inside", date(2025, 3, 1), date(2025, 4, 30))
        add_metric(sync_session, "ends inside", date(2024, 12, 1), date(2025, 1, 15))
        add_metric(sync_session, "spans window", date(2024, 12, 1), date(2025, 6, 30))
        add_metric(sync_session, "fully inside", date(2025, 2, 1), date(2025, 2, 28))
        add_metric(sync_session, "before", date(2024, 10, 1), date(2024, 12, 31))
        add_metric(sync_session, "after", date(2025, 4, 1), date(2025, 4, 30))
        add_metric(sync_session, "other employee", date(2025, 2, 1), date(2025, 2, 28), employee_id="E-200")
        sync_session.commit()

    @pytest.mark.anyio
    async def test_overlap_rule(self, seeded, session_factory) -> None:
        async with session_factory() as db:
            metrics = await service.get_metrics_in_window(db, "E-100", START, END)
        assert [m.metric_name for m in metrics] == [
            "ends inside", "spans window", "fully inside", "starts inside",
        ]

    @pytest.mark.anyio
    async def test_window_edges_are_inclusive(self, people, sync_session, session_factory) -> None:
        add_metric(sync_session, "ends on start day", date(2024, 12, 1), START)
        add_metric(sync_session, "starts on end day", END, date(2025, 5, 1))
        sync_session.commit()
        async with session_factory() as db:
            metrics = await service.get_metrics_in_window(db, "E-100", START, END)
        assert {m.metric_name for m in metrics} == {"ends on start day", "starts on end day"}


class TestCalculateCategoryScores:
    @pytest.mark.anyio
    async def test_reads_active_kpis_and_window(self, people, sync_session, session_factory) -> None:
        sync_session.add_all([
            KPI(name="Punctuality", description="On time", category="attendance",
                weight=2, max_score=100, min_score=0, is_active=True),
            KPI(name="Teamwork", description="Works well", category="behavior",
                weight=1, max_score=100, min_score=0, is_active=False),
        ])
        add_metric(sync_session, "Punctuality", START, END, metric_type="Attendance", value=95)
        add_metric(sync_session, "Teamwork", START, END, metric_type="Behavior", value=70)
        add_metric(sync_session, "Punctuality", date(2024, 1, 1), date(2024, 3, 31),
                   metric_type="Attendance", value=10)
        sync_session.commit()

        async with session_factory() as db:
            result = await service.calculate_category_scores(db, "E-100", START, END)

        assert result.attendance_score == pytest.approx(95)
        assert result.behavior_score is None
        assert result.kpi_score is None
        assert len(result.metrics) == 2
        assert result.metrics[0].employee.employee_id == "E-100"


class TestPaginate:
    @pytest.mark.anyio
    async def test_counts_all_rows_and_slices_page(self, people, sync_session, session_factory) -> None:
        for i in range(12):
            add_metric(sync_session, f"metric {i}", START, END)
        sync_session.commit()

        async with session_factory() as db:
            rows, pagination = await service.paginate(
                db, select(PerformanceMetric).order_by(PerformanceMetric.id), page=2, limit=5
            )
        assert [r.metric_name for r in rows] == [f"metric {i}" for i in range(5, 10)]
        assert pagination.total == 12
        assert pagination.total_pages == 3


class TestHistory:
    @pytest.mark.anyio
    async def test_orders_newest_first(self, people, sync_session, session_factory) -> None:
        sync_session.add_all([
            PerformanceReview(employee_id="E-100", start_date=date(2024, 1, 1), end_date=date(2024, 6, 30)),
            PerformanceReview(employee_id="E-100", start_date=date(2025, 1, 1), end_date=date(2025, 6, 30)),
            PerformanceReview(employee_id="E-200", start_date=date(2025, 1, 1), end_date=date(2025, 6, 30)),
            PerformanceGoal(employee_id="E-100", title="Publish paper", target_date=date(2025, 5, 1)),
            PerformanceGoal(employee_id="E-100", title="Mentor", target_date=date(2025, 9, 1)),
        ])
        add_metric(sync_session, "older", date(2024, 1, 1), date(2024, 3, 31))
        add_metric(sync_session, "newer", START, END)
        sync_session.commit()

        async with session_factory() as db:
            history = await service.get_employee_performance_history(db, "E-100")

        assert [r.start_date.year for r in history["reviews"]] == [2025, 2024]
        assert [g.title for g in history["goals"]] == ["Mentor", "Publish paper"]
        assert [m.metric_name for m in history["metrics"]] == ["newer", "older"]

    @pytest.mark.anyio
    async def test_dashboard_summary_filters_by_employee(self, people, sync_session, session_factory) -> None:
        sync_session.add_all([
            PerformanceReview(employee_id="E-100", start_date=START, end_date=END,
                              status="approved", kpi_score=90, total_score=90),
            PerformanceReview(employee_id="E-200", start_date=START, end_date=END,
                              status="draft", kpi_score=60, total_score=60),
        ])
        sync_session.commit()

        async with session_factory() as db:
            summary = await service.get_dashboard_summary(db, employee_id="E-100")

        assert summary["total_reviews"] == 1
        assert summary["employees_up_for_promotion"] == 1
        assert summary["top_performers"][0]["employee_name"] == "Maria Santos"
        assert summary["top_performers"][0]["department"] == "Mathematics"


class TestSummarizeReviews:
    def test_empty(self) -> None:
        summary = service.summarize_reviews([])
        assert summary["average_total_score"] == 0
        assert summary["average_kpi_score"] == 0
        assert summary["top_performers"] == []

    def test_counts_and_rankings(self) -> None:
        ana = Employee(employee_id="E-1", first_name="Ana", last_name="Cruz", department="Biology")
        reviews = [
            review(92, kpi=95, employee=ana),
            review(88, kpi=80, status="approved"),
            review(65, kpi=60, status="pending", improvement_areas=["Grading turnaround"]),
            review(None, kpi=70, status="draft"),
        ]
        summary = service.summarize_reviews(reviews)

        assert summary["total_reviews"] == 4
        assert summary["completed_reviews"] == 2
        assert summary["employees_up_for_promotion"] == 2
        assert summary["employees_needing_training"] == 1
        assert summary["average_total_score"] == pytest.approx((92 + 88 + 65) / 3)
        assert summary["average_kpi_score"] == pytest.approx((95 + 80 + 60 + 70) / 4)
        assert [r["total_score"] for r in summary["top_performers"]] == [92, 88, 65]
        assert [r["total_score"] for r in summary["employees_needing_improvement"]] == [65, 88, 92]
        assert summary["top_performers"][0]["employee_name"] == "Ana Cruz"
        assert summary["employees_needing_improvement"][0]["improvement_areas"] == ["Grading turnaround"]

    def test_rankings_capped(self, monkeypatch) -> None:
        monkeypatch.setattr(settings, "DASHBOARD_RANKING_SIZE", 2)
        summary = service.summarize_reviews([review(s) for s in (50, 70, 90, 80)])
        assert [r["total_score"] for r in summary["top_performers"]] == [90, 80]
        assert [r["total_score"] for r in summary["employees_needing_improvement"]] == [50, 70]


class TestSummarizeMyReviews:
    def test_averages_completed_reviews_only(self) -> None:
        reviews = [
            review(90, kpi=85, status="completed"),
            review(81.333, kpi=None, status="approved"),
            review(40, kpi=40, status="pending"),
            review(None, status="completed"),
        ]
        summary = service.summarize_my_reviews(reviews, total_metrics=7)

        assert summary["total_reviews"] == 4
        assert summary["completed_reviews"] == 3
        assert summary["pending_reviews"] == 1
        assert summary["average_score"] == pytest.approx(85.67)
        assert summary["average_kpi_score"] == pytest.approx(42.5)
        assert summary["total_metrics"] == 7


class TestApplyReviewUpdate:
    def stored(self):
        return PerformanceReview(kpi_score=80.0, behavior_score=70.0, attendance_score=None, total_score=75.0)

    def test_score_change_recomputes_total(self) -> None:
        r = self.stored()
        service.apply_review_update(r, {"attendance_score": 90.0})
        assert r.total_score == pytest.approx(80)

    def test_explicit_total_wins(self) -> None:
        r = self.stored()
        service.apply_review_update(r, {"kpi_score": 100.0, "total_score": 50.0})
        assert r.kpi_score == 100
        assert r.total_score == 50

    def test_clearing_all_scores_clears_total(self) -> None:
        r = self.stored()
        service.apply_review_update(r, {"kpi_score": None, "behavior_score": None})
        assert r.total_score is None

    def test_total_only(self) -> None:
        r = self.stored()
        service.apply_review_update(r, {"total_score": 60.0, "remarks": "Solid term"})
        assert r.total_score == 60
        assert r.remarks == "Solid term"
