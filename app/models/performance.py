# app/models/performance.py
from sqlalchemy import Column, Integer, String, Text, Float, Boolean, Date, DateTime, ForeignKey, JSON, func
from sqlalchemy.orm import relationship
from app.database import Base

KPI_CATEGORIES = ("kpi", "behavior", "attendance", "other")
METRIC_TYPES = ("KPI", "Behavior", "Attendance", "Quality", "Productivity", "CustomerSatisfaction", "Other")
REVIEW_STATUSES = ("draft", "pending", "completed", "approved")


class KPI(Base):
    __tablename__ = "kpis"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String, nullable=False, index=True)  # one of KPI_CATEGORIES
    weight = Column(Float, nullable=False)      # relative importance within the category
    max_score = Column(Float, nullable=False)
    min_score = Column(Float, nullable=False, default=0.0)
    is_active = Column(Boolean, nullable=False, default=True)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())


class PerformanceMetric(Base):
    __tablename__ = "performance_metrics"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String, ForeignKey("employees.employee_id"), nullable=False, index=True)
    metric_name = Column(String, nullable=False)
    metric_type = Column(String, nullable=False)  # one of METRIC_TYPES
    value = Column(Float, nullable=False)
    target = Column(Float, nullable=True)         # None reads as 100 when scoring
    unit = Column(String, nullable=True)
    period = Column(String, nullable=False)       # label, e.g. "2025-Q1"
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee", lazy="selectin")


class PerformanceReview(Base):
    __tablename__ = "performance_reviews"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String, ForeignKey("employees.employee_id"), nullable=False, index=True)
    reviewer_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    period = Column(String, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)

    kpi_score = Column(Float, nullable=True)
    behavior_score = Column(Float, nullable=True)
    attendance_score = Column(Float, nullable=True)
    total_score = Column(Float, nullable=True)

    status = Column(String, nullable=False, default="draft")  # one of REVIEW_STATUSES
    remarks = Column(Text, nullable=True)
    employee_comments = Column(Text, nullable=True)
    goals = Column(JSON, nullable=True)
    achievements = Column(JSON, nullable=True)
    improvement_areas = Column(JSON, nullable=True)

    reviewed_at = Column(DateTime(timezone=True), nullable=True)
    approved_at = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee", lazy="selectin")
    reviewer = relationship("User", lazy="selectin")
    performance_goals = relationship("PerformanceGoal", back_populates="review", lazy="selectin")
