from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from app.database import Base

GOAL_STATUSES = ("NotStarted", "InProgress", "OnTrack", "AtRisk", "Completed", "Cancelled")


class PerformanceGoal(Base):
    __tablename__ = "performance_goals"

    id = Column(Integer, primary_key=True, index=True)
    employee_id = Column(String, ForeignKey("employees.employee_id"), nullable=False, index=True)
    performance_review_id = Column(Integer, ForeignKey("performance_reviews.id", ondelete="SET NULL"), nullable=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    target_date = Column(Date, nullable=False)
    status = Column(String, nullable=False, default="NotStarted")  # one of GOAL_STATUSES
    progress = Column(Integer, nullable=False, default=0)          # 0–100
    completion_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String, nullable=True)
    updated_by = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    employee = relationship("Employee", lazy="selectin")
    review = relationship("PerformanceReview", back_populates="performance_goals", lazy="selectin")
