"""Weekly progress report model."""

import uuid
from sqlalchemy import Column, String, Text, Date, Boolean, ForeignKey
from sqlalchemy.orm import relationship
from app.models.base import Base, TimestampMixin


class WeeklyProgress(Base, TimestampMixin):
    """Model representing one week of progress recorded against a milestone.

    The task lists are stored as JSON text.
    """

    __tablename__ = "weekly_progress"
    progress_id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    milestone_id = Column(String, ForeignKey("milestones.milestone_id"), nullable=False, index=True)
    week_start_date = Column(Date, nullable=False)
    week_end_date = Column(Date, nullable=False)
    completed_this_week = Column(Text, nullable=False, default="[]")
    planned_for_next_week = Column(Text, nullable=False, default="[]")
    task_delays = Column(Text, nullable=True)
    goals_achieved = Column(Boolean, default=False, nullable=False)
    notes = Column(Text, nullable=True)
    milestone = relationship("Milestone", back_populates="weekly_progress")
