"""Milestone model for project goals."""

import uuid
from sqlalchemy import Column, String, Text, Date, Boolean, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.constants.constants import MilestoneStatus
from app.models.base import Base, TimestampMixin, enum_values


class Milestone(Base, TimestampMixin):
    """Model representing a milestone of a project. At most two per project are current."""

    __tablename__ = "milestones"
    milestone_id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(String, ForeignKey("projects.project_id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    status = Column(
        SQLEnum(MilestoneStatus, name="milestone_status", values_callable=enum_values),
        default=MilestoneStatus.pending,
        nullable=False,
    )
    is_current = Column(Boolean, default=False, nullable=False)
    target_date = Column(Date, nullable=True)
    project = relationship("Project", back_populates="milestones")
    weekly_progress = relationship("WeeklyProgress", back_populates="milestone", passive_deletes=True)
