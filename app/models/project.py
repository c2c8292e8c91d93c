"""Project model for the progress tracker."""

import uuid
from sqlalchemy import Column, String, Text, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.constants.constants import ProjectStatus
from app.models.base import Base, TimestampMixin, enum_values


class Project(Base, TimestampMixin):
    """Model representing a tracked project owned by the actor who created it."""

    __tablename__ = "projects"
    project_id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    name = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    major_goal = Column(Text, nullable=False)
    status = Column(
        SQLEnum(ProjectStatus, name="project_status", values_callable=enum_values),
        default=ProjectStatus.active,
        nullable=False,
    )
    created_by = Column(String, nullable=True, index=True)  # null on legacy records
    milestones = relationship("Milestone", back_populates="project", passive_deletes=True)
    reminders = relationship("EmailReminder", back_populates="project", passive_deletes=True)
