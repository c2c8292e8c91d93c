"""Email reminder model."""

import uuid
from sqlalchemy import Column, String, Text, DateTime, ForeignKey, Enum as SQLEnum
from sqlalchemy.orm import relationship
from app.constants.constants import ReminderStatus
from app.models.base import Base, TimestampMixin, enum_values


class EmailReminder(Base, TimestampMixin):
    """Model representing an email reminder scheduled for a project."""

    __tablename__ = "email_reminders"
    reminder_id = Column(String, primary_key=True, index=True, default=lambda: str(uuid.uuid4()))
    project_id = Column(String, ForeignKey("projects.project_id"), nullable=False, index=True)
    subject = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    recipient_email = Column(String, nullable=False)
    reminder_date = Column(DateTime, nullable=False, index=True)
    status = Column(
        SQLEnum(ReminderStatus, name="reminder_status", values_callable=enum_values),
        default=ReminderStatus.scheduled,
        nullable=False,
    )
    project = relationship("Project", back_populates="reminders")
