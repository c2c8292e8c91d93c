"""Constants for actor roles, project/milestone/reminder statuses and delay reasons."""

from enum import Enum


class ActorRole(str, Enum):
    """Enumeration of actor roles supplied by the session."""

    manager = "manager"
    user = "user"


class ProjectStatus(str, Enum):
    """Enumeration of project statuses."""

    active = "active"
    on_hold = "on-hold"
    completed = "completed"


class MilestoneStatus(str, Enum):
    """Enumeration of milestone statuses."""

    pending = "pending"
    in_progress = "in-progress"
    completed = "completed"


class ReminderStatus(str, Enum):
    """Enumeration of email reminder statuses."""

    scheduled = "scheduled"
    sent = "sent"
    error = "error"


class DelayReason(str, Enum):
    """Enumeration of reasons a weekly task slipped."""

    client = "client"
    developer = "developer"
    other = "other"


# At most this many milestones of one project may be flagged current.
MAX_CURRENT_MILESTONES = 2

# Reporting weeks run Sunday to Saturday.
WEEK_START_WEEKDAY = 6
