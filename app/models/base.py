from sqlalchemy.orm import declarative_base
from sqlalchemy import Column, DateTime
from datetime import datetime

Base = declarative_base()


class TimestampMixin:
    """Mixin for timestamp columns"""
    __abstract__ = True
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


def enum_values(enum_cls):
    """Persist enum values ("on-hold") rather than member names ("on_hold")."""
    return [member.value for member in enum_cls]

__all__ = ["Base", "TimestampMixin", "enum_values"]
