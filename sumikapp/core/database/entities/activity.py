"""
Activity feed and notification entity models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import Column
from sqlmodel import Field, Text

from ..base import TIMESTAMP, Base, new_id, utc_now


class Notification(Base, table=True):
    """Table: notifications"""

    __tablename__ = "notifications"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", max_length=64, index=True)
    title: str = Field(max_length=255)
    message: str = Field(sa_type=Text)
    notification_type: str = Field(max_length=32, index=True)
    reference_id: Optional[str] = Field(default=None, max_length=64)
    is_read: bool = Field(default=False, index=True)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)


class RecentActivity(Base, table=True):
    """One row of the activity feed shown on dashboards.

    The ``metadata`` column is exposed as ``activity_metadata`` because
    ``metadata`` is reserved on declarative models.

    Table: recent_activity
    """

    __tablename__ = "recent_activity"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    user_id: str = Field(foreign_key="users.id", max_length=64, index=True)
    user_role: str = Field(max_length=16, index=True)
    activity_type: str = Field(max_length=64, index=True)
    activity_title: str = Field(max_length=255)
    activity_description: Optional[str] = Field(default=None, sa_type=Text)
    reference_id: Optional[str] = Field(default=None, max_length=64)
    reference_type: Optional[str] = Field(default=None, max_length=64)
    program_batch_id: Optional[str] = Field(default=None, max_length=64, index=True)
    activity_metadata: Optional[str] = Field(default=None, sa_column=Column("metadata", Text, nullable=True))
    is_deleted: bool = Field(default=False)
    activity_timestamp: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)
