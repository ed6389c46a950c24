"""
Trainee report entity models.

Weekly, attendance and accomplishment reports share one shape: a date range
owned by an internship, a rolled-up hour total, and a review status. Each
report has dated entries.

Hour rollup, kept in sync whenever an entry is added:

- ``period_total`` = sum of the entries' ``total_hours``
- ``total_hours_served`` = ``previous_total`` + ``period_total``
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from sqlmodel import Field, Text

from sumikapp.core.models.domain.enums import DocumentStatus, EntryStatus

from ..base import TIMESTAMP, Base, new_id, utc_now


class ReportBase(Base):
    """Fields shared by every report table."""

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    internship_id: str = Field(foreign_key="internship_details.id", max_length=64, index=True)
    start_date: date
    end_date: date
    period_total: float = Field(default=0.0)
    previous_total: float = Field(default=0.0)
    total_hours_served: float = Field(default=0.0)
    status: str = Field(default=DocumentStatus.not_submitted.value, max_length=16, index=True)
    submitted_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
    supervisor_approved_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)


class EntryBase(Base):
    """Fields shared by every report entry table."""

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    entry_date: date
    total_hours: float = Field(default=0.0)
    status: str = Field(default=EntryStatus.present.value, max_length=16)
    is_confirmed: bool = Field(default=False)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)


class WeeklyReport(ReportBase, table=True):
    """Table: weekly_reports"""

    __tablename__ = "weekly_reports"


class WeeklyReportEntry(EntryBase, table=True):
    """One day of a weekly report, with supervisor feedback.

    Table: weekly_report_entries
    """

    __tablename__ = "weekly_report_entries"

    report_id: str = Field(foreign_key="weekly_reports.id", max_length=64, index=True)
    time_in: Optional[time] = Field(default=None)
    time_out: Optional[time] = Field(default=None)
    daily_accomplishments: Optional[str] = Field(default=None, sa_type=Text)
    additional_notes: Optional[str] = Field(default=None, sa_type=Text)
    feedback: Optional[str] = Field(default=None, max_length=200)


class AttendanceReport(ReportBase, table=True):
    """Table: attendance_reports"""

    __tablename__ = "attendance_reports"


class AttendanceEntry(EntryBase, table=True):
    """Table: attendance_entries"""

    __tablename__ = "attendance_entries"

    report_id: str = Field(foreign_key="attendance_reports.id", max_length=64, index=True)
    time_in: Optional[time] = Field(default=None)
    time_out: Optional[time] = Field(default=None)


class AccomplishmentReport(ReportBase, table=True):
    """Table: accomplishment_reports"""

    __tablename__ = "accomplishment_reports"


class AccomplishmentEntry(EntryBase, table=True):
    """Table: accomplishment_entries"""

    __tablename__ = "accomplishment_entries"

    report_id: str = Field(foreign_key="accomplishment_reports.id", max_length=64, index=True)
    daily_accomplishments: Optional[str] = Field(default=None, sa_type=Text)
