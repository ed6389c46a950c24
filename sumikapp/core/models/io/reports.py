"""
Trainee report I/O models for API requests and responses.

The three report kinds (weekly, attendance, accomplishment) share these
schemas. Fields that only one kind stores (e.g. ``feedback`` on weekly
entries) are optional and ``None`` for the others.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sumikapp.core.models.domain.enums import DocumentStatus, EntryStatus, ReportKind

MAX_SHIFT_HOURS = 16
MAX_NOTES_LENGTH = 1000
MAX_FEEDBACK_LENGTH = 200


def hours_between(start: time, end: time) -> float:
    """Hours from ``start`` to ``end`` on the same day, rounded to 2 decimals."""
    minutes = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    return round(minutes / 60, 2)


class ReportCreate(BaseModel):
    """Schema for opening a new report period."""

    start_date: date = Field(description="First day covered by the report")
    end_date: date = Field(description="Last day covered by the report")

    @model_validator(mode="after")
    def _check_range(self) -> "ReportCreate":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class ReportEntryCreate(BaseModel):
    """Schema for adding one day to a report.

    ``total_hours`` is derived from ``time_in``/``time_out`` when omitted.
    """

    entry_date: date
    time_in: Optional[time] = Field(default=None, description="Clock-in time (HH:MM)")
    time_out: Optional[time] = Field(default=None, description="Clock-out time (HH:MM)")
    total_hours: Optional[float] = Field(default=None, ge=0, le=24)
    status: EntryStatus = EntryStatus.present
    daily_accomplishments: Optional[str] = Field(default=None, description="What was done that day")
    additional_notes: Optional[str] = Field(default=None, max_length=MAX_NOTES_LENGTH)

    @model_validator(mode="after")
    def _check_times(self) -> "ReportEntryCreate":
        if (self.time_in is None) != (self.time_out is None):
            raise ValueError("time_in and time_out must be provided together")
        if self.time_in is not None and self.time_out is not None:
            if self.time_out <= self.time_in:
                raise ValueError("time_out must be after time_in on the same day")
            shift = hours_between(self.time_in, self.time_out)
            if shift > MAX_SHIFT_HOURS:
                raise ValueError(f"shift cannot exceed {MAX_SHIFT_HOURS} hours")
            if self.total_hours is None:
                self.total_hours = shift
        if self.total_hours is None:
            self.total_hours = 0.0
        return self


class EntryStatusUpdate(BaseModel):
    status: EntryStatus = Field(description="New attendance status for the entry")


class EntryFeedback(BaseModel):
    feedback: str = Field(min_length=1, max_length=MAX_FEEDBACK_LENGTH, description="Supervisor feedback")


class ReportEntryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    report_id: str
    entry_date: date
    time_in: Optional[time] = None
    time_out: Optional[time] = None
    total_hours: float
    status: EntryStatus
    is_confirmed: bool
    daily_accomplishments: Optional[str] = None
    additional_notes: Optional[str] = None
    feedback: Optional[str] = None


class ReportRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    internship_id: str
    start_date: date
    end_date: date
    period_total: float
    previous_total: float
    total_hours_served: float
    status: DocumentStatus
    submitted_at: Optional[datetime] = None
    supervisor_approved_at: Optional[datetime] = None
    created_at: datetime


class ReportDetail(ReportRead):
    entries: List[ReportEntryRead] = Field(default_factory=list)


class ReviewReportRead(ReportRead):
    """A report as listed for reviewers (supervisors and coordinators)."""

    kind: ReportKind
    trainee_id: str
    trainee_name: str
    company_name: Optional[str] = None
