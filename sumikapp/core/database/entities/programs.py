"""
Program batch (section) and enrollment entity models.

A program batch is a coordinator-owned cohort for one internship code. The
API addresses a batch by its title, which is unique per coordinator.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from sqlmodel import Field, Text, UniqueConstraint

from sumikapp.core.models.domain.enums import OJTStatus

from ..base import TIMESTAMP, Base, new_id, utc_now


class ProgramBatch(Base, table=True):
    """Table: program_batch"""

    __tablename__ = "program_batch"
    __table_args__ = (UniqueConstraint("coordinator_id", "title", name="uq_program_batch_coordinator_title"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    coordinator_id: str = Field(foreign_key="coordinators.id", max_length=64, index=True)
    title: str = Field(max_length=128, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    internship_code: str = Field(max_length=16, index=True)
    required_hours: int = Field(default=0, ge=0)
    start_date: date
    end_date: date
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)

    def __repr__(self) -> str:
        return f"ProgramBatch(id={self.id}, title={self.title}, code={self.internship_code})"


class TraineeBatchEnrollment(Base, table=True):
    """A trainee's membership in a program batch.

    Table: trainee_batch_enrollment
    """

    __tablename__ = "trainee_batch_enrollment"
    __table_args__ = (UniqueConstraint("trainee_id", "program_batch_id", name="uq_enrollment_trainee_batch"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    trainee_id: str = Field(foreign_key="trainees.id", max_length=64, index=True)
    program_batch_id: str = Field(foreign_key="program_batch.id", max_length=64, index=True)
    ojt_status: str = Field(default=OJTStatus.not_started.value, max_length=16, index=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)
