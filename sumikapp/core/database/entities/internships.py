"""
Internship placement and industry partner entity models.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import Optional

from sqlmodel import Field, Text

from sumikapp.core.models.domain.enums import DocumentStatus

from ..base import TIMESTAMP, Base, new_id, utc_now


class InternshipDetails(Base, table=True):
    """A trainee's placement form for one enrollment.

    ``temp_email`` holds the supervisor's email until the coordinator approves
    the form, at which point a supervisor account is resolved and linked
    through ``supervisor_id``.

    Table: internship_details
    """

    __tablename__ = "internship_details"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    enrollment_id: str = Field(foreign_key="trainee_batch_enrollment.id", max_length=64, index=True)

    company_name: str = Field(max_length=255)
    contact_number: str = Field(max_length=32)
    nature_of_business: str = Field(max_length=128)
    address: str = Field(max_length=255)
    job_role: str = Field(max_length=128)
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    daily_schedule: str = Field(default="[]", sa_type=Text)

    status: str = Field(default=DocumentStatus.not_submitted.value, max_length=16, index=True)
    supervisor_id: Optional[str] = Field(default=None, foreign_key="supervisors.id", max_length=64, index=True)
    temp_email: Optional[str] = Field(default=None, max_length=255)
    feedback: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)

    def __repr__(self) -> str:
        return f"InternshipDetails(id={self.id}, company={self.company_name}, status={self.status})"


class IndustryPartner(Base, table=True):
    """Company with a signed memorandum of agreement.

    Table: industry_partners
    """

    __tablename__ = "industry_partners"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    company_name: str = Field(max_length=255, index=True)
    company_address: Optional[str] = Field(default=None, max_length=255)
    company_contact_number: Optional[str] = Field(default=None, max_length=32)
    nature_of_business: Optional[str] = Field(default=None, max_length=128)
    date_of_signing: Optional[date] = Field(default=None)
    moa_file_path: Optional[str] = Field(default=None, max_length=512)
    file_name: Optional[str] = Field(default=None, max_length=255)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)
