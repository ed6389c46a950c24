"""
Internship placement and industry partner I/O models.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from sumikapp.core.models.domain.enums import DocumentStatus
from sumikapp.dashboards.parsing import parse_json_field

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
CONTACT_NUMBER_PATTERN = r"^[0-9]{11}$"
OTHER_JOB_ROLE = "others"


def normalize_email(value):
    """Trim and lowercase an email before the pattern check runs."""
    if isinstance(value, str):
        return value.strip().lower()
    return value


class InternshipCreate(BaseModel):
    """
    Schema for a trainee's placement form.

    When ``job_role`` is ``"others"`` the free-text ``custom_job_role`` is
    required and is stored as the job role.
    """

    enrollment_id: Optional[str] = Field(
        default=None, description="Enrollment the placement belongs to; defaults to the latest one"
    )
    company_name: str = Field(min_length=1, max_length=255)
    contact_number: str = Field(
        pattern=CONTACT_NUMBER_PATTERN, description="11-digit contact number", examples=["09171234567"]
    )
    nature_of_business: str = Field(min_length=1, max_length=128)
    address: str = Field(min_length=1, max_length=255, description="Company address")
    supervisor_email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    job_role: str = Field(min_length=1, max_length=128)
    custom_job_role: Optional[str] = Field(default=None, max_length=128)
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    daily_schedule: List[str] = Field(min_length=1, description="Working days, e.g. ['monday', 'tuesday']")

    @field_validator("supervisor_email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value)

    @model_validator(mode="after")
    def _check_form(self) -> "InternshipCreate":
        if self.job_role == OTHER_JOB_ROLE and not (self.custom_job_role and self.custom_job_role.strip()):
            raise ValueError("Custom job role is required when 'Others' is selected")
        if self.end_date <= self.start_date:
            raise ValueError("End date must be after start date")
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self

    @property
    def resolved_job_role(self) -> str:
        if self.job_role == OTHER_JOB_ROLE and self.custom_job_role:
            return self.custom_job_role.strip()
        return self.job_role


class InternshipUpdate(BaseModel):
    company_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    contact_number: Optional[str] = Field(default=None, pattern=CONTACT_NUMBER_PATTERN)
    nature_of_business: Optional[str] = Field(default=None, min_length=1, max_length=128)
    address: Optional[str] = Field(default=None, min_length=1, max_length=255)
    supervisor_email: Optional[str] = Field(default=None, pattern=EMAIL_PATTERN, max_length=255)
    job_role: Optional[str] = Field(default=None, min_length=1, max_length=128)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    start_time: Optional[time] = None
    end_time: Optional[time] = None
    daily_schedule: Optional[List[str]] = Field(default=None, min_length=1)

    @field_validator("supervisor_email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value)


class InternshipRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    enrollment_id: str
    company_name: str
    contact_number: str
    nature_of_business: str
    address: str
    job_role: str
    start_date: date
    end_date: date
    start_time: time
    end_time: time
    daily_schedule: List[str]
    status: DocumentStatus
    supervisor_id: Optional[str] = None
    temp_email: Optional[str] = None
    feedback: Optional[str] = None
    created_at: datetime

    @field_validator("daily_schedule", mode="before")
    @classmethod
    def _decode_schedule(cls, value):
        return parse_json_field(value, [])


class InternshipReview(BaseModel):
    feedback: Optional[str] = Field(default=None, max_length=1000)


class IndustryPartnerCreate(BaseModel):
    company_name: str = Field(min_length=1, max_length=255)
    company_address: Optional[str] = Field(default=None, max_length=255)
    company_contact_number: Optional[str] = Field(default=None, max_length=32)
    nature_of_business: Optional[str] = Field(default=None, max_length=128)
    date_of_signing: Optional[date] = None
    moa_file_path: Optional[str] = Field(default=None, max_length=512)
    file_name: Optional[str] = Field(default=None, max_length=255)


class IndustryPartnerUpdate(BaseModel):
    company_name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    company_address: Optional[str] = Field(default=None, max_length=255)
    company_contact_number: Optional[str] = Field(default=None, max_length=32)
    nature_of_business: Optional[str] = Field(default=None, max_length=128)
    date_of_signing: Optional[date] = None
    moa_file_path: Optional[str] = Field(default=None, max_length=512)
    file_name: Optional[str] = Field(default=None, max_length=255)


class IndustryPartnerRead(IndustryPartnerCreate):
    model_config = ConfigDict(from_attributes=True)

    id: str
    created_at: datetime
