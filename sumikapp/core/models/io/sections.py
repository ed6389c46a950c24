"""
Section (program batch) and announcement I/O models.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from sumikapp.core.models.domain.enums import InternshipCode, OJTStatus


class SectionCreate(BaseModel):
    """Schema for creating a section."""

    title: str = Field(min_length=1, max_length=128, description="Section title, unique per coordinator")
    description: Optional[str] = Field(default=None, description="Free-text description")
    internship_code: InternshipCode = Field(description="Internship course code")
    required_hours: int = Field(ge=1, description="Hours a trainee must render")
    start_date: date
    end_date: date

    @model_validator(mode="after")
    def _check_range(self) -> "SectionCreate":
        if self.end_date <= self.start_date:
            raise ValueError("end_date must be after start_date")
        return self


class SectionUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = None
    internship_code: Optional[InternshipCode] = None
    required_hours: Optional[int] = Field(default=None, ge=1)
    start_date: Optional[date] = None
    end_date: Optional[date] = None


class SectionRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    coordinator_id: str
    title: str
    description: Optional[str] = None
    internship_code: InternshipCode
    required_hours: int
    start_date: date
    end_date: date
    created_at: datetime
    trainee_count: int = 0


class AddStudentsRequest(BaseModel):
    trainee_ids: List[str] = Field(min_length=1, description="Trainee user ids to enroll")


class EnrollmentFailure(BaseModel):
    trainee_id: str
    reason: str


class EnrollmentResult(BaseModel):
    """Per-trainee outcome of a bulk enrollment."""

    successful: List[str] = Field(default_factory=list)
    failed: List[EnrollmentFailure] = Field(default_factory=list)
    total: int = 0


class SectionTraineeRead(BaseModel):
    enrollment_id: str
    trainee_id: str
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    email: str
    student_id_number: Optional[str] = None
    course: Optional[str] = None
    section: Optional[str] = None
    ojt_status: OJTStatus


class AnnouncementCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)


class AnnouncementUpdate(BaseModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)


class AnnouncementRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    program_batch_id: str
    title: str
    content: str
    created_by: Optional[str] = None
    created_at: datetime
    updated_at: datetime
