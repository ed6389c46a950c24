"""
User, skill, evaluation and notification I/O models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from sumikapp.core.models.domain.enums import OJTStatus, Role, UserStatus
from sumikapp.prediction.models import EvaluationScores

from .internships import EMAIL_PATTERN, normalize_email


class UserCreate(BaseModel):
    """Schema for an admin creating an account.

    Profile fields only apply to the matching role and are ignored otherwise.
    """

    email: str = Field(pattern=EMAIL_PATTERN, max_length=255)
    first_name: str = Field(min_length=1, max_length=128)
    middle_name: Optional[str] = Field(default=None, max_length=128)
    last_name: str = Field(min_length=1, max_length=128)
    role: Role
    status: UserStatus = UserStatus.active

    student_id_number: Optional[str] = Field(default=None, max_length=32, description="Trainee only")
    course: Optional[str] = Field(default=None, max_length=128, description="Trainee only")
    section: Optional[str] = Field(default=None, max_length=64, description="Trainee only")
    department: Optional[str] = Field(default=None, max_length=128, description="Coordinator and supervisor")
    company_name: Optional[str] = Field(default=None, max_length=255, description="Supervisor only")
    position: Optional[str] = Field(default=None, max_length=128, description="Supervisor only")

    @field_validator("email", mode="before")
    @classmethod
    def _normalize_email(cls, value):
        return normalize_email(value)


class UserStatusUpdate(BaseModel):
    status: UserStatus


class UserRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    email: str
    first_name: str
    middle_name: Optional[str] = None
    last_name: str
    role: Role
    status: UserStatus
    last_login: Optional[datetime] = None
    created_at: datetime


class CurrentUserRead(UserRead):
    ojt_status: Optional[OJTStatus] = None


class UserStatistics(BaseModel):
    total: int = 0
    by_role: Dict[str, int] = Field(default_factory=dict)
    by_status: Dict[str, int] = Field(default_factory=dict)


class SkillAdd(BaseModel):
    name: str = Field(min_length=1, max_length=128)


class SkillRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str


class EvaluationSubmit(BaseModel):
    scores: EvaluationScores
    comments: Optional[str] = Field(default=None, max_length=2000)


class EvaluationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    trainee_id: str
    supervisor_id: str
    internship_id: Optional[str] = None
    work_attitude_score: float
    personal_appearance_score: float
    professional_competence_score: float
    total_score: float
    overall_rating: int
    comments: Optional[str] = None
    created_at: datetime


class SupervisedTraineeRead(BaseModel):
    trainee_id: str
    trainee_name: str
    email: str
    course: Optional[str] = None
    section: Optional[str] = None
    internship_id: str
    job_role: str
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    ojt_status: OJTStatus
    is_evaluated: bool = False


class NotificationRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    message: str
    notification_type: str
    reference_id: Optional[str] = None
    is_read: bool
    created_at: datetime
