"""
Requirement I/O models for API requests and responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from sumikapp.core.models.domain.enums import DocumentStatus


class RequirementTypeCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255, description="Document name, e.g. 'Medical Certificate'")
    description: Optional[str] = None


class RequirementTypeUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None


class RequirementTypeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    description: Optional[str] = None
    is_predefined: bool
    created_by: Optional[str] = None
    created_at: datetime


class CustomRequirementCreate(RequirementTypeCreate):
    is_mandatory: bool = True


class CustomRequirementUpdate(RequirementTypeUpdate):
    is_mandatory: Optional[bool] = None


class BatchRequirementRead(BaseModel):
    """A section requirement with compliance counts across enrolled trainees."""

    id: str
    requirement_type_id: str
    name: str
    description: Optional[str] = None
    is_mandatory: bool
    is_predefined: bool
    submitted: int = 0
    pending: int = 0
    approved: int = 0
    rejected: int = 0
    not_submitted: int = 0
    total_trainees: int = 0
    compliance_percentage: float = 0.0


class RequirementUpload(BaseModel):
    """Metadata of a file already stored in external object storage."""

    batch_requirement_id: str
    file_name: str = Field(min_length=1, max_length=255)
    file_path: str = Field(min_length=1, max_length=512)
    file_size: int = Field(ge=0)
    file_type: Optional[str] = Field(default=None, max_length=128)


class RequirementHistoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    title: str
    description: Optional[str] = None
    document_status: DocumentStatus
    date: datetime


class RequirementRead(BaseModel):
    """A batch requirement from the trainee's point of view."""

    batch_requirement_id: str
    requirement_name: str
    requirement_description: Optional[str] = None
    is_mandatory: bool = True
    requirement_id: Optional[str] = None
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_size: Optional[int] = None
    file_type: Optional[str] = None
    submitted_at: Optional[datetime] = None
    status: DocumentStatus = DocumentStatus.not_submitted
    history: List[RequirementHistoryRead] = Field(default_factory=list)


class SubmissionReview(BaseModel):
    feedback: Optional[str] = Field(default=None, max_length=1000, description="Reason shown to the trainee")


class TraineeRequirementsRead(BaseModel):
    trainee_id: str
    trainee_name: str
    enrollment_id: str
    documents: List[RequirementRead] = Field(default_factory=list)
