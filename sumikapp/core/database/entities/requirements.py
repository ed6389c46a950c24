"""
Requirement entity models.

- ``requirement_types``: a document kind, either predefined by an admin or
  custom to a coordinator.
- ``batch_requirements``: a requirement type attached to a program batch.
- ``requirements``: a trainee's uploaded file for one batch requirement.
- ``requirements_history``: append-only review trail. The newest row is the
  requirement's current status.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import TIMESTAMP, Base, new_id, utc_now


class RequirementType(Base, table=True):
    """Table: requirement_types"""

    __tablename__ = "requirement_types"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=255, index=True)
    description: Optional[str] = Field(default=None, sa_type=Text)
    is_predefined: bool = Field(default=False, index=True)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)


class BatchRequirement(Base, table=True):
    """Table: batch_requirements"""

    __tablename__ = "batch_requirements"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    program_batch_id: str = Field(foreign_key="program_batch.id", max_length=64, index=True)
    requirement_type_id: str = Field(foreign_key="requirement_types.id", max_length=64, index=True)
    is_mandatory: bool = Field(default=True)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)


class Requirement(Base, table=True):
    """Uploaded file metadata. The file bytes live in external storage.

    Table: requirements
    """

    __tablename__ = "requirements"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    batch_requirement_id: str = Field(foreign_key="batch_requirements.id", max_length=64, index=True)
    enrollment_id: str = Field(foreign_key="trainee_batch_enrollment.id", max_length=64, index=True)
    file_name: str = Field(max_length=255)
    file_path: str = Field(max_length=512)
    file_size: int = Field(default=0)
    file_type: Optional[str] = Field(default=None, max_length=128)
    submitted_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)


class RequirementHistory(Base, table=True):
    """Table: requirements_history"""

    __tablename__ = "requirements_history"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    document_id: str = Field(foreign_key="requirements.id", max_length=64, index=True)
    title: str = Field(max_length=255)
    description: Optional[str] = Field(default=None, sa_type=Text)
    document_status: str = Field(max_length=16, index=True)
    date: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)
