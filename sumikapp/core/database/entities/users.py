"""
User entity models.

Every account has a ``users`` row. Trainees, coordinators and supervisors also
have a role profile row sharing the same primary key.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field

from sumikapp.core.models.domain.enums import OJTStatus, UserStatus

from ..base import TIMESTAMP, Base, new_id, utc_now


class User(Base, table=True):
    """Entity for an account of any role.

    Table: users
    """

    __tablename__ = "users"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    email: str = Field(max_length=255, unique=True, index=True)
    first_name: str = Field(max_length=128)
    middle_name: Optional[str] = Field(default=None, max_length=128)
    last_name: str = Field(max_length=128)
    role: str = Field(max_length=16, index=True)
    status: str = Field(default=UserStatus.active.value, max_length=16, index=True)

    is_deleted: bool = Field(default=False, index=True)
    deleted_at: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
    last_login: Optional[datetime] = Field(default=None, sa_type=TIMESTAMP)
    created_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(part for part in parts if part)

    def __repr__(self) -> str:
        return f"User(id={self.id}, email={self.email}, role={self.role})"


class Trainee(Base, table=True):
    """Trainee profile.

    ``ojt_status`` mirrors the status of the trainee's current enrollment and
    drives which navigation routes they see.

    Table: trainees
    """

    __tablename__ = "trainees"

    id: str = Field(primary_key=True, foreign_key="users.id", max_length=64)
    student_id_number: Optional[str] = Field(default=None, max_length=32, index=True)
    course: Optional[str] = Field(default=None, max_length=128)
    section: Optional[str] = Field(default=None, max_length=64)
    address: Optional[str] = Field(default=None, max_length=255)
    mobile_number: Optional[str] = Field(default=None, max_length=32)
    ojt_status: str = Field(default=OJTStatus.not_started.value, max_length=16, index=True)


class Coordinator(Base, table=True):
    """Table: coordinators"""

    __tablename__ = "coordinators"

    id: str = Field(primary_key=True, foreign_key="users.id", max_length=64)
    department: Optional[str] = Field(default=None, max_length=128)


class Supervisor(Base, table=True):
    """Company supervisor profile.

    Table: supervisors
    """

    __tablename__ = "supervisors"

    id: str = Field(primary_key=True, foreign_key="users.id", max_length=64)
    company_name: Optional[str] = Field(default=None, max_length=255)
    company_address: Optional[str] = Field(default=None, max_length=255)
    company_contact_no: Optional[str] = Field(default=None, max_length=32)
    department: Optional[str] = Field(default=None, max_length=128)
    position: Optional[str] = Field(default=None, max_length=128)
    nature_of_business: Optional[str] = Field(default=None, max_length=128)
    telephone_number: Optional[str] = Field(default=None, max_length=32)
