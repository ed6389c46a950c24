"""
Announcement and skill entity models.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text, UniqueConstraint

from ..base import TIMESTAMP, Base, new_id, utc_now


class Announcement(Base, table=True):
    """Table: announcements"""

    __tablename__ = "announcements"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    program_batch_id: str = Field(foreign_key="program_batch.id", max_length=64, index=True)
    title: str = Field(max_length=255)
    content: str = Field(sa_type=Text)
    created_by: Optional[str] = Field(default=None, foreign_key="users.id", max_length=64)
    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)
    updated_at: datetime = Field(default_factory=utc_now, sa_type=TIMESTAMP)


class Skill(Base, table=True):
    """Table: skills"""

    __tablename__ = "skills"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    name: str = Field(max_length=128, unique=True, index=True)


class TraineeSkill(Base, table=True):
    """Table: trainee_skills"""

    __tablename__ = "trainee_skills"
    __table_args__ = (UniqueConstraint("trainee_id", "skill_id", name="uq_trainee_skill"),)

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    trainee_id: str = Field(foreign_key="trainees.id", max_length=64, index=True)
    skill_id: str = Field(foreign_key="skills.id", max_length=64, index=True)
