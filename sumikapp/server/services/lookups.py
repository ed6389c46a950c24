"""
Cross-table lookups shared by several services.

These helpers resolve the ownership chain of the schema:

    user -> trainee -> enrollment -> internship -> report

and the coordinator -> section link used by the section-scoped endpoints.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from sumikapp.core.database.entities import (
    InternshipDetails,
    ProgramBatch,
    TraineeBatchEnrollment,
    User,
)
from sumikapp.core.errors import NotFoundError, PermissionDeniedError


async def get_active_user(session: AsyncSession, user_id: str) -> User:
    user = await session.get(User, user_id)
    if user is None or user.is_deleted:
        raise NotFoundError("User", user_id)
    return user


async def latest_enrollment(session: AsyncSession, trainee_id: str) -> Optional[TraineeBatchEnrollment]:
    stmt = (
        select(TraineeBatchEnrollment)
        .where(TraineeBatchEnrollment.trainee_id == trainee_id)
        .order_by(TraineeBatchEnrollment.created_at.desc())
    )
    result = await session.execute(stmt)
    return result.scalars().first()


async def trainee_internships(session: AsyncSession, trainee_id: str) -> List[InternshipDetails]:
    """All internships of a trainee across enrollments, newest first."""
    stmt = (
        select(InternshipDetails)
        .join(TraineeBatchEnrollment, InternshipDetails.enrollment_id == TraineeBatchEnrollment.id)
        .where(TraineeBatchEnrollment.trainee_id == trainee_id)
        .order_by(InternshipDetails.created_at.desc())
    )
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def latest_internship(session: AsyncSession, trainee_id: str) -> InternshipDetails:
    internships = await trainee_internships(session, trainee_id)
    if not internships:
        raise NotFoundError("Internship for trainee", trainee_id)
    return internships[0]


async def internship_with_enrollment(
    session: AsyncSession, internship_id: str
) -> Tuple[InternshipDetails, TraineeBatchEnrollment]:
    stmt = (
        select(InternshipDetails, TraineeBatchEnrollment)
        .join(TraineeBatchEnrollment, InternshipDetails.enrollment_id == TraineeBatchEnrollment.id)
        .where(InternshipDetails.id == internship_id)
    )
    result = await session.execute(stmt)
    row = result.first()
    if row is None:
        raise NotFoundError("Internship", internship_id)
    return row[0], row[1]


async def owned_section(session: AsyncSession, coordinator_id: str, slug: str) -> ProgramBatch:
    """Resolve a section by its title within the coordinator's own sections."""
    stmt = select(ProgramBatch).where(
        ProgramBatch.coordinator_id == coordinator_id,
        ProgramBatch.title == slug,
    )
    result = await session.execute(stmt)
    section = result.scalars().first()
    if section is None:
        raise NotFoundError("Section", slug)
    return section


async def assert_section_owner(session: AsyncSession, coordinator_id: str, program_batch_id: str) -> ProgramBatch:
    section = await session.get(ProgramBatch, program_batch_id)
    if section is None:
        raise NotFoundError("Section", program_batch_id)
    if section.coordinator_id != coordinator_id:
        raise PermissionDeniedError("Section belongs to another coordinator")
    return section
