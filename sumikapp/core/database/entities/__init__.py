"""
Database entity models.

This package contains all database entity models organized by business domain.

Modules:
- users: accounts and role profiles (trainee, coordinator, supervisor)
- programs: program batches (sections) and trainee enrollments
- internships: placement forms and industry partners
- reports: weekly, attendance and accomplishment reports and their entries
- requirements: requirement types, batch requirements, uploads and review history
- content: announcements and skills
- evaluations: supervisor evaluations and employability predictions
- activity: recent activity feed and notifications
"""

from .activity import Notification, RecentActivity
from .content import Announcement, Skill, TraineeSkill
from .evaluations import EmployabilityPrediction, Evaluation
from .internships import IndustryPartner, InternshipDetails
from .programs import ProgramBatch, TraineeBatchEnrollment
from .reports import (
    AccomplishmentEntry,
    AccomplishmentReport,
    AttendanceEntry,
    AttendanceReport,
    WeeklyReport,
    WeeklyReportEntry,
)
from .requirements import BatchRequirement, Requirement, RequirementHistory, RequirementType
from .users import Coordinator, Supervisor, Trainee, User

__all__ = [
    "AccomplishmentEntry",
    "AccomplishmentReport",
    "Announcement",
    "AttendanceEntry",
    "AttendanceReport",
    "BatchRequirement",
    "Coordinator",
    "EmployabilityPrediction",
    "Evaluation",
    "IndustryPartner",
    "InternshipDetails",
    "Notification",
    "ProgramBatch",
    "RecentActivity",
    "Requirement",
    "RequirementHistory",
    "RequirementType",
    "Skill",
    "Supervisor",
    "Trainee",
    "TraineeBatchEnrollment",
    "TraineeSkill",
    "User",
    "WeeklyReport",
    "WeeklyReportEntry",
]
