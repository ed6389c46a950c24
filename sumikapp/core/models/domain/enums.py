"""Domain enums shared by entities, services and I/O models."""

from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Roles a SumikAPP user can hold."""

    trainee = "trainee"
    coordinator = "coordinator"
    supervisor = "supervisor"
    admin = "admin"


class OJTStatus(str, Enum):
    """Progress of a trainee through an OJT program."""

    not_started = "not started"
    active = "active"
    completed = "completed"
    dropped = "dropped"


class DocumentStatus(str, Enum):
    """
    Review status of any submitted document.

    Reports, requirements and internship placement forms all move through
    ``not submitted`` -> ``pending`` -> ``approved`` / ``rejected``.
    """

    approved = "approved"
    rejected = "rejected"
    pending = "pending"
    not_submitted = "not submitted"


class EntryStatus(str, Enum):
    """Attendance status of a single day in a report."""

    present = "present"
    absent = "absent"
    late = "late"
    holiday = "holiday"


class InternshipCode(str, Enum):
    """Internship course codes. ``CTNTERN2`` requires a completed ``CTNTERN1``."""

    CTNTERN1 = "CTNTERN1"
    CTNTERN2 = "CTNTERN2"


class UserStatus(str, Enum):
    active = "active"
    inactive = "inactive"
    suspended = "suspended"
    pending = "pending"


class NotificationType(str, Enum):
    document_status_change = "document status change"
    document_submission = "document submission"
    report_status_change = "report status change"
    report_submission = "report submission"
    program_announcement = "program announcement"
    system_update = "system update"


class ReportKind(str, Enum):
    """The three kinds of periodic trainee reports."""

    weekly = "weekly"
    attendance = "attendance"
    accomplishment = "accomplishment"


class ActivityType(str, Enum):
    """Kinds of rows recorded in the recent activity feed."""

    weekly_report_created = "weekly_report_created"
    weekly_report_submitted = "weekly_report_submitted"
    weekly_report_approved = "weekly_report_approved"
    weekly_report_rejected = "weekly_report_rejected"
    weekly_report_deleted = "weekly_report_deleted"
    weekly_entry_added = "weekly_entry_added"
    attendance_report_created = "attendance_report_created"
    attendance_report_submitted = "attendance_report_submitted"
    attendance_report_approved = "attendance_report_approved"
    attendance_report_rejected = "attendance_report_rejected"
    attendance_report_deleted = "attendance_report_deleted"
    attendance_entry_added = "attendance_entry_added"
    accomplishment_report_created = "accomplishment_report_created"
    accomplishment_report_submitted = "accomplishment_report_submitted"
    accomplishment_report_approved = "accomplishment_report_approved"
    accomplishment_report_rejected = "accomplishment_report_rejected"
    accomplishment_report_deleted = "accomplishment_report_deleted"
    accomplishment_entry_added = "accomplishment_entry_added"
    requirement_submitted = "requirement_submitted"
    requirement_approved = "requirement_approved"
    requirement_rejected = "requirement_rejected"
    requirement_deleted = "requirement_deleted"
    internship_updated = "internship_updated"
    internship_status_changed = "internship_status_changed"
    user_registered = "user_registered"
    user_status_changed = "user_status_changed"
    batch_created = "batch_created"
    batch_updated = "batch_updated"
    batch_deleted = "batch_deleted"
    batch_enrolled = "batch_enrolled"
    batch_announcement_posted = "batch_announcement_posted"
    batch_requirement_added = "batch_requirement_added"
    evaluation_submitted = "evaluation_submitted"

    @classmethod
    def for_report(cls, kind: "ReportKind", action: str) -> "ActivityType":
        """Resolve e.g. ``(ReportKind.weekly, "approved")`` to ``weekly_report_approved``."""
        return cls(f"{kind.value}_report_{action}")


_LABELS: dict[str, str] = {
    OJTStatus.not_started.value: "Not Started",
    OJTStatus.active.value: "Active",
    OJTStatus.completed.value: "Completed",
    OJTStatus.dropped.value: "Dropped",
    DocumentStatus.approved.value: "Approved",
    DocumentStatus.rejected.value: "Rejected",
    DocumentStatus.pending.value: "Pending",
    DocumentStatus.not_submitted.value: "Not Submitted",
    EntryStatus.present.value: "Present",
    EntryStatus.absent.value: "Absent",
    EntryStatus.late.value: "Late",
    EntryStatus.holiday.value: "Holiday",
    InternshipCode.CTNTERN1.value: "Internship 1",
    InternshipCode.CTNTERN2.value: "Internship 2",
}


def display_label(value: "str | Enum | None", fallback: str = "Unknown") -> str:
    """Human-readable label for an enum value, or ``fallback`` for unknown values."""
    if value is None:
        return fallback
    raw = value.value if isinstance(value, Enum) else str(value)
    return _LABELS.get(raw, fallback)
