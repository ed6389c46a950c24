from .enums import (
    ActivityType,
    DocumentStatus,
    EntryStatus,
    InternshipCode,
    NotificationType,
    OJTStatus,
    ReportKind,
    Role,
    UserStatus,
    display_label,
)

__all__ = [
    "ActivityType",
    "DocumentStatus",
    "EntryStatus",
    "InternshipCode",
    "NotificationType",
    "OJTStatus",
    "ReportKind",
    "Role",
    "UserStatus",
    "display_label",
]
