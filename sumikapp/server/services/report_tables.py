"""
Registry of the three report kinds and their tables.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple, Type

from sumikapp.core.database.entities import (
    AccomplishmentEntry,
    AccomplishmentReport,
    AttendanceEntry,
    AttendanceReport,
    WeeklyReport,
    WeeklyReportEntry,
)
from sumikapp.core.database.entities.reports import EntryBase, ReportBase
from sumikapp.core.models.domain.enums import ReportKind


@dataclass(frozen=True)
class ReportTable:
    kind: ReportKind
    report: Type[ReportBase]
    entry: Type[EntryBase]
    label: str


REPORT_TABLES: Dict[ReportKind, ReportTable] = {
    ReportKind.weekly: ReportTable(ReportKind.weekly, WeeklyReport, WeeklyReportEntry, "Weekly report"),
    ReportKind.attendance: ReportTable(ReportKind.attendance, AttendanceReport, AttendanceEntry, "Attendance report"),
    ReportKind.accomplishment: ReportTable(
        ReportKind.accomplishment, AccomplishmentReport, AccomplishmentEntry, "Accomplishment report"
    ),
}

# Order in which an id is searched for when the caller does not say which kind it is.
LOOKUP_ORDER: Tuple[ReportKind, ...] = (ReportKind.weekly, ReportKind.attendance, ReportKind.accomplishment)
