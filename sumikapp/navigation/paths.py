"""Application paths.

Static paths are plain constants. Section paths depend on the section slug
and are built with the helpers below.
"""

from __future__ import annotations

from urllib.parse import quote

HOME = "/dashboard"
PLACEMENT = "/dashboard/placement"
REQUIREMENTS = "/dashboard/requirements"
WEEKLY_REPORTS = "/dashboard/weekly-reports"
SECTIONS = "/dashboard/sections"
TRAINEES = "/dashboard/trainees"
EVALUATIONS = "/dashboard/evaluations"
REVIEW_REPORTS = "/dashboard/review-reports"
USERS = "/dashboard/users"
INDUSTRY_PARTNERS = "/dashboard/industry-partners"
PREDEFINED_REQUIREMENTS = "/dashboard/predefined-requirements"

SETTINGS_PROFILE = "/dashboard/settings"
SETTINGS_SKILLS = "/dashboard/settings/skills"
SETTINGS_INTERNSHIP_DETAILS = "/dashboard/settings/internship-details"

SIGN_IN = "/auth/sign-in"
SIGN_UP = "/auth/sign-up"
CALLBACK = "/auth/callback"


def section_overview(slug: str) -> str:
    return f"{SECTIONS}/{quote(slug, safe='')}"


def section_trainees(slug: str) -> str:
    return f"{section_overview(slug)}/trainees"


def section_announcements(slug: str) -> str:
    return f"{section_overview(slug)}/announcements"


def section_requirements(slug: str) -> str:
    return f"{section_overview(slug)}/requirements"


def section_weekly_reports(slug: str) -> str:
    return f"{section_overview(slug)}/weekly-reports"


def section_settings(slug: str) -> str:
    return f"{section_overview(slug)}/settings"
