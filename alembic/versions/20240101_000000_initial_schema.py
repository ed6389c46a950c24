"""Initial schema for SumikAPP

Revision ID: 20240101_000000
Revises: None
Create Date: 2024-01-01 00:00:00.000000

Creates every table of the OJT system:
- Accounts and role profiles (users, trainees, coordinators, supervisors)
- Sections and enrollment (program_batch, trainee_batch_enrollment)
- Placement forms and industry partners
- Requirement types, section slots, uploads and their review history
- Weekly, attendance and accomplishment reports with their entries
- Evaluations and employability predictions
- Announcements, skills, notifications and the activity feed

Revision format: YYYYMMDD_HHMMSS_description

"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "20240101_000000"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

REPORT_KINDS = (
    ("weekly_reports", "weekly_report_entries"),
    ("attendance_reports", "attendance_entries"),
    ("accomplishment_reports", "accomplishment_entries"),
)


def _report_columns() -> list:
    return [
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("internship_id", sa.String(64), sa.ForeignKey("internship_details.id"), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("period_total", sa.Float(), nullable=False),
        sa.Column("previous_total", sa.Float(), nullable=False),
        sa.Column("total_hours_served", sa.Float(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("supervisor_approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    ]


def _entry_columns(report_table: str) -> list:
    return [
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("report_id", sa.String(64), sa.ForeignKey(f"{report_table}.id"), nullable=False),
        sa.Column("entry_date", sa.Date(), nullable=False),
        sa.Column("total_hours", sa.Float(), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("is_confirmed", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    ]


def upgrade() -> None:
    """Create all tables."""

    # Accounts
    op.create_table(
        "users",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(128), nullable=False),
        sa.Column("middle_name", sa.String(128), nullable=True),
        sa.Column("last_name", sa.String(128), nullable=False),
        sa.Column("role", sa.String(16), nullable=False),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("deleted_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("last_login", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_users_email", "email", unique=True),
        sa.Index("ix_users_role", "role"),
        sa.Index("ix_users_status", "status"),
        sa.Index("ix_users_is_deleted", "is_deleted"),
    )

    op.create_table(
        "trainees",
        sa.Column("id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("student_id_number", sa.String(32), nullable=True),
        sa.Column("course", sa.String(128), nullable=True),
        sa.Column("section", sa.String(64), nullable=True),
        sa.Column("address", sa.String(255), nullable=True),
        sa.Column("mobile_number", sa.String(32), nullable=True),
        sa.Column("ojt_status", sa.String(16), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_trainees_student_id_number", "student_id_number"),
        sa.Index("ix_trainees_ojt_status", "ojt_status"),
    )

    op.create_table(
        "coordinators",
        sa.Column("id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("department", sa.String(128), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "supervisors",
        sa.Column("id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=True),
        sa.Column("company_address", sa.String(255), nullable=True),
        sa.Column("company_contact_no", sa.String(32), nullable=True),
        sa.Column("department", sa.String(128), nullable=True),
        sa.Column("position", sa.String(128), nullable=True),
        sa.Column("nature_of_business", sa.String(128), nullable=True),
        sa.Column("telephone_number", sa.String(32), nullable=True),
        sa.PrimaryKeyConstraint("id"),
    )

    # Sections and enrollment
    op.create_table(
        "program_batch",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("coordinator_id", sa.String(64), sa.ForeignKey("coordinators.id"), nullable=False),
        sa.Column("title", sa.String(128), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("internship_code", sa.String(16), nullable=False),
        sa.Column("required_hours", sa.Integer(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("coordinator_id", "title", name="uq_program_batch_coordinator_title"),
        sa.Index("ix_program_batch_coordinator_id", "coordinator_id"),
        sa.Index("ix_program_batch_title", "title"),
        sa.Index("ix_program_batch_internship_code", "internship_code"),
    )

    op.create_table(
        "trainee_batch_enrollment",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("trainee_id", sa.String(64), sa.ForeignKey("trainees.id"), nullable=False),
        sa.Column("program_batch_id", sa.String(64), sa.ForeignKey("program_batch.id"), nullable=False),
        sa.Column("ojt_status", sa.String(16), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("trainee_id", "program_batch_id", name="uq_enrollment_trainee_batch"),
        sa.Index("ix_trainee_batch_enrollment_trainee_id", "trainee_id"),
        sa.Index("ix_trainee_batch_enrollment_program_batch_id", "program_batch_id"),
        sa.Index("ix_trainee_batch_enrollment_ojt_status", "ojt_status"),
    )

    # Placements
    op.create_table(
        "internship_details",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("enrollment_id", sa.String(64), sa.ForeignKey("trainee_batch_enrollment.id"), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("contact_number", sa.String(32), nullable=False),
        sa.Column("nature_of_business", sa.String(128), nullable=False),
        sa.Column("address", sa.String(255), nullable=False),
        sa.Column("job_role", sa.String(128), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("start_time", sa.Time(), nullable=False),
        sa.Column("end_time", sa.Time(), nullable=False),
        sa.Column("daily_schedule", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("status", sa.String(16), nullable=False),
        sa.Column("supervisor_id", sa.String(64), sa.ForeignKey("supervisors.id"), nullable=True),
        sa.Column("temp_email", sa.String(255), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_internship_details_enrollment_id", "enrollment_id"),
        sa.Index("ix_internship_details_status", "status"),
        sa.Index("ix_internship_details_supervisor_id", "supervisor_id"),
        sa.Index("ix_internship_details_created_at", "created_at"),
    )

    op.create_table(
        "industry_partners",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("company_address", sa.String(255), nullable=True),
        sa.Column("company_contact_number", sa.String(32), nullable=True),
        sa.Column("nature_of_business", sa.String(128), nullable=True),
        sa.Column("date_of_signing", sa.Date(), nullable=True),
        sa.Column("moa_file_path", sa.String(512), nullable=True),
        sa.Column("file_name", sa.String(255), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_industry_partners_company_name", "company_name"),
    )

    # Requirements
    op.create_table(
        "requirement_types",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("is_predefined", sa.Boolean(), nullable=False),
        sa.Column("created_by", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_requirement_types_name", "name"),
        sa.Index("ix_requirement_types_is_predefined", "is_predefined"),
    )

    op.create_table(
        "batch_requirements",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("program_batch_id", sa.String(64), sa.ForeignKey("program_batch.id"), nullable=False),
        sa.Column("requirement_type_id", sa.String(64), sa.ForeignKey("requirement_types.id"), nullable=False),
        sa.Column("is_mandatory", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_batch_requirements_program_batch_id", "program_batch_id"),
        sa.Index("ix_batch_requirements_requirement_type_id", "requirement_type_id"),
    )

    op.create_table(
        "requirements",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("batch_requirement_id", sa.String(64), sa.ForeignKey("batch_requirements.id"), nullable=False),
        sa.Column("enrollment_id", sa.String(64), sa.ForeignKey("trainee_batch_enrollment.id"), nullable=False),
        sa.Column("file_name", sa.String(255), nullable=False),
        sa.Column("file_path", sa.String(512), nullable=False),
        sa.Column("file_size", sa.Integer(), nullable=False),
        sa.Column("file_type", sa.String(128), nullable=True),
        sa.Column("submitted_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_requirements_batch_requirement_id", "batch_requirement_id"),
        sa.Index("ix_requirements_enrollment_id", "enrollment_id"),
    )

    op.create_table(
        "requirements_history",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("document_id", sa.String(64), sa.ForeignKey("requirements.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("document_status", sa.String(16), nullable=False),
        sa.Column("date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_requirements_history_document_id", "document_id"),
        sa.Index("ix_requirements_history_document_status", "document_status"),
        sa.Index("ix_requirements_history_date", "date"),
    )

    # Reports
    for report_table, entry_table in REPORT_KINDS:
        op.create_table(
            report_table,
            *_report_columns(),
            sa.Index(f"ix_{report_table}_internship_id", "internship_id"),
            sa.Index(f"ix_{report_table}_status", "status"),
            sa.Index(f"ix_{report_table}_created_at", "created_at"),
        )

    op.create_table(
        "weekly_report_entries",
        *_entry_columns("weekly_reports"),
        sa.Column("time_in", sa.Time(), nullable=True),
        sa.Column("time_out", sa.Time(), nullable=True),
        sa.Column("daily_accomplishments", sa.Text(), nullable=True),
        sa.Column("additional_notes", sa.Text(), nullable=True),
        sa.Column("feedback", sa.String(200), nullable=True),
        sa.Index("ix_weekly_report_entries_report_id", "report_id"),
    )

    op.create_table(
        "attendance_entries",
        *_entry_columns("attendance_reports"),
        sa.Column("time_in", sa.Time(), nullable=True),
        sa.Column("time_out", sa.Time(), nullable=True),
        sa.Index("ix_attendance_entries_report_id", "report_id"),
    )

    op.create_table(
        "accomplishment_entries",
        *_entry_columns("accomplishment_reports"),
        sa.Column("daily_accomplishments", sa.Text(), nullable=True),
        sa.Index("ix_accomplishment_entries_report_id", "report_id"),
    )

    # Evaluations
    op.create_table(
        "evaluations",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("trainee_id", sa.String(64), sa.ForeignKey("trainees.id"), nullable=False),
        sa.Column("supervisor_id", sa.String(64), sa.ForeignKey("supervisors.id"), nullable=False),
        sa.Column("internship_id", sa.String(64), sa.ForeignKey("internship_details.id"), nullable=True),
        sa.Column("scores", sa.Text(), nullable=False),
        sa.Column("work_attitude_score", sa.Float(), nullable=False),
        sa.Column("personal_appearance_score", sa.Float(), nullable=False),
        sa.Column("professional_competence_score", sa.Float(), nullable=False),
        sa.Column("total_score", sa.Float(), nullable=False),
        sa.Column("overall_rating", sa.Integer(), nullable=False),
        sa.Column("comments", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_evaluations_trainee_id", "trainee_id"),
        sa.Index("ix_evaluations_supervisor_id", "supervisor_id"),
        sa.Index("ix_evaluations_created_at", "created_at"),
    )

    op.create_table(
        "employability_predictions",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("trainee_id", sa.String(64), sa.ForeignKey("trainees.id"), nullable=False),
        sa.Column("evaluation_id", sa.String(64), sa.ForeignKey("evaluations.id"), nullable=True),
        sa.Column("model_id", sa.String(128), nullable=True),
        sa.Column("prediction_class", sa.Integer(), nullable=False),
        sa.Column("prediction_label", sa.String(64), nullable=False),
        sa.Column("prediction_probability", sa.Float(), nullable=False),
        sa.Column("confidence_level", sa.String(32), nullable=False),
        sa.Column("feature_scores", sa.Text(), nullable=False, server_default="{}"),
        sa.Column("recommendations", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("risk_factors", sa.Text(), nullable=False, server_default="[]"),
        sa.Column("prediction_date", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_employability_predictions_trainee_id", "trainee_id"),
        sa.Index("ix_employability_predictions_prediction_date", "prediction_date"),
    )

    # Content
    op.create_table(
        "announcements",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("program_batch_id", sa.String(64), sa.ForeignKey("program_batch.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("created_by", sa.String(64), sa.ForeignKey("users.id"), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_announcements_program_batch_id", "program_batch_id"),
        sa.Index("ix_announcements_created_at", "created_at"),
    )

    op.create_table(
        "skills",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("name", sa.String(128), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_skills_name", "name", unique=True),
    )

    op.create_table(
        "trainee_skills",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("trainee_id", sa.String(64), sa.ForeignKey("trainees.id"), nullable=False),
        sa.Column("skill_id", sa.String(64), sa.ForeignKey("skills.id"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.UniqueConstraint("trainee_id", "skill_id", name="uq_trainee_skill"),
        sa.Index("ix_trainee_skills_trainee_id", "trainee_id"),
        sa.Index("ix_trainee_skills_skill_id", "skill_id"),
    )

    # Notifications and activity feed
    op.create_table(
        "notifications",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("message", sa.Text(), nullable=False),
        sa.Column("notification_type", sa.String(32), nullable=False),
        sa.Column("reference_id", sa.String(64), nullable=True),
        sa.Column("is_read", sa.Boolean(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_notifications_user_id", "user_id"),
        sa.Index("ix_notifications_notification_type", "notification_type"),
        sa.Index("ix_notifications_is_read", "is_read"),
        sa.Index("ix_notifications_created_at", "created_at"),
    )

    op.create_table(
        "recent_activity",
        sa.Column("id", sa.String(64), nullable=False),
        sa.Column("user_id", sa.String(64), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("user_role", sa.String(16), nullable=False),
        sa.Column("activity_type", sa.String(64), nullable=False),
        sa.Column("activity_title", sa.String(255), nullable=False),
        sa.Column("activity_description", sa.Text(), nullable=True),
        sa.Column("reference_id", sa.String(64), nullable=True),
        sa.Column("reference_type", sa.String(64), nullable=True),
        sa.Column("program_batch_id", sa.String(64), nullable=True),
        sa.Column("metadata", sa.Text(), nullable=True),
        sa.Column("is_deleted", sa.Boolean(), nullable=False),
        sa.Column("activity_timestamp", sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint("id"),
        sa.Index("ix_recent_activity_user_id", "user_id"),
        sa.Index("ix_recent_activity_user_role", "user_role"),
        sa.Index("ix_recent_activity_activity_type", "activity_type"),
        sa.Index("ix_recent_activity_program_batch_id", "program_batch_id"),
        sa.Index("ix_recent_activity_activity_timestamp", "activity_timestamp"),
    )


def downgrade() -> None:
    """Drop all tables created in upgrade, dependents first."""
    op.drop_table("recent_activity")
    op.drop_table("notifications")
    op.drop_table("trainee_skills")
    op.drop_table("skills")
    op.drop_table("announcements")
    op.drop_table("employability_predictions")
    op.drop_table("evaluations")
    for report_table, entry_table in reversed(REPORT_KINDS):
        op.drop_table(entry_table)
        op.drop_table(report_table)
    op.drop_table("requirements_history")
    op.drop_table("requirements")
    op.drop_table("batch_requirements")
    op.drop_table("requirement_types")
    op.drop_table("industry_partners")
    op.drop_table("internship_details")
    op.drop_table("trainee_batch_enrollment")
    op.drop_table("program_batch")
    op.drop_table("supervisors")
    op.drop_table("coordinators")
    op.drop_table("trainees")
    op.drop_table("users")
