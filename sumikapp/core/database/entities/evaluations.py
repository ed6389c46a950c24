"""
Evaluation and employability prediction entity models.

JSON payloads (criterion scores, recommendations, risk factors) are stored as
serialized text, the same way the schema stores ``daily_schedule``.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlmodel import Field, Text

from ..base import TIMESTAMP, Base, new_id, utc_now


class Evaluation(Base, table=True):
    """A supervisor's evaluation of one trainee.

    Table: evaluations
    """

    __tablename__ = "evaluations"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    trainee_id: str = Field(foreign_key="trainees.id", max_length=64, index=True)
    supervisor_id: str = Field(foreign_key="supervisors.id", max_length=64, index=True)
    internship_id: Optional[str] = Field(default=None, foreign_key="internship_details.id", max_length=64)

    scores: str = Field(sa_type=Text)
    work_attitude_score: float = Field(default=0.0)
    personal_appearance_score: float = Field(default=0.0)
    professional_competence_score: float = Field(default=0.0)
    total_score: float = Field(default=0.0)
    overall_rating: int = Field(default=0)
    comments: Optional[str] = Field(default=None, sa_type=Text)

    created_at: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)


class EmployabilityPrediction(Base, table=True):
    """Table: employability_predictions"""

    __tablename__ = "employability_predictions"

    id: str = Field(default_factory=new_id, primary_key=True, max_length=64)
    trainee_id: str = Field(foreign_key="trainees.id", max_length=64, index=True)
    evaluation_id: Optional[str] = Field(default=None, foreign_key="evaluations.id", max_length=64)
    model_id: Optional[str] = Field(default=None, max_length=128)
    prediction_class: int = Field(default=0)
    prediction_label: str = Field(max_length=64)
    prediction_probability: float = Field(default=0.0)
    confidence_level: str = Field(max_length=32)
    feature_scores: str = Field(default="{}", sa_type=Text)
    recommendations: str = Field(default="[]", sa_type=Text)
    risk_factors: str = Field(default="[]", sa_type=Text)
    prediction_date: datetime = Field(default_factory=utc_now, index=True, sa_type=TIMESTAMP)
