"""Request and response models for the employability prediction service."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, List, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError

# Criterion scores are whole numbers from 1 to 5; strings and booleans are rejected.
Score = Annotated[int, Field(ge=1, le=5, strict=True)]


class WorkAttitudeScores(BaseModel):
    courteous_with_superiors_peers: Score
    interest_patience_in_tasks: Score
    accepts_constructive_feedback: Score
    punctuality: Score
    trustworthy: Score


class PersonalAppearanceScores(BaseModel):
    good_grooming: Score
    decent_dress_code: Score
    poise_self_confidence: Score
    stability_under_pressure: Score


class ProfessionalCompetenceScores(BaseModel):
    understands_instructions: Score
    submits_work_on_time: Score
    quality_work_performance: Score


class EvaluationScores(BaseModel):
    """A complete evaluation form. Every criterion and the overall rating are 1-5."""

    work_attitude: WorkAttitudeScores
    personal_appearance: PersonalAppearanceScores
    professional_competence: ProfessionalCompetenceScores
    overall_rating: Score

    trainee_id: Optional[str] = None
    evaluator_id: Optional[str] = None
    evaluation_date: Optional[str] = None


class PredictionRequest(BaseModel):
    evaluation_scores: EvaluationScores


class WeakArea(BaseModel):
    area: str
    score: float
    severity: Literal["High", "Medium", "Low"]
    description: str


class StrongArea(BaseModel):
    area: str
    score: float
    description: str


class PredictionAnalysis(BaseModel):
    overall_statistics: Dict[str, float] = Field(default_factory=dict)
    weak_areas: List[WeakArea] = Field(default_factory=list)
    strong_areas: List[StrongArea] = Field(default_factory=list)
    feature_breakdown: Dict[str, float] = Field(default_factory=dict)


class Recommendation(BaseModel):
    category: str
    priority: Literal["High", "Medium", "Low"]
    recommendation: str
    action_items: List[str] = Field(default_factory=list)


class ModelInfo(BaseModel):
    model_config = {"protected_namespaces": ()}

    model_type: str = ""
    model_id: str = ""
    training_date: str = ""
    model_accuracy: str | float = ""
    prediction_date: str = ""
    ai_recommendations_used: bool = False


class PredictionResponse(BaseModel):
    """Employability prediction returned by ``POST /predict/employability``."""

    model_config = {"protected_namespaces": ()}

    prediction_class: bool
    prediction_label: Literal["Employable", "Less Employable"]
    prediction_probability: float
    confidence_level: Literal["High", "Medium", "Low"]
    original_scores: Optional[Dict[str, Any]] = None
    mapped_features: Dict[str, float] = Field(default_factory=dict)
    analysis: PredictionAnalysis = Field(default_factory=PredictionAnalysis)
    recommendations: List[Recommendation] = Field(default_factory=list)
    model_info: ModelInfo = Field(default_factory=ModelInfo)
    prediction_id: Optional[str] = None


def validate_evaluation_scores(scores: Any) -> bool:
    """Whether ``scores`` is a complete evaluation with every value in 1-5."""
    if isinstance(scores, EvaluationScores):
        return True
    if not isinstance(scores, Mapping):
        return False
    try:
        EvaluationScores.model_validate(scores, strict=False)
    except ValidationError:
        return False
    return True


def transform_form_to_payload(
    form_responses: Mapping[str, int], metadata: Optional[Mapping[str, str]] = None
) -> Dict[str, Any]:
    """Group flat form responses into the nested payload the service expects.

    Missing criteria are sent as 0, which ``validate_evaluation_scores``
    rejects. ``overall_performance`` maps to ``overall_rating``.
    """
    metadata = metadata or {}

    def pick(key: str) -> int:
        return form_responses.get(key) or 0

    return {
        "work_attitude": {
            key: pick(key)
            for key in (
                "courteous_with_superiors_peers",
                "interest_patience_in_tasks",
                "accepts_constructive_feedback",
                "punctuality",
                "trustworthy",
            )
        },
        "personal_appearance": {
            key: pick(key)
            for key in ("good_grooming", "decent_dress_code", "poise_self_confidence", "stability_under_pressure")
        },
        "professional_competence": {
            key: pick(key) for key in ("understands_instructions", "submits_work_on_time", "quality_work_performance")
        },
        "overall_rating": pick("overall_performance"),
        "trainee_id": metadata.get("trainee_id"),
        "evaluator_id": metadata.get("evaluator_id"),
        "evaluation_date": datetime.now(timezone.utc).isoformat(),
    }
