"""Employability prediction: evaluation form, scoring and the ML service client."""

from .client import EmployabilityPredictionClient, retry_delay_ms
from .evaluation_config import EVALUATION_CONFIG, EvaluationConfig, section_points
from .models import (
    EvaluationScores,
    PredictionResponse,
    transform_form_to_payload,
    validate_evaluation_scores,
)

__all__ = [
    "EVALUATION_CONFIG",
    "EmployabilityPredictionClient",
    "EvaluationConfig",
    "EvaluationScores",
    "PredictionResponse",
    "retry_delay_ms",
    "section_points",
    "transform_form_to_payload",
    "validate_evaluation_scores",
]
