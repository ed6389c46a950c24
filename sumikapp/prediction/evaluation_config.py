"""Supervisor evaluation form definition and weighted scoring.

Each criterion is scored from 1 to 5. A section's points are the sum of its
criterion scores times the section weight, so a perfect form totals 100:

- Work attitude: 5 criteria x 5 x 2 = 50 pts
- Personal appearance: 4 criteria x 5 x 1.25 = 25 pts
- Professional competence: 3 criteria x 5 x 25/15 = 25 pts
"""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel


class EvaluationCriterion(BaseModel):
    key: str
    label: str
    max_score: int = 5


class EvaluationSection(BaseModel):
    key: str
    title: str
    weight: float
    criteria: List[EvaluationCriterion]

    @property
    def max_points(self) -> float:
        return sum(criterion.max_score for criterion in self.criteria) * self.weight


class EvaluationConfig(BaseModel):
    sections: List[EvaluationSection]

    def section(self, key: str) -> EvaluationSection:
        for section in self.sections:
            if section.key == key:
                return section
        raise KeyError(key)

    def criterion_keys(self) -> List[str]:
        return [criterion.key for section in self.sections for criterion in section.criteria]


EVALUATION_CONFIG = EvaluationConfig(
    sections=[
        EvaluationSection(
            key="work_attitude",
            title="I. Work Attitude / Habits (50 pts)",
            weight=2,
            criteria=[
                EvaluationCriterion(key="courteous_with_superiors_peers", label="Courteous with superiors/peers"),
                EvaluationCriterion(
                    key="interest_patience_in_tasks", label="Shows interest/patience in tasks assigned"
                ),
                EvaluationCriterion(
                    key="accepts_constructive_feedback", label="Accepts constructive criticisms/suggestions"
                ),
                EvaluationCriterion(key="punctuality", label="Reports for work on time"),
                EvaluationCriterion(key="trustworthy", label="Trustworthy"),
            ],
        ),
        EvaluationSection(
            key="personal_appearance",
            title="II. Personal Appearance (25 pts)",
            weight=1.25,
            criteria=[
                EvaluationCriterion(key="good_grooming", label="Displays good grooming"),
                EvaluationCriterion(key="decent_dress_code", label="Is decently dressed"),
                EvaluationCriterion(key="poise_self_confidence", label="Shows poise and self-confidence"),
                EvaluationCriterion(
                    key="stability_under_pressure", label="Shows strength and stability under pressure"
                ),
            ],
        ),
        EvaluationSection(
            key="professional_competence",
            title="III. Professional Competence (25 pts)",
            weight=25 / 15,
            criteria=[
                EvaluationCriterion(key="understands_instructions", label="Readily understands instructions"),
                EvaluationCriterion(key="submits_work_on_time", label="Submits work on time"),
                EvaluationCriterion(key="quality_work_performance", label="Renders quality work performance"),
            ],
        ),
    ]
)


def section_points(section_key: str, scores: Dict[str, float], config: EvaluationConfig = EVALUATION_CONFIG) -> float:
    """Weighted points for one section. Missing criteria count as 0."""
    section = config.section(section_key)
    return sum(scores.get(criterion.key, 0) for criterion in section.criteria) * section.weight
