"""
Supervisor views of their trainees and the end-of-internship evaluation.
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional, Set, Tuple

from sqlmodel import select

from sumikapp.core.database.entities import (
    EmployabilityPrediction,
    Evaluation,
    InternshipDetails,
    Trainee,
    TraineeBatchEnrollment,
    User,
)
from sumikapp.core.errors import ConflictError, NotFoundError, PredictionServiceError
from sumikapp.core.logging_config import log_context
from sumikapp.core.models.domain.enums import ActivityType, DocumentStatus, NotificationType, OJTStatus, Role
from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.users import EvaluationRead, SupervisedTraineeRead
from sumikapp.prediction import EVALUATION_CONFIG, EmployabilityPredictionClient, EvaluationScores, section_points

from .activity import log_activity, notify
from .base import BaseService, logged_operation

logger = logging.getLogger(__name__)

PREDICTION_UNAVAILABLE = "Evaluation submitted successfully, but the employability prediction is currently unavailable"


class SupervisorService(BaseService):
    def __init__(self, session, prediction_client: Optional[EmployabilityPredictionClient] = None):
        super().__init__(session)
        self.prediction_client = prediction_client

    def _supervised_query(self, supervisor_id: str):
        return (
            select(InternshipDetails, TraineeBatchEnrollment, Trainee, User)
            .join(TraineeBatchEnrollment, InternshipDetails.enrollment_id == TraineeBatchEnrollment.id)
            .join(Trainee, TraineeBatchEnrollment.trainee_id == Trainee.id)
            .join(User, Trainee.id == User.id)
            .where(
                InternshipDetails.supervisor_id == supervisor_id,
                InternshipDetails.status == DocumentStatus.approved.value,
                User.is_deleted == False,  # noqa: E712
            )
            .order_by(User.last_name, User.first_name)
        )

    @staticmethod
    def _to_read(row, evaluated: Set[str]) -> SupervisedTraineeRead:
        internship, enrollment, trainee, user = row
        return SupervisedTraineeRead(
            trainee_id=trainee.id,
            trainee_name=user.full_name,
            email=user.email,
            course=trainee.course,
            section=trainee.section,
            internship_id=internship.id,
            job_role=internship.job_role,
            start_date=internship.start_date.isoformat(),
            end_date=internship.end_date.isoformat(),
            ojt_status=OJTStatus(enrollment.ojt_status),
            is_evaluated=internship.id in evaluated,
        )

    async def _evaluated_internships(self, supervisor_id: str) -> Set[str]:
        stmt = select(Evaluation.internship_id).where(Evaluation.supervisor_id == supervisor_id)
        return {internship_id for internship_id in (await self.session.execute(stmt)).scalars().all() if internship_id}

    async def get_supervisor_trainees(self, supervisor_id: str) -> List[SupervisedTraineeRead]:
        rows = (await self.session.execute(self._supervised_query(supervisor_id))).all()
        return [self._to_read(row, set()) for row in rows]

    async def get_trainees_for_evaluation(self, supervisor_id: str) -> List[SupervisedTraineeRead]:
        """Supervised trainees with a flag telling whether their evaluation is done."""
        rows = (await self.session.execute(self._supervised_query(supervisor_id))).all()
        evaluated = await self._evaluated_internships(supervisor_id)
        return [self._to_read(row, evaluated) for row in rows]

    async def _supervised_internship(
        self, supervisor_id: str, trainee_id: str
    ) -> Tuple[InternshipDetails, TraineeBatchEnrollment]:
        stmt = self._supervised_query(supervisor_id).where(Trainee.id == trainee_id)
        row = (await self.session.execute(stmt)).first()
        if row is None:
            raise NotFoundError("Supervised trainee", trainee_id)
        return row[0], row[1]

    async def submit_evaluation(
        self,
        supervisor_id: str,
        trainee_id: str,
        scores: EvaluationScores,
        comments: Optional[str] = None,
    ) -> ActionResult:
        """Store an evaluation, then ask the prediction service for an employability forecast.

        The evaluation is committed before the prediction call, so a failing
        prediction service never loses the supervisor's form.
        """
        ctx = log_context("evaluation.submit", user_id=supervisor_id, trainee_id=trainee_id)
        logger.info("Submitting trainee evaluation...", extra={"ctx": ctx})

        with logged_operation(logger, "Evaluation submission", ctx):
            internship, enrollment = await self._supervised_internship(supervisor_id, trainee_id)
            existing = await self.session.execute(
                select(Evaluation.id).where(
                    Evaluation.supervisor_id == supervisor_id,
                    Evaluation.internship_id == internship.id,
                )
            )
            if existing.first() is not None:
                raise ConflictError("This trainee has already been evaluated")

            raw_scores = scores.model_dump(include={"work_attitude", "personal_appearance", "professional_competence"})
            section_scores = {
                section.key: round(section_points(section.key, raw_scores[section.key]), 2)
                for section in EVALUATION_CONFIG.sections
            }
            evaluation = Evaluation(
                trainee_id=trainee_id,
                supervisor_id=supervisor_id,
                internship_id=internship.id,
                scores=json.dumps({**raw_scores, "overall_rating": scores.overall_rating}),
                work_attitude_score=section_scores["work_attitude"],
                personal_appearance_score=section_scores["personal_appearance"],
                professional_competence_score=section_scores["professional_competence"],
                total_score=round(sum(section_scores.values()), 2),
                overall_rating=scores.overall_rating,
                comments=comments,
            )
            self.session.add(evaluation)
            log_activity(
                self.session,
                user_id=supervisor_id,
                user_role=Role.supervisor,
                activity_type=ActivityType.evaluation_submitted,
                title="Trainee evaluation submitted",
                reference_id=evaluation.id,
                reference_type="evaluation",
                program_batch_id=enrollment.program_batch_id,
                metadata={"total_score": evaluation.total_score},
            )
            await self.session.commit()
            await self.session.refresh(evaluation)

        prediction = await self._predict(evaluation, scores, ctx)
        data = {"evaluation": EvaluationRead.model_validate(evaluation)}
        if prediction is None:
            return ActionResult.ok(PREDICTION_UNAVAILABLE, data)
        data["prediction"] = {
            "prediction_label": prediction.prediction_label,
            "prediction_probability": prediction.prediction_probability,
            "confidence_level": prediction.confidence_level,
        }
        return ActionResult.ok("Evaluation submitted successfully", data)

    async def _predict(
        self, evaluation: Evaluation, scores: EvaluationScores, ctx: dict
    ) -> Optional[EmployabilityPrediction]:
        if self.prediction_client is None:
            logger.warning("No prediction client configured; skipping employability prediction", extra={"ctx": ctx})
            return None

        request = scores.model_copy(
            update={
                "trainee_id": evaluation.trainee_id,
                "evaluator_id": evaluation.supervisor_id,
                "evaluation_date": evaluation.created_at.date().isoformat(),
            }
        )
        try:
            result = await self.prediction_client.predict_employability(request)
        except PredictionServiceError as exc:
            logger.warning(f"Employability prediction failed: {exc.message}", extra={"ctx": ctx})
            return None

        prediction = EmployabilityPrediction(
            trainee_id=evaluation.trainee_id,
            evaluation_id=evaluation.id,
            model_id=result.model_info.model_id or None,
            prediction_class=int(result.prediction_class),
            prediction_label=result.prediction_label,
            prediction_probability=result.prediction_probability,
            confidence_level=result.confidence_level,
            feature_scores=json.dumps(result.mapped_features),
            recommendations=json.dumps([item.model_dump() for item in result.recommendations]),
            risk_factors=json.dumps([area.model_dump() for area in result.analysis.weak_areas]),
        )
        self.session.add(prediction)
        notify(
            self.session,
            user_id=evaluation.trainee_id,
            title="Evaluation completed",
            message="Your supervisor has submitted your internship evaluation.",
            notification_type=NotificationType.system_update,
            reference_id=evaluation.id,
        )
        await self.session.commit()
        await self.session.refresh(prediction)
        logger.info(
            f"Employability prediction stored: {prediction.prediction_label} ({prediction.prediction_probability})",
            extra={"ctx": ctx},
        )
        return prediction

    async def list_evaluations(self, supervisor_id: str) -> List[EvaluationRead]:
        stmt = (
            select(Evaluation)
            .where(Evaluation.supervisor_id == supervisor_id)
            .order_by(Evaluation.created_at.desc())
        )
        return [EvaluationRead.model_validate(row) for row in (await self.session.execute(stmt)).scalars().all()]

    async def get_evaluation(self, supervisor_id: str, trainee_id: str) -> EvaluationRead:
        stmt = (
            select(Evaluation)
            .where(Evaluation.supervisor_id == supervisor_id, Evaluation.trainee_id == trainee_id)
            .order_by(Evaluation.created_at.desc())
        )
        evaluation = (await self.session.execute(stmt)).scalars().first()
        if evaluation is None:
            raise NotFoundError("Evaluation for trainee", trainee_id)
        return EvaluationRead.model_validate(evaluation)
