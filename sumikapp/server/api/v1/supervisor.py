"""
Supervisor Endpoints.

Trainees placed with the caller and their end-of-internship evaluations.
Submitting an evaluation also requests an employability prediction.
"""

from typing import List

from fastapi import APIRouter, status

from sumikapp.core.models.io.common import ActionResult
from sumikapp.core.models.io.users import EvaluationRead, EvaluationSubmit, SupervisedTraineeRead
from sumikapp.server.services.deps import PredictionClientDep, SessionDep, SupervisorDep
from sumikapp.server.services.supervisor import SupervisorService

router = APIRouter()


@router.get(
    "/trainees",
    response_model=List[SupervisedTraineeRead],
    summary="List Supervised Trainees",
    description="Retrieve trainees with an approved placement under the caller, flagged when already evaluated.",
)
async def list_trainees(current_user: SupervisorDep, session: SessionDep) -> List[SupervisedTraineeRead]:
    return await SupervisorService(session).get_trainees_for_evaluation(current_user.id)


@router.get(
    "/evaluations",
    response_model=List[EvaluationRead],
    summary="List Evaluations",
    description="Retrieve the evaluations the caller has submitted, newest first.",
)
async def list_evaluations(current_user: SupervisorDep, session: SessionDep) -> List[EvaluationRead]:
    return await SupervisorService(session).list_evaluations(current_user.id)


@router.get(
    "/evaluations/{trainee_id}",
    response_model=EvaluationRead,
    summary="Get Trainee Evaluation",
    responses={404: {"description": "No evaluation for this trainee"}},
)
async def get_evaluation(trainee_id: str, current_user: SupervisorDep, session: SessionDep) -> EvaluationRead:
    return await SupervisorService(session).get_evaluation(current_user.id, trainee_id)


@router.post(
    "/evaluations/{trainee_id}",
    response_model=ActionResult,
    status_code=status.HTTP_201_CREATED,
    summary="Submit Trainee Evaluation",
    description="Evaluate a supervised trainee and request an employability prediction for them.",
    responses={
        404: {"description": "Trainee is not supervised by the caller"},
        409: {"description": "Trainee has already been evaluated"},
    },
)
async def submit_evaluation(
    trainee_id: str,
    payload: EvaluationSubmit,
    current_user: SupervisorDep,
    session: SessionDep,
    prediction_client: PredictionClientDep,
) -> ActionResult:
    """
    Submit an evaluation.

    The evaluation is stored even when the prediction service is down; the
    response message then says the prediction is unavailable.
    """
    service = SupervisorService(session, prediction_client)
    return await service.submit_evaluation(current_user.id, trainee_id, payload.scores, payload.comments)
