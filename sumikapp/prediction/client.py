from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Optional

import httpx

from sumikapp.core.errors import PredictionServiceError

from .models import EvaluationScores, PredictionRequest, PredictionResponse, validate_evaluation_scores

MAX_RETRY_DELAY_MS = 30_000


def retry_delay_ms(attempt: int) -> int:
    """Exponential backoff for the ``attempt``-th retry (0-based), capped at 30s."""
    return min(1000 * 2**attempt, MAX_RETRY_DELAY_MS)


class EmployabilityPredictionClient:
    """
    Thin async HTTP client for the employability prediction (ML) service.

    Responsibilities:
    - predict_employability: ``POST /predict/employability``
    - health_check: ``GET /health`` (retried with exponential backoff)
    - train_model: ``POST /train/model``

    Only the health check is retried; the two POST endpoints are not
    idempotent and fail fast.
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        max_retries: int = 3,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.max_retries = max_retries
        self._client = client or httpx.AsyncClient(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    async def aclose(self) -> None:
        await self._client.aclose()

    @staticmethod
    def _headers(with_body: bool = False) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if with_body:
            headers["Content-Type"] = "application/json"
        return headers

    @staticmethod
    def _error_detail(response: httpx.Response) -> Any:
        try:
            body = response.json()
        except ValueError:
            return response.text
        if isinstance(body, dict):
            return body.get("detail", body)
        return body

    async def predict_employability(self, scores: EvaluationScores | Dict[str, Any]) -> PredictionResponse:
        if not validate_evaluation_scores(scores):
            raise PredictionServiceError("Invalid evaluation scores format", status_code=422)
        evaluation = scores if isinstance(scores, EvaluationScores) else EvaluationScores.model_validate(scores)
        payload = PredictionRequest(evaluation_scores=evaluation).model_dump(mode="json")

        self._logger.debug("EmployabilityPredictionClient.predict_employability: POST %s", self.base_url)
        try:
            r = await self._client.post(
                f"{self.base_url}/predict/employability", headers=self._headers(True), json=payload
            )
        except httpx.HTTPError as e:
            raise PredictionServiceError(f"Prediction service unreachable: {e}") from e

        if r.is_error:
            detail = self._error_detail(r)
            raise PredictionServiceError(f"API Error {r.status_code}: {detail}", details=detail)

        try:
            result = PredictionResponse.model_validate(r.json())
        except ValueError as e:
            raise PredictionServiceError(f"Invalid prediction response: {e}") from e
        self._logger.debug(
            "EmployabilityPredictionClient.predict_employability: label=%s probability=%s",
            result.prediction_label,
            result.prediction_probability,
        )
        return result

    async def health_check(self) -> Dict[str, Any]:
        last_error: Optional[Exception] = None
        for attempt in range(self.max_retries + 1):
            if attempt:
                delay = retry_delay_ms(attempt - 1)
                self._logger.debug("EmployabilityPredictionClient.health_check: retry %d in %dms", attempt, delay)
                await asyncio.sleep(delay / 1000)
            try:
                r = await self._client.get(f"{self.base_url}/health", headers=self._headers())
                if r.is_error:
                    raise PredictionServiceError(f"Health check failed: {r.status_code}")
                return r.json()
            except (httpx.HTTPError, PredictionServiceError) as e:
                self._logger.warning(f"Prediction service health check attempt {attempt + 1} failed: {e}")
                last_error = e
        attempts = self.max_retries + 1
        raise PredictionServiceError(f"Prediction service unhealthy after {attempts} attempts: {last_error}")

    async def train_model(self) -> Dict[str, Any]:
        try:
            r = await self._client.post(f"{self.base_url}/train/model", headers=self._headers())
        except httpx.HTTPError as e:
            raise PredictionServiceError(f"Prediction service unreachable: {e}") from e
        if r.is_error:
            detail = self._error_detail(r)
            raise PredictionServiceError(f"Training failed {r.status_code}: {detail}", details=detail)
        return r.json()
