"""
Unit tests for the employability prediction client.

The ML service is replaced by ``httpx.MockTransport``; retry sleeps are
patched out so health-check retries run instantly.
"""

from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from sumikapp.core.errors import PredictionServiceError
from sumikapp.prediction import EmployabilityPredictionClient, retry_delay_ms

BASE_URL = "http://mock-ml"


def full_scores(value: int = 4) -> dict:
    return {
        "work_attitude": {
            "courteous_with_superiors_peers": value,
            "interest_patience_in_tasks": value,
            "accepts_constructive_feedback": value,
            "punctuality": value,
            "trustworthy": value,
        },
        "personal_appearance": {
            "good_grooming": value,
            "decent_dress_code": value,
            "poise_self_confidence": value,
            "stability_under_pressure": value,
        },
        "professional_competence": {
            "understands_instructions": value,
            "submits_work_on_time": value,
            "quality_work_performance": value,
        },
        "overall_rating": value,
    }


PREDICTION_BODY = {
    "prediction_class": True,
    "prediction_label": "Employable",
    "prediction_probability": 0.87,
    "confidence_level": "High",
    "mapped_features": {"work_attitude": 4.0},
    "analysis": {
        "weak_areas": [{"area": "punctuality", "score": 2.0, "severity": "Medium", "description": "Often late"}],
    },
    "recommendations": [
        {"category": "Habits", "priority": "Low", "recommendation": "Keep it up", "action_items": ["Mentor peers"]}
    ],
    "model_info": {"model_id": "rf-2024-01"},
}


def make_client(handler, max_retries: int = 3) -> EmployabilityPredictionClient:
    transport = httpx.MockTransport(handler)
    return EmployabilityPredictionClient(
        BASE_URL, max_retries=max_retries, client=httpx.AsyncClient(transport=transport)
    )


class TestRetryDelay:
    @pytest.mark.parametrize(
        "attempt, expected", [(0, 1000), (1, 2000), (2, 4000), (4, 16000), (5, 30000), (10, 30000)]
    )
    def test_exponential_backoff_is_capped(self, attempt, expected):
        assert retry_delay_ms(attempt) == expected


@pytest.mark.asyncio
class TestPredictEmployability:
    async def test_successful_prediction(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["url"] = str(request.url)
            seen["content_type"] = request.headers.get("content-type")
            seen["body"] = request.read()
            return httpx.Response(200, json=PREDICTION_BODY)

        client = make_client(handler)
        result = await client.predict_employability(full_scores())
        await client.aclose()

        assert seen["url"] == f"{BASE_URL}/predict/employability"
        assert seen["content_type"] == "application/json"
        assert b'"evaluation_scores"' in seen["body"]
        assert result.prediction_label == "Employable"
        assert result.prediction_probability == 0.87
        assert result.analysis.weak_areas[0].area == "punctuality"
        assert result.model_info.model_id == "rf-2024-01"

    async def test_invalid_scores_fail_before_any_request(self):
        handler = Mock()
        client = make_client(handler)
        scores = full_scores()
        scores["work_attitude"]["punctuality"] = 6

        with pytest.raises(PredictionServiceError) as exc_info:
            await client.predict_employability(scores)

        assert exc_info.value.status_code == 422
        handler.assert_not_called()

    async def test_api_error_carries_detail(self):
        client = make_client(lambda request: httpx.Response(500, json={"detail": "model not loaded"}))

        with pytest.raises(PredictionServiceError) as exc_info:
            await client.predict_employability(full_scores())

        assert "API Error 500: model not loaded" in exc_info.value.message
        assert exc_info.value.details == "model not loaded"

    async def test_network_failure_is_wrapped(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        client = make_client(handler)
        with pytest.raises(PredictionServiceError, match="unreachable"):
            await client.predict_employability(full_scores())

    async def test_malformed_response_is_rejected(self):
        client = make_client(lambda request: httpx.Response(200, json={"prediction_label": "Maybe"}))
        with pytest.raises(PredictionServiceError, match="Invalid prediction response"):
            await client.predict_employability(full_scores())


@pytest.mark.asyncio
class TestHealthCheck:
    async def test_healthy_on_first_attempt(self):
        client = make_client(lambda request: httpx.Response(200, json={"status": "healthy"}))
        assert await client.health_check() == {"status": "healthy"}

    async def test_retries_until_healthy(self):
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            if calls["count"] < 3:
                return httpx.Response(503)
            return httpx.Response(200, json={"status": "healthy"})

        client = make_client(handler)
        with patch("sumikapp.prediction.client.asyncio.sleep", new_callable=AsyncMock) as sleep:
            result = await client.health_check()

        assert result == {"status": "healthy"}
        assert calls["count"] == 3
        assert [call.args[0] for call in sleep.await_args_list] == [1.0, 2.0]

    async def test_gives_up_after_max_retries(self):
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            return httpx.Response(500)

        client = make_client(handler, max_retries=2)
        with patch("sumikapp.prediction.client.asyncio.sleep", new_callable=AsyncMock):
            with pytest.raises(PredictionServiceError, match="after 3 attempts"):
                await client.health_check()
        assert calls["count"] == 3


@pytest.mark.asyncio
class TestTrainModel:
    async def test_train_model_is_not_retried(self):
        calls = {"count": 0}

        def handler(request: httpx.Request) -> httpx.Response:
            calls["count"] += 1
            return httpx.Response(409, json={"detail": "training already running"})

        client = make_client(handler)
        with pytest.raises(PredictionServiceError, match="Training failed 409"):
            await client.train_model()
        assert calls["count"] == 1
