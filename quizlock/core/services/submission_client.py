"""HTTP client for the quiz service operations used by a session.

Every call is a single request; nothing here retries. Failures are classified
into the typed errors of ``quizlock.core.errors`` so the controller can tell a
duplicate registration from an expired credential or an unreachable server.
"""

from __future__ import annotations

from collections.abc import Sequence
import logging

import httpx
from pydantic import ValidationError

from quizlock.constants.network_constants import DEFAULT_API_BASE_URL, REQUEST_TIMEOUT_SECONDS
from quizlock.core.errors import (
    AlreadyRegistered,
    AlreadySubmitted,
    AnalyticsUnavailable,
    NotFound,
    RegistrationFailed,
    RequestError,
    ServerError,
    Unauthorized,
)
from quizlock.core.models import QuizListing, RegistrationToken
from quizlock.core.schemas import (
    AggregateStats,
    MessagePayload,
    QuizStatusPayload,
    ScoreReport,
    SubmitPayload,
)

logger = logging.getLogger(__name__)


class SubmissionClient:
    """Thin wrapper around the register / submit / analytics endpoints."""

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE_URL,
        token: str | None = None,
        *,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        http_client: httpx.Client | None = None,
    ) -> None:
        headers = {"Accept": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        if http_client is None:
            http_client = httpx.Client(base_url=base_url, timeout=timeout)
        http_client.headers.update(headers)
        self._http = http_client

    def close(self) -> None:
        self._http.close()

    def list_quizzes(self) -> list[QuizListing]:
        response = self._send("GET", "/quiz/status/me")
        if response.status_code != 200:
            raise self._classify(response)
        data = self._json(response)
        if not isinstance(data, list):
            raise ServerError("Quiz list response was not a list", response.status_code)
        try:
            return [QuizStatusPayload.model_validate(item).to_listing() for item in data]
        except ValidationError as exc:
            raise ServerError(f"Malformed quiz list: {exc.error_count()} error(s)") from exc

    def register(self, quiz_id: str) -> RegistrationToken:
        response = self._send("POST", f"/quiz/register/{quiz_id}")
        if response.status_code != 200:
            raise self._classify(response, registering=True)
        message = MessagePayload.model_validate(self._json(response) or {}).message
        logger.info("Registered for quiz %s", quiz_id)
        return RegistrationToken(quiz_id=quiz_id, message=message)

    def finalize(
        self,
        quiz_id: str,
        answers: Sequence[int | None],
        violations: int = 0,
    ) -> ScoreReport:
        payload = SubmitPayload(answers=list(answers), violations=violations)
        response = self._send(
            "POST",
            f"/quiz/submit/{quiz_id}",
            json=payload.model_dump(by_alias=True),
        )
        if response.status_code != 200:
            raise self._classify(response)
        try:
            report = ScoreReport.model_validate(self._json(response))
        except ValidationError as exc:
            raise ServerError("Malformed score report") from exc
        logger.info("Quiz %s finalized: %s/%s", quiz_id, report.score, report.total_questions)
        return report

    def fetch_analytics(self, quiz_id: str) -> AggregateStats:
        try:
            response = self._send("GET", f"/quiz/{quiz_id}/analytics")
        except RequestError as exc:
            raise AnalyticsUnavailable(exc.message) from exc
        if response.status_code != 200:
            error = self._classify(response)
            raise AnalyticsUnavailable(error.message, response.status_code)
        try:
            return AggregateStats.model_validate(self._json(response))
        except (ValidationError, ServerError) as exc:
            raise AnalyticsUnavailable("Malformed analytics payload") from exc

    def _send(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            return self._http.request(method, path, **kwargs)
        except httpx.TimeoutException as exc:
            raise ServerError(f"Request to {path} timed out") from exc
        except httpx.HTTPError as exc:
            raise ServerError(f"Unable to reach the quiz service: {exc}") from exc

    @staticmethod
    def _json(response: httpx.Response):
        try:
            return response.json()
        except ValueError as exc:
            raise ServerError("Response was not valid JSON", response.status_code) from exc

    @staticmethod
    def _message(response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text or response.reason_phrase
        if isinstance(body, dict):
            for key in ("message", "detail"):
                value = body.get(key)
                if isinstance(value, str) and value:
                    return value
        return response.reason_phrase

    @classmethod
    def _classify(cls, response: httpx.Response, *, registering: bool = False) -> RequestError:
        status = response.status_code
        message = cls._message(response)
        lowered = message.lower()
        if status in (401, 403):
            return Unauthorized(message, status)
        if status >= 500:
            return ServerError(message, status)
        if registering:
            if status == 404 or "not found" in lowered:
                return NotFound(message, status)
            if status == 409 or "already registered" in lowered:
                return AlreadyRegistered(message, status)
            return RegistrationFailed(message, status)
        if status == 409 or "already attempted" in lowered or "already submitted" in lowered:
            return AlreadySubmitted(message, status)
        return ServerError(message, status)
