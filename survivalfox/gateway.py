"""Answer gateway: HTTP connection to the rag-answer edge function.

The controller depends on anything matching the protocol:

    async def ask(self, request: AnswerRequest) -> AnswerResult: ...

Every failure comes back as an AnswerFailure carrying one RagApiError, never
as a raised exception. Three kinds of failure are told apart:

    transport        — the call itself failed (bad url, connect, timeout, non-2xx)
    invalid_payload  — the body is not a JSON object
    missing_ids      — a JSON object without well-formed session_id/thread_id

A caller-supplied thread id that is not a well-formed UUID is silently
dropped from the request; the backend then starts a new thread.

The gateway never retries and never mutates the request it is given.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

import httpx

from survivalfox.models import (
    AnswerFailure,
    AnswerRequest,
    AnswerResult,
    AnswerSuccess,
    RagApiError,
    is_valid_uuid,
)

logger = logging.getLogger(__name__)

DEFAULT_FUNCTION_NAME = "rag-answer-dev"

INVALID_PAYLOAD_MESSAGE = "Invalid response payload"
MISSING_IDS_MESSAGE = "Backend response missing session_id/thread_id"


# ---------------------------------------------------------------------------
# Protocol
# ---------------------------------------------------------------------------

class Gateway(Protocol):
    async def ask(self, request: AnswerRequest) -> AnswerResult: ...


# ---------------------------------------------------------------------------
# Request body
# ---------------------------------------------------------------------------

def build_request_body(request: AnswerRequest) -> dict[str, Any]:
    """Map an AnswerRequest onto the backend's preferred field names.

    Optional fields are only sent when given; ``doc_filter`` is sent as
    ``null`` when explicitly set to None.
    """
    body: dict[str, Any] = {
        "query": request.query,
        "session_id": request.session_id,
        "spoilerLevel": request.spoiler_level,
    }

    if request.thread_id and is_valid_uuid(request.thread_id):
        body["thread_id"] = request.thread_id

    if request.match_count is not None:
        body["match_count"] = request.match_count
    if "doc_filter" in request.model_fields_set:
        body["doc_filter"] = request.doc_filter

    if request.developer_mode is not None:
        body["developer_mode"] = request.developer_mode

    return body


# ---------------------------------------------------------------------------
# Failure normalization
# ---------------------------------------------------------------------------

def _response_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return response.text


def normalize_transport_error(exc: Exception) -> RagApiError:
    """Turn any failure of the call itself into a RagApiError.

    HTTP status errors promote status, reason phrase and response body;
    everything else keeps a description of the failure as the body.
    """
    error = RagApiError(
        name=type(exc).__name__ or "RagApiError",
        message=str(exc) or "Request failed",
        kind="transport",
    )

    if isinstance(exc, httpx.HTTPStatusError):
        error.status = exc.response.status_code
        error.status_text = exc.response.reason_phrase or None
        error.body = _response_body(exc.response)
        return error

    body: dict[str, Any] = {"type": type(exc).__name__, "detail": str(exc)}
    if isinstance(exc, httpx.RequestError):
        try:
            body["url"] = str(exc.request.url)
        except RuntimeError:
            # .request is unset on errors raised outside a client call
            pass
    error.body = body
    return error


def validate_payload(data: Any) -> AnswerResult:
    """Check the decoded body carries the guaranteed ids."""
    if not isinstance(data, dict):
        return AnswerFailure(error=RagApiError(
            message=INVALID_PAYLOAD_MESSAGE,
            status=500,
            body=data,
            kind="invalid_payload",
        ))

    if not is_valid_uuid(data.get("session_id")) or not is_valid_uuid(data.get("thread_id")):
        return AnswerFailure(error=RagApiError(
            message=MISSING_IDS_MESSAGE,
            status=500,
            body=data,
            kind="missing_ids",
        ))

    return AnswerSuccess(data=data)


# ---------------------------------------------------------------------------
# AnswerGateway — the real HTTP client
# ---------------------------------------------------------------------------

class AnswerGateway:
    """Async client for ``POST {base_url}/functions/v1/{function_name}``.

    Args:
        base_url:      Project URL, e.g. "https://abc.supabase.co".
        anon_key:      Public anon key, sent as ``apikey`` and bearer token.
        function_name: Edge function to invoke. Defaults to "rag-answer-dev".
        timeout:       HTTP timeout in seconds. Defaults to 120.
    """

    def __init__(
        self,
        base_url: str,
        anon_key: str,
        function_name: str = DEFAULT_FUNCTION_NAME,
        timeout: float = 120.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._anon_key = anon_key
        self._function_name = function_name
        self._timeout = timeout

    @property
    def url(self) -> str:
        return f"{self._base_url}/functions/v1/{self._function_name}"

    def _headers(self) -> dict[str, str]:
        headers: dict[str, str] = {"Content-Type": "application/json"}
        if self._anon_key:
            headers["apikey"] = self._anon_key
            headers["Authorization"] = f"Bearer {self._anon_key}"
        return headers

    async def ask(self, request: AnswerRequest) -> AnswerResult:
        body = build_request_body(request)
        logger.debug(
            "rag call url=%s thread=%s spoiler=%s query_len=%d",
            self.url, body.get("thread_id"), body["spoilerLevel"], len(request.query),
        )

        try:
            async with httpx.AsyncClient(timeout=self._timeout) as client:
                resp = await client.post(self.url, json=body, headers=self._headers())
                resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            error = normalize_transport_error(e)
            logger.warning("rag call failed: %s %s (status=%s)", error.name, error.message, error.status)
            return AnswerFailure(error=error)

        try:
            data = resp.json()
        except ValueError:
            data = resp.text

        result = validate_payload(data)
        if isinstance(result, AnswerFailure):
            logger.warning("rag call returned unusable payload: %s", result.error.message)
        else:
            logger.debug("rag response thread=%s", data.get("thread_id"))
        return result
