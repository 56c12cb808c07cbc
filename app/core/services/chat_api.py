"""
Purpose: Thin client wrapper around the HealthSpark chat backend REST API.
One place for base URL, timeouts, request logging and response/error
normalization.

Endpoints:
- POST /chat/sessions              -> {success, data: {sessionId}}
- GET  /chat/sessions/{id}         -> {success, data: {messages: [{content, role}]}}
- GET  /chat/sessions/user/{uid}   -> {success, data: [...]}
- POST /chat/messages              -> {success, data: {message}}

Every failure (transport error, non-2xx status, undecodable or malformed
body) surfaces as ChatApiError so callers handle one failure class.

Testing: Use httpx.MockTransport; assert URL/body mapping and error mapping.
"""

from __future__ import annotations
import logging
from typing import Any, Optional

import httpx

from ..models import Message

logger = logging.getLogger(__name__)


class ChatApiError(RuntimeError):
    """Any failed backend call. `code` is the backend's structured error code, if sent."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code


class ChatApiClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 30.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
            headers={"Content-Type": "application/json"},
            transport=transport,
        )

    @classmethod
    def from_settings(cls, settings) -> "ChatApiClient":
        return cls(settings.api_url, timeout=settings.request_timeout)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "ChatApiClient":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _request(
        self,
        method: str,
        path: str,
        *,
        failure: str,
        json: Optional[dict[str, Any]] = None,
        use_server_error: bool = False,
    ) -> Any:
        """Perform a call and return the `data` member of a successful envelope."""
        logger.debug("%s %s%s", method, self.base_url, path)
        try:
            response = self._client.request(method, path, json=json)
        except httpx.TransportError as e:
            logger.warning("%s %s failed: %s", method, path, e)
            raise ChatApiError(f"network error: {e}") from e

        try:
            body = response.json()
        except ValueError:
            body = None

        if response.is_error:
            message = failure
            code = None
            if isinstance(body, dict):
                code = body.get("code")
                if use_server_error and body.get("error"):
                    message = str(body["error"])
            logger.warning(
                "%s %s returned %s: %s", method, path, response.status_code, message
            )
            raise ChatApiError(message, status_code=response.status_code, code=code)

        if not isinstance(body, dict) or body.get("success") is not True:
            logger.warning("%s %s returned an invalid body: %r", method, path, body)
            raise ChatApiError(
                "Invalid response from server", status_code=response.status_code
            )
        return body.get("data")

    def create_session(self, user_id: Optional[str] = None) -> str:
        data = self._request(
            "POST",
            "/chat/sessions",
            json={"userId": user_id},
            failure="Failed to create chat session",
        )
        session_id = data.get("sessionId") if isinstance(data, dict) else None
        if not isinstance(session_id, str) or not session_id:
            raise ChatApiError("Invalid response from server: missing sessionId")
        return session_id

    def get_session(self, session_id: str) -> list[Message]:
        data = self._request(
            "GET",
            f"/chat/sessions/{session_id}",
            failure="Failed to fetch chat session",
        )
        messages = data.get("messages") if isinstance(data, dict) else None
        if not isinstance(messages, list):
            raise ChatApiError("Invalid response from server: missing messages")
        return [Message.from_wire(m) for m in messages if isinstance(m, dict)]

    def list_user_sessions(self, user_id: str) -> list[dict]:
        data = self._request(
            "GET",
            f"/chat/sessions/user/{user_id}",
            failure="Failed to fetch user chat sessions",
        )
        if not isinstance(data, list):
            raise ChatApiError("Invalid response from server: expected a list")
        return [s for s in data if isinstance(s, dict)]

    def send_message(
        self, session_id: str, message: str, user_id: Optional[str] = None
    ) -> str:
        data = self._request(
            "POST",
            "/chat/messages",
            json={"sessionId": session_id, "message": message, "userId": user_id},
            failure="Failed to send message",
            use_server_error=True,
        )
        reply = data.get("message") if isinstance(data, dict) else None
        if not isinstance(reply, str):
            raise ChatApiError("Invalid response from server")
        return reply
