"""
Purpose: The single orchestration point for the conversation. Owns the
transcript and drives every exchange against the resolved session id.
Prevents UI from knowing how the backend or fallbacks work.

Key responsibilities:
- Hold the transcript, seeded with the assistant greeting.
- Replace it wholesale with server history when a session is resumed.
- send(): optimistic user message, one backend call, then exactly one
  assistant message (real reply or canned fallback).
- Enforce a single in-flight exchange via the busy flag.

The transcript is append-only: a failed exchange keeps the user's message
and adds a fallback reply after it.

Testing: Pure unit tests with a fake ChatBackend and a recording Notifier.
"""

from __future__ import annotations
import logging
from typing import Optional

from .interfaces import ChatBackend, Notifier
from .models import GREETING, Message, SessionResolution
from .services.chat_api import ChatApiError
from .services.fallbacks import SEND_FAILED, classify_failure, FALLBACK_TEXT

logger = logging.getLogger(__name__)


class ChatSessionController:
    def __init__(
        self,
        api: ChatBackend,
        notifier: Optional[Notifier] = None,
        *,
        user_id: Optional[str] = None,
        greeting: str = GREETING,
    ):
        self.api: ChatBackend = api
        self.notifier = notifier
        self.user_id = user_id
        self.greeting = greeting

        self.session_id: Optional[str] = None
        self.transcript: list[Message] = [Message.assistant(greeting)]
        self.pending_input: str = ""
        self.busy: bool = False

    def is_ready(self) -> bool:
        """True if a session is attached and no exchange is in flight."""
        return bool(self.session_id) and not self.busy

    def attach(self, resolution: SessionResolution) -> None:
        """Adopt a resolved session; resumed history replaces the transcript."""
        self.session_id = resolution.session_id
        if resolution.history:
            self.transcript = list(resolution.history)
        elif resolution.ready:
            self.transcript = [Message.assistant(self.greeting)]

    def reset(self) -> None:
        """Detach from the session and go back to the greeting-only transcript."""
        self.session_id = None
        self.transcript = [Message.assistant(self.greeting)]
        self.pending_input = ""
        self.busy = False

    def get_history(self) -> list[Message]:
        return list(self.transcript)

    def set_input(self, text: str) -> None:
        self.pending_input = text or ""

    def send(self, text: Optional[str] = None) -> bool:
        """
        Run one exchange. Uses `text` or, when omitted, the pending input.
        Returns False (and touches nothing) for blank input, no session, or
        an exchange already in flight; otherwise the transcript grows by two.
        """
        raw = self.pending_input if text is None else text
        user_text = (raw or "").strip()
        if not user_text or not self.session_id:
            return False
        if self.busy:
            logger.debug("Rejected send while an exchange is in flight")
            return False

        self.transcript.append(Message.user(user_text))
        self.pending_input = ""
        self.busy = True
        try:
            reply = self.api.send_message(self.session_id, user_text, self.user_id)
            if not isinstance(reply, str):
                raise ChatApiError("Invalid response from server")
            self.transcript.append(Message.assistant(reply))
        except Exception as e:
            kind = classify_failure(e)
            logger.warning("Exchange failed (%s): %s", kind.value, e)
            self.transcript.append(Message.assistant(FALLBACK_TEXT[kind]))
            if self.notifier is not None:
                self.notifier.notify(SEND_FAILED)
        finally:
            self.busy = False
        return True
