"""
Pytest configuration and shared fixtures.

Fakes for the core seams: an in-memory chat backend and a recording notifier.
"""

import itertools

import pytest

from core.models import Message
from core.persistence.session_store import InMemoryKeyValueStore, SessionIdStore
from core.services.chat_api import ChatApiError


class FakeChatBackend:
    """Dict-backed stand-in for ChatApiClient."""

    def __init__(self):
        self.sessions: dict[str, list[Message]] = {}
        self.user_sessions: dict[str, list[dict]] = {}
        self.calls: list[tuple] = []
        self.replies: list = []
        self.create_error: Exception | None = None
        self.send_error: Exception | None = None
        self._ids = (f"S{i}" for i in itertools.count(1))

    def create_session(self, user_id=None):
        self.calls.append(("create_session", user_id))
        if self.create_error is not None:
            raise self.create_error
        session_id = next(self._ids)
        self.sessions[session_id] = []
        return session_id

    def get_session(self, session_id):
        self.calls.append(("get_session", session_id))
        if session_id not in self.sessions:
            raise ChatApiError("Failed to fetch chat session", status_code=404)
        return list(self.sessions[session_id])

    def list_user_sessions(self, user_id):
        self.calls.append(("list_user_sessions", user_id))
        return self.user_sessions.get(user_id, [])

    def send_message(self, session_id, message, user_id=None):
        self.calls.append(("send_message", session_id, message, user_id))
        if self.send_error is not None:
            raise self.send_error
        reply = self.replies.pop(0) if self.replies else f"echo: {message}"
        if isinstance(reply, str):
            self.sessions.setdefault(session_id, []).extend(
                [Message.user(message), Message.assistant(reply)]
            )
        return reply


class RecordingNotifier:
    def __init__(self):
        self.notifications = []

    def notify(self, notification):
        self.notifications.append(notification)


@pytest.fixture
def backend():
    return FakeChatBackend()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def kv():
    return InMemoryKeyValueStore()


@pytest.fixture
def id_store(kv):
    return SessionIdStore(kv)
