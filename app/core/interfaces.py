"""
Abstractions for pluggable services. Inversion of control: core depends
on interfaces, not concrete services. Enables fakes/mocks and future swaps.
Protocols define what services or components can do,
without saying how they do it.

Common protocols:
- ChatBackend.create_session / get_session / send_message
- KeyValueStore.get / set / delete (durable client-side state)
- Notifier.notify(notification) (toasts, logs, test recorders)

Testing: Use simple fake implementations to test the controller without network calls.
"""

from __future__ import annotations
from typing import Optional, Protocol
from .models import Message, Notification


class ChatBackend(Protocol):
    def create_session(self, user_id: Optional[str] = None) -> str: ...

    def get_session(self, session_id: str) -> list[Message]: ...

    def list_user_sessions(self, user_id: str) -> list[dict]: ...

    def send_message(
        self, session_id: str, message: str, user_id: Optional[str] = None
    ) -> str: ...


class KeyValueStore(Protocol):
    def get(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class Notifier(Protocol):
    def notify(self, notification: Notification) -> None: ...
