"""
Canonical data shapes, shared truth for typing/validation between layers.

Typical contents:
- Message (role, text) as shown in the transcript.
- SessionPhase for the resume-or-create lifecycle.
- SessionResolution handed from the session manager to the controller.
- FailureKind / Notification for the degraded paths.

Testing: Trivial; mostly types. Wire helpers are covered by the API tests.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional, Any
from enum import Enum


GREETING = (
    "Hi, I'm HealthSpark AI. How can I assist you with your health questions today?"
)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


class SessionPhase(str, Enum):
    UNINITIALIZED = "uninitialized"
    RESUMING = "resuming"
    RESUMED = "resumed"
    CREATING_NEW = "creating_new"
    READY = "ready"
    FAILED = "failed"


class FailureKind(str, Enum):
    CONFIGURATION = "configuration"
    CONNECTIVITY = "connectivity"
    GENERIC = "generic"


@dataclass(frozen=True)
class Message:
    role: Role
    text: str

    @property
    def is_user(self) -> bool:
        return self.role is Role.USER

    @classmethod
    def user(cls, text: str) -> "Message":
        return cls(Role.USER, text)

    @classmethod
    def assistant(cls, text: str) -> "Message":
        return cls(Role.ASSISTANT, text)

    @classmethod
    def from_wire(cls, payload: dict[str, Any]) -> "Message":
        """Server history entries look like {"content": ..., "role": ...}."""
        role = Role.USER if payload.get("role") == "user" else Role.ASSISTANT
        return cls(role, str(payload.get("content") or ""))

    def to_dict(self) -> dict[str, str]:
        return {"role": self.role.value, "content": self.text}


@dataclass
class SessionResolution:
    session_id: Optional[str]
    history: list[Message] = field(default_factory=list)
    resumed: bool = False

    @property
    def ready(self) -> bool:
        return bool(self.session_id)


@dataclass(frozen=True)
class Notification:
    title: str
    description: str
    variant: str = "default"
