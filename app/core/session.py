"""
Purpose: Session lifecycle. Owns the active session id and decides, on
startup, whether to resume the persisted session or create a new one.

Lifecycle:
    UNINITIALIZED -> RESUMING -> RESUMED -> READY
    UNINITIALIZED -> RESUMING -> CREATING_NEW -> READY   (stale id)
    UNINITIALIZED -> CREATING_NEW -> READY
    ... -> CREATING_NEW -> FAILED                        (creation failed)

Only READY permits message exchange. Message content is never inspected
here; fetched history is handed back to the caller untouched.

Testing: Fake ChatBackend + InMemoryKeyValueStore; assert phases, persisted
id and notifications.
"""

from __future__ import annotations
import logging
from typing import Optional

from .interfaces import ChatBackend, Notifier
from .models import SessionPhase, SessionResolution
from .persistence.session_store import SessionIdStore
from .services.fallbacks import INIT_FAILED

logger = logging.getLogger(__name__)


class SessionManager:
    def __init__(
        self,
        api: ChatBackend,
        store: SessionIdStore,
        notifier: Optional[Notifier] = None,
        *,
        user_id: Optional[str] = None,
    ):
        self.api = api
        self.store = store
        self.notifier = notifier
        self.user_id = user_id

        self.phase: SessionPhase = SessionPhase.UNINITIALIZED
        self.session_id: Optional[str] = None

    def is_ready(self) -> bool:
        """True once a session id has been resolved."""
        return self.phase is SessionPhase.READY and bool(self.session_id)

    def resolve_session(self) -> SessionResolution:
        """
        Resume the persisted session if the backend still knows it, otherwise
        create a new one. Never raises on backend failure: an unresolved
        session comes back with session_id=None and an init notification.
        """
        self.session_id = None
        stored = self.store.load()

        if stored:
            self.phase = SessionPhase.RESUMING
            try:
                history = self.api.get_session(stored)
            except Exception as e:
                logger.warning("Could not resume session %s: %s", stored, e)
                self._forget()
            else:
                self.phase = SessionPhase.RESUMED
                logger.info(
                    "Resumed session %s with %d messages", stored, len(history)
                )
                self._ready(stored)
                return SessionResolution(stored, list(history), resumed=True)

        return self._create()

    def _create(self) -> SessionResolution:
        self.phase = SessionPhase.CREATING_NEW
        try:
            session_id = self.api.create_session(self.user_id)
        except Exception as e:
            logger.warning("Could not create chat session: %s", e)
            self.phase = SessionPhase.FAILED
            if self.notifier is not None:
                self.notifier.notify(INIT_FAILED)
            return SessionResolution(None)

        logger.info("Created session %s", session_id)
        self._ready(session_id)
        return SessionResolution(session_id)

    def _ready(self, session_id: str) -> None:
        try:
            self.store.save(session_id)
        except OSError as e:
            logger.warning("Could not persist session id %s: %s", session_id, e)
        self.session_id = session_id
        self.phase = SessionPhase.READY

    def _forget(self) -> None:
        try:
            self.store.clear()
        except OSError as e:
            logger.warning("Could not clear persisted session id: %s", e)

    def clear(self) -> None:
        """Forget the active session locally; the next resolve creates a new one."""
        self._forget()
        self.session_id = None
        self.phase = SessionPhase.UNINITIALIZED

    def list_user_sessions(self) -> list[dict]:
        """Past sessions for the configured user; empty when unknown or unreachable."""
        if not self.user_id:
            return []
        try:
            return self.api.list_user_sessions(self.user_id)
        except Exception as e:
            logger.warning("Could not list sessions for %s: %s", self.user_id, e)
            return []
