"""
UI layer
Purpose: Streamlit-only glue. Renders the transcript, collects user input, and
delegates all work to the session manager and controller. Keeps UI concerns
(layout/state widgets) separate from business logic so logic can be unit
tested without Streamlit.
"""

import streamlit as st

from core.config import configure_logging, get_settings
from core.controller import ChatSessionController
from core.models import Notification
from core.persistence.session_store import (
    JsonFileKeyValueStore,
    SessionIdStore,
    ensure_client_id,
)
from core.services.chat_api import ChatApiClient
from core.session import SessionManager


# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title="HealthSpark Assistant",
    page_icon="❤️",
    layout="centered",
)


class StreamlitNotifier:
    """Routes core notifications to toasts."""

    def notify(self, notification: Notification) -> None:
        icon = "⚠️" if notification.variant == "destructive" else None
        st.toast(f"**{notification.title}**: {notification.description}", icon=icon)


# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("session_manager", None)
st_session.setdefault("controller", None)


# ---------------------------
# Helpers
# ---------------------------
def get_session_manager():
    """Return the session manager object."""
    return st_session.get("session_manager")


def get_controller():
    """Return the controller object."""
    return st_session.get("controller")


@st.cache_resource
def get_api_client() -> ChatApiClient:
    """One pooled HTTP client shared by every browser session of this server."""
    return ChatApiClient.from_settings(get_settings())


def get_client_id() -> str:
    """Per-browser identity, kept in the URL so a reload finds the same session."""
    client_id = ensure_client_id(st.query_params.get("client"))
    if st.query_params.get("client") != client_id:
        st.query_params["client"] = client_id
    return client_id


def start_chat():
    """Wire services once per browser session and resolve the chat session."""
    settings = get_settings()
    configure_logging(settings.log_level)

    notifier = StreamlitNotifier()
    api = get_api_client()
    store = SessionIdStore(
        JsonFileKeyValueStore(settings.storage_path), client_id=get_client_id()
    )

    manager = SessionManager(api, store, notifier, user_id=settings.user_id)
    controller = ChatSessionController(api, notifier, user_id=settings.user_id)
    controller.attach(manager.resolve_session())

    st_session.session_manager = manager
    st_session.controller = controller


def new_conversation():
    """Drop the persisted session and start a fresh one."""
    manager = get_session_manager()
    controller = get_controller()
    if not (manager and controller):
        return
    manager.clear()
    controller.reset()
    controller.attach(manager.resolve_session())
    if controller.is_ready():
        st.toast("Started a new conversation.", icon="🧹")


if get_controller() is None:
    start_chat()

manager = get_session_manager()
controller = get_controller()


# ---------------------------
# SIDEBAR: session controls
# ---------------------------
with st.sidebar:
    st.markdown("# Session")
    if controller.session_id:
        st.caption(f"Session: `{controller.session_id}`")
    else:
        st.warning("Chat is not connected.")
        if st.button("Retry", type="primary"):
            controller.attach(manager.resolve_session())
            st.rerun()

    st.button("New conversation", on_click=new_conversation)

    if manager.user_id:
        st.divider()
        st.markdown("## Past sessions")
        past = manager.list_user_sessions()
        if not past:
            st.caption("No previous sessions.")
        for item in past:
            sid = item.get("sessionId") or item.get("_id") or item.get("id") or "?"
            st.markdown(f"- `{sid}`")


# ---------------------------
# Header
# ---------------------------
st.title("HealthSpark Assistant")

transcript = st.container(height=500, border=True)
with transcript:
    for msg in controller.get_history():
        with st.chat_message(msg.role.value):
            st.markdown(msg.text)

raw = st.chat_input(
    "Type your health question...",
    disabled=not controller.is_ready(),
)
if raw is not None:
    if not raw.strip():
        st.toast("Please enter a non-empty message.", icon="⚠️")
    else:
        with transcript:
            with st.chat_message("user"):
                st.markdown(raw.strip())
        with st.spinner("Thinking…"):
            controller.send(raw)
        st.rerun()

st.divider()
st.caption(
    "HealthSpark provides general information only and is not a substitute "
    "for professional medical advice."
)
