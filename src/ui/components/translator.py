"""
Translator component: renders the pipeline state machine.

The browser captures audio with ``st.audio_input``; everything after that
(transcode, transcribe, translate, speak) runs through ``TranslationSession``
kept in ``st.session_state``. Rendering reads only the session snapshot.
"""

import asyncio
import logging

import streamlit as st

from src.core.config import get_settings
from src.core.languages import SUPPORTED_LANGUAGES, get_language_name
from src.core.models import RawAudio
from src.services.orchestrator import PipelineState, TranslationSession
from src.ui.api_client import APIClient

logger = logging.getLogger(__name__)


@st.cache_resource
def get_api_client(base_url: str) -> APIClient:
    """Return a cached APIClient, keyed by base_url.

    Uses Streamlit's ``cache_resource`` to persist the client across reruns.
    """
    return APIClient(base_url=base_url)


def get_session() -> TranslationSession:
    """Return this browser session's orchestrator.

    Created on first run; on every later run it picks up the sidebar's
    current backend URL and auto-play toggle.
    """
    client = get_api_client(st.session_state.api_base_url)
    auto_play = st.session_state.auto_play
    if "translation_session" not in st.session_state:
        settings = get_settings()
        st.session_state.translation_session = TranslationSession(
            client=client,
            target_language=settings.default_target_language,
            auto_play=auto_play,
        )
    session = st.session_state.translation_session
    if not session.snapshot.is_busy:
        session.configure(client=client, auto_play=auto_play)
    return session


def _render_language_selector(session: TranslationSession) -> None:
    snapshot = session.snapshot
    codes = [code for code, _ in SUPPORTED_LANGUAGES]
    current = snapshot.target_language
    index = codes.index(current) if current in codes else 0
    selected = st.selectbox(
        "Translate into",
        codes,
        index=index,
        format_func=get_language_name,
        disabled=snapshot.is_busy,
    )
    if selected != current and not snapshot.is_busy:
        session.set_target_language(selected)


def _render_capture(session: TranslationSession) -> None:
    """Hand a new browser recording to the pipeline."""
    audio = st.audio_input("Record speech", disabled=not session.snapshot.can_record)
    if audio is None:
        return

    data = audio.getvalue()
    # st.audio_input keeps returning the last clip on every rerun
    fingerprint = (len(data), hash(data))
    if st.session_state.get("_last_clip") == fingerprint:
        return
    st.session_state._last_clip = fingerprint

    raw = RawAudio(data=data, mime_type=audio.type or "audio/wav")
    with st.spinner("Transcribing and translating..."):
        asyncio.run(session.process_recording(raw))


def _render_result(session: TranslationSession) -> None:
    snapshot = session.snapshot

    if snapshot.state == PipelineState.error and snapshot.error:
        st.error(snapshot.error)

    if snapshot.transcript is not None:
        st.subheader("Original")
        st.write(snapshot.transcript.text or "_(no speech recognized)_")

    if snapshot.translation is not None:
        st.subheader(f"Translation ({get_language_name(snapshot.translation.target_language)})")
        st.write(snapshot.translation.translated_text)

    if snapshot.can_play and st.button("Play translation"):
        with st.spinner("Generating speech..."):
            asyncio.run(session.play())
        snapshot = session.snapshot
        if snapshot.state == PipelineState.error and snapshot.error:
            st.error(snapshot.error)

    if session.snapshot.audio is not None:
        st.audio(
            session.snapshot.audio.data,
            format=session.snapshot.audio.mime_type,
            autoplay=True,
        )


def render_translator() -> None:
    """Render the full translator UI based on the current session snapshot."""
    session = get_session()
    _render_language_selector(session)
    _render_capture(session)
    _render_result(session)

    if session.snapshot.state in (PipelineState.ready, PipelineState.error):
        if st.button("Clear"):
            session.reset()
            st.rerun()
