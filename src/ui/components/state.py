"""Session state management for Streamlit."""

import streamlit as st

from src.config import config
from src.models.schemas import AppState
from src.services.celebration import BlessingTracker
from src.services.credentials import build_credential_gate
from src.services.fortune_analyzer import FortuneAnalyzer
from src.services.fortune_video_generator import FortuneVideoGenerator
from src.services.session_controller import SessionController
from src.services.speech_player import EdgeSpeechSynthesizer, SpeechPlayer


def init_session_state() -> None:
    """Initialize session state with defaults."""
    if "app_state" not in st.session_state:
        st.session_state.app_state = AppState()

    if "credential_gate" not in st.session_state:
        st.session_state.credential_gate = build_credential_gate(config)

    if "speech_player" not in st.session_state:
        st.session_state.speech_player = SpeechPlayer(EdgeSpeechSynthesizer())

    if "blessing_tracker" not in st.session_state:
        st.session_state.blessing_tracker = BlessingTracker(
            blessing_duration=config.display.blessing_duration,
            double_click_window=config.display.double_click_window,
        )


def get_state() -> AppState:
    """Get the current app state."""
    init_session_state()
    return st.session_state.app_state


def get_gate():
    """Get the credential gate for this session."""
    init_session_state()
    return st.session_state.credential_gate


def get_speech_player() -> SpeechPlayer:
    init_session_state()
    return st.session_state.speech_player


def get_blessing_tracker() -> BlessingTracker:
    init_session_state()
    return st.session_state.blessing_tracker


def get_controller() -> SessionController:
    """Build a controller over the session's state and credential gate."""
    state = get_state()
    gate = get_gate()
    return SessionController(
        state=state,
        gate=gate,
        analyzer=FortuneAnalyzer(api_key_provider=gate.get_api_key, config=config),
        video_generator=FortuneVideoGenerator(api_key_provider=gate.get_api_key, config=config),
    )


def reset_state() -> None:
    """Reset the workflow (the credential gate is kept)."""
    get_speech_player().cancel()
    st.session_state.app_state = AppState()
