"""Services for Shorts Myeongri Master."""

from src.services.fortune_analyzer import FortuneAnalyzer
from src.services.fortune_video_generator import FortuneVideoGenerator
from src.services.session_controller import SessionController
from src.services.speech_player import SpeechPlayer

__all__ = [
    "FortuneAnalyzer",
    "FortuneVideoGenerator",
    "SessionController",
    "SpeechPlayer",
]
