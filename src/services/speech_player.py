"""Speech playback of the fortune script.

Speech is synthesized with Edge TTS (free, Microsoft neural voices) and
played back in the browser. Playback has toggle semantics: starting while
an utterance is playing stops it instead of starting a second one.
"""

import asyncio
import logging
import time
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Protocol

from src.models.schemas import SpeechScope
from src.services.celebration import Burst, completion_burst

logger = logging.getLogger(__name__)


ANNOUNCEMENT_TEMPLATE = "{title}. 화면 하단의 복돼지를 두 번 누르시면 복이 찾아옵니다."

# Voice names that suggest a Korean female voice
FEMALE_NAME_HINTS = ("Female", "여성", "Yuna", "Heami", "SunHi", "Google")

# Edge TTS reports offsets / durations in 100ns ticks
TICKS_PER_SECOND = 10_000_000


@dataclass
class Voice:
    name: str
    locale: str
    gender: str = ""


@dataclass
class SpeechSettings:
    locale: str = "ko-KR"
    rate: float = 1.05
    pitch: float = 1.1


SCOPE_SETTINGS = {
    SpeechScope.FULL_SCRIPT: SpeechSettings(rate=1.05, pitch=1.1),
    SpeechScope.ANNOUNCEMENT: SpeechSettings(rate=0.9, pitch=0.85),
}


@dataclass
class Utterance:
    text: str
    voice: Optional[Voice]
    audio: bytes
    duration: float
    started_at: float = 0.0
    completion_bursts: list[Burst] = field(default_factory=completion_burst)

    def completion_schedule(self) -> list[Burst]:
        """Completion bursts delayed until the audio has finished."""
        delay = int(self.duration * 1000)
        return [replace(b, delay_ms=b.delay_ms + delay) for b in self.completion_bursts]


def build_speech_text(scope: SpeechScope, script: str, title: str) -> str:
    if scope == SpeechScope.ANNOUNCEMENT:
        return ANNOUNCEMENT_TEMPLATE.format(title=title.strip())
    return script


def select_voice(
    voices: list[Voice],
    lang_prefix: str = "ko",
    name_hints: tuple[str, ...] = FEMALE_NAME_HINTS,
) -> Optional[Voice]:
    """
    Pick a voice for the language.

    Prefers a voice of the language whose name (or gender) looks female,
    falls back to the first voice of the language, else None.
    """
    language_voices = [
        v for v in voices
        if v.locale.lower().startswith(lang_prefix.lower())
    ]
    for voice in language_voices:
        if voice.gender.lower() == "female" or any(hint in voice.name for hint in name_hints):
            return voice
    return language_voices[0] if language_voices else None


def _percent(factor: float) -> str:
    value = int(round((factor - 1) * 100))
    return f"+{value}%" if value >= 0 else f"{value}%"


def _hertz(factor: float) -> str:
    value = int(round((factor - 1) * 100))
    return f"+{value}Hz" if value >= 0 else f"{value}Hz"


class SpeechSynthesizer(Protocol):
    def list_voices(self) -> list[Voice]:
        ...

    def synthesize(self, text: str, voice: Optional[Voice], settings: SpeechSettings) -> tuple[bytes, float]:
        ...


class EdgeSpeechSynthesizer:
    """Edge TTS backend returning MP3 bytes and the spoken duration."""

    def __init__(self):
        self._voices: Optional[list[Voice]] = None

    def list_voices(self) -> list[Voice]:
        if self._voices is None:
            import edge_tts

            raw = asyncio.run(edge_tts.list_voices())
            self._voices = [
                Voice(
                    name=v.get("ShortName", v.get("Name", "")),
                    locale=v.get("Locale", ""),
                    gender=v.get("Gender", ""),
                )
                for v in raw
            ]
        return self._voices

    def synthesize(
        self,
        text: str,
        voice: Optional[Voice],
        settings: SpeechSettings,
    ) -> tuple[bytes, float]:
        import edge_tts

        voice_name = voice.name if voice else "ko-KR-SunHiNeural"

        async def _generate():
            communicate = edge_tts.Communicate(
                text=text,
                voice=voice_name,
                rate=_percent(settings.rate),
                pitch=_hertz(settings.pitch),
            )
            audio = bytearray()
            end_ticks = 0
            async for chunk in communicate.stream():
                if chunk["type"] == "audio":
                    audio.extend(chunk["data"])
                elif chunk["type"] in ("WordBoundary", "SentenceBoundary"):
                    end_ticks = max(end_ticks, chunk["offset"] + chunk["duration"])
            return bytes(audio), end_ticks / TICKS_PER_SECOND

        audio, duration = asyncio.run(_generate())
        logger.info(f"Generated Edge TTS audio with {voice_name} ({duration:.1f}s)")
        return audio, duration


class SpeechPlayer:
    """Toggle-style playback controller.

    An utterance counts as playing until its audio duration has elapsed,
    so pressing play after the audio ended starts a fresh utterance.
    """

    def __init__(
        self,
        synthesizer: SpeechSynthesizer,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.synthesizer = synthesizer
        self.clock = clock
        self.current: Optional[Utterance] = None

    @property
    def is_playing(self) -> bool:
        if self.current is None:
            return False
        if self.clock() >= self.current.started_at + self.current.duration:
            self.current = None
            return False
        return True

    def cancel(self) -> None:
        """Stop the active utterance (also used when leaving the screen)."""
        if self.current is not None:
            logger.info("Speech playback cancelled")
        self.current = None

    def finish(self) -> list[Burst]:
        """Mark the active utterance complete and return its celebration plan."""
        utterance = self.current
        self.current = None
        if utterance is None:
            return []
        return utterance.completion_schedule()

    def toggle(self, text: str, settings: SpeechSettings) -> Optional[Utterance]:
        """Start playback, or stop it when something is already playing."""
        if self.is_playing:
            self.cancel()
            return None

        self.cancel()
        if not text or not text.strip():
            return None

        voice = select_voice(self.synthesizer.list_voices(), settings.locale.split("-")[0])
        audio, duration = self.synthesizer.synthesize(text, voice, settings)
        self.current = Utterance(
            text=text,
            voice=voice,
            audio=audio,
            duration=duration,
            started_at=self.clock(),
        )
        return self.current
