"""Tests for speech playback."""

import pytest

from src.models.schemas import SpeechScope
from src.services.speech_player import (
    SCOPE_SETTINGS,
    SpeechPlayer,
    SpeechSettings,
    Voice,
    build_speech_text,
    select_voice,
)


VOICES = [
    Voice(name="en-US-AriaNeural", locale="en-US", gender="Female"),
    Voice(name="ko-KR-InJoonNeural", locale="ko-KR", gender="Male"),
    Voice(name="ko-KR-SunHiNeural", locale="ko-KR", gender="Female"),
]


class FakeSynthesizer:
    def __init__(self, voices=None, duration=4.0):
        self.voices = VOICES if voices is None else voices
        self.duration = duration
        self.calls = []

    def list_voices(self):
        return self.voices

    def synthesize(self, text, voice, settings):
        self.calls.append((text, voice, settings))
        return b"mp3", self.duration


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class TestSelectVoice:
    def test_prefers_korean_female(self):
        assert select_voice(VOICES).name == "ko-KR-SunHiNeural"

    def test_name_hint_without_gender(self):
        voices = [
            Voice(name="Korean Male", locale="ko-KR"),
            Voice(name="Yuna", locale="ko-KR"),
        ]
        assert select_voice(voices).name == "Yuna"

    def test_falls_back_to_first_korean_voice(self):
        voices = [
            Voice(name="en-US-AriaNeural", locale="en-US", gender="Female"),
            Voice(name="ko-KR-InJoonNeural", locale="ko-KR", gender="Male"),
        ]
        assert select_voice(voices).name == "ko-KR-InJoonNeural"

    def test_language_prefix_match(self):
        voices = [Voice(name="Generic", locale="ko")]
        assert select_voice(voices).name == "Generic"

    def test_no_korean_voice(self):
        assert select_voice([Voice(name="Aria", locale="en-US", gender="Female")]) is None


class TestSpeechText:
    def test_full_script(self):
        assert build_speech_text(SpeechScope.FULL_SCRIPT, "대본", "제목") == "대본"

    def test_announcement(self):
        text = build_speech_text(SpeechScope.ANNOUNCEMENT, "대본", " 2026 황금운세 ")
        assert text == "2026 황금운세. 화면 하단의 복돼지를 두 번 누르시면 복이 찾아옵니다."

    def test_scope_settings(self):
        assert SCOPE_SETTINGS[SpeechScope.FULL_SCRIPT].rate == 1.05
        assert SCOPE_SETTINGS[SpeechScope.FULL_SCRIPT].pitch == 1.1
        assert SCOPE_SETTINGS[SpeechScope.ANNOUNCEMENT].rate == 0.9
        assert SCOPE_SETTINGS[SpeechScope.ANNOUNCEMENT].pitch == 0.85


class TestSpeechPlayer:
    @pytest.fixture
    def clock(self):
        return FakeClock()

    def test_play_selects_voice_and_synthesizes(self, clock):
        synth = FakeSynthesizer()
        player = SpeechPlayer(synth, clock=clock)

        utterance = player.toggle("78년생 대박", SpeechSettings())

        assert utterance.voice.name == "ko-KR-SunHiNeural"
        assert utterance.audio == b"mp3"
        assert player.is_playing
        assert len(synth.calls) == 1

    def test_toggle_while_playing_cancels_without_second_utterance(self, clock):
        synth = FakeSynthesizer()
        player = SpeechPlayer(synth, clock=clock)
        player.toggle("78년생 대박", SpeechSettings())

        clock.now = 1.0
        assert player.toggle("78년생 대박", SpeechSettings()) is None

        assert not player.is_playing
        assert len(synth.calls) == 1

    def test_play_again_after_audio_ended(self, clock):
        synth = FakeSynthesizer(duration=4.0)
        player = SpeechPlayer(synth, clock=clock)
        player.toggle("첫 번째", SpeechSettings())

        clock.now = 5.0
        assert not player.is_playing
        assert player.toggle("두 번째", SpeechSettings()) is not None
        assert len(synth.calls) == 2

    def test_blank_text_is_ignored(self, clock):
        synth = FakeSynthesizer()
        player = SpeechPlayer(synth, clock=clock)
        assert player.toggle("   ", SpeechSettings()) is None
        assert synth.calls == []

    def test_cancel(self, clock):
        player = SpeechPlayer(FakeSynthesizer(), clock=clock)
        player.toggle("78년생", SpeechSettings())
        player.cancel()
        assert not player.is_playing

    def test_finish_returns_completion_plan(self, clock):
        player = SpeechPlayer(FakeSynthesizer(duration=2.0), clock=clock)
        player.toggle("78년생", SpeechSettings())

        (burst,) = player.finish()

        assert burst.particle_count == 200
        assert burst.delay_ms == 2000
        assert not player.is_playing

    def test_finish_without_playback(self, clock):
        player = SpeechPlayer(FakeSynthesizer(), clock=clock)
        assert player.finish() == []

    def test_completion_burst_fires_after_audio(self, clock):
        player = SpeechPlayer(FakeSynthesizer(duration=3.5), clock=clock)
        utterance = player.toggle("78년생", SpeechSettings())

        (burst,) = utterance.completion_schedule()
        assert burst.delay_ms == 3500
        assert burst.particle_count == 200
