from __future__ import annotations

import logging
from typing import List, Optional, Protocol

from ..config import PlaybackConfig
from .models import MAX_SPEECH_RATE, MIN_SPEECH_RATE, SpeechRequest, clamp

logger = logging.getLogger(__name__)


class SpeechSynthesizer(Protocol):
    def speak(self, request: SpeechRequest) -> None:
        ...

    def cancel(self) -> None:
        ...


class NullSpeechSynthesizer:
    """
    Default synthesizer. Keeps the schedulers wired when no voice is
    available.
    """

    def speak(self, request: SpeechRequest) -> None:
        return None

    def cancel(self) -> None:
        return None


class LoggingSpeechSynthesizer:
    """
    Records utterances instead of voicing them. Used by the demo CLI and
    handy when checking the cancel/speak ordering.
    """

    def __init__(self):
        self.spoken: List[SpeechRequest] = []
        self.cancel_count = 0

    def speak(self, request: SpeechRequest) -> None:
        self.spoken.append(request)
        logger.info("speak rate=%.2f pitch=%.2f: %s", request.rate, request.pitch, request.text)

    def cancel(self) -> None:
        self.cancel_count += 1
        logger.debug("speech cancelled")


class SpeechChannel:
    """
    The single speech resource shared by a scheduler. ``say`` always
    cancels the in-flight utterance first, so at most one is ever active.
    """

    def __init__(
        self,
        synthesizer: Optional[SpeechSynthesizer] = None,
        enabled: bool = False,
        rate: float = 1.0,
        pitch: float = 1.0,
        voice_id: str = "",
    ):
        self.synthesizer = synthesizer if synthesizer is not None else NullSpeechSynthesizer()
        self.enabled = enabled
        self.rate = clamp(rate, MIN_SPEECH_RATE, MAX_SPEECH_RATE)
        self.pitch = clamp(pitch, MIN_SPEECH_RATE, MAX_SPEECH_RATE)
        self.voice_id = voice_id

    @classmethod
    def from_config(cls, config: PlaybackConfig, synthesizer: Optional[SpeechSynthesizer] = None) -> "SpeechChannel":
        return cls(
            synthesizer,
            enabled=config.speech_enabled,
            rate=config.speech_rate,
            pitch=config.speech_pitch,
            voice_id=config.voice_id,
        )

    def cancel(self) -> None:
        self.synthesizer.cancel()

    def say(self, text: str) -> bool:
        self.cancel()
        if not self.enabled or not text or not text.strip():
            return False
        self.synthesizer.speak(
            SpeechRequest(text=text, rate=self.rate, pitch=self.pitch, voice_id=self.voice_id)
        )
        return True
