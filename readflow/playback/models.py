from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

MIN_WPM = 100
MAX_WPM = 1000
MIN_GROUP_SIZE = 1
MAX_GROUP_SIZE = 7
MIN_SCROLL_SPEED = 10.0
MAX_SCROLL_SPEED = 200.0
MIN_SPEECH_RATE = 0.5
MAX_SPEECH_RATE = 2.0


def clamp(value, low, high):
    return max(low, min(high, value))


class PlaybackState(str, Enum):
    STOPPED = "stopped"
    PLAYING = "playing"


@dataclass(frozen=True)
class PlaybackCursor:
    index: int
    playing: bool


@dataclass(frozen=True)
class VisibleWindow:
    start: int
    end: int

    @property
    def count(self) -> int:
        return self.end - self.start


@dataclass(frozen=True)
class SpeechRequest:
    text: str
    rate: float = 1.0
    pitch: float = 1.0
    voice_id: str = ""

    def __post_init__(self):
        object.__setattr__(self, "rate", clamp(float(self.rate), MIN_SPEECH_RATE, MAX_SPEECH_RATE))
        object.__setattr__(self, "pitch", clamp(float(self.pitch), MIN_SPEECH_RATE, MAX_SPEECH_RATE))
