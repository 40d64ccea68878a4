from .drivers import Driver, FrameLoop, RepeatingTimer
from .flash import TimedFlashScheduler
from .models import PlaybackCursor, PlaybackState, SpeechRequest, VisibleWindow
from .scroll import ContinuousScrollScheduler
from .speech import LoggingSpeechSynthesizer, NullSpeechSynthesizer, SpeechChannel, SpeechSynthesizer
from .window import build_paragraphs, compute_window

__all__ = [
    "ContinuousScrollScheduler",
    "Driver",
    "FrameLoop",
    "LoggingSpeechSynthesizer",
    "NullSpeechSynthesizer",
    "PlaybackCursor",
    "PlaybackState",
    "RepeatingTimer",
    "SpeechChannel",
    "SpeechRequest",
    "SpeechSynthesizer",
    "TimedFlashScheduler",
    "VisibleWindow",
    "build_paragraphs",
    "compute_window",
]
