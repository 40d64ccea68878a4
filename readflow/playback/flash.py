from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence

from ..config import PlaybackConfig
from .drivers import Driver, RepeatingTimer
from .models import (
    MAX_GROUP_SIZE,
    MAX_WPM,
    MIN_GROUP_SIZE,
    MIN_WPM,
    PlaybackCursor,
    PlaybackState,
    clamp,
)
from .speech import SpeechChannel

logger = logging.getLogger(__name__)

DEFAULT_WPM = 300
DEFAULT_GROUP_SIZE = 3
DEFAULT_SKIP_STEP = 10
WPM_KEY_STEP = 25


class TimedFlashScheduler:
    """
    Flashes the token stream a group of words at a time.

    The scheduler owns the cursor and a single repeating timer. Every cursor
    move and state change cancels the in-flight utterance and, while
    playing, speaks the new group.
    """

    def __init__(
        self,
        words: Sequence[str],
        wpm: int = DEFAULT_WPM,
        group_size: int = DEFAULT_GROUP_SIZE,
        skip_step: int = DEFAULT_SKIP_STEP,
        speech: Optional[SpeechChannel] = None,
        timer: Optional[Driver] = None,
        on_change: Optional[Callable[[PlaybackCursor], None]] = None,
    ):
        self.words = words
        self.wpm = clamp(int(wpm), MIN_WPM, MAX_WPM)
        self.group_size = clamp(int(group_size), MIN_GROUP_SIZE, MAX_GROUP_SIZE)
        self.skip_step = max(1, int(skip_step))
        self.speech = speech if speech is not None else SpeechChannel()
        self.timer: Driver = (
            timer if timer is not None else RepeatingTimer(self.tick, lambda: self.interval_ms, on_error=self.halt)
        )
        self.on_change = on_change
        self.state = PlaybackState.STOPPED
        self.index = 0

    @classmethod
    def from_config(
        cls,
        words: Sequence[str],
        config: PlaybackConfig,
        speech: Optional[SpeechChannel] = None,
        timer: Optional[Driver] = None,
        on_change: Optional[Callable[[PlaybackCursor], None]] = None,
    ) -> "TimedFlashScheduler":
        return cls(
            words,
            wpm=config.wpm,
            group_size=config.words_per_group,
            skip_step=config.skip_step,
            speech=speech if speech is not None else SpeechChannel.from_config(config),
            timer=timer,
            on_change=on_change,
        )

    @property
    def count(self) -> int:
        return len(self.words)

    @property
    def playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def interval_ms(self) -> float:
        return (60 / self.wpm) * 1000 * self.group_size

    @property
    def cursor(self) -> PlaybackCursor:
        return PlaybackCursor(index=self.index, playing=self.playing)

    @property
    def progress(self) -> float:
        if not self.count:
            return 0.0
        return (self.index + 1) / self.count * 100

    def current_words(self) -> List[str]:
        return list(self.words[self.index:self.index + self.group_size])

    def current_text(self) -> str:
        return " ".join(self.current_words())

    # --- play state -------------------------------------------------------

    def start(self) -> bool:
        # A playing state whose timer died is stale and may be restarted.
        if (self.playing and self.timer.active) or not self.count:
            return False
        self.timer.arm()
        self.state = PlaybackState.PLAYING
        logger.debug("flash started at index %s (%s wpm, group %s)", self.index, self.wpm, self.group_size)
        self._changed()
        return True

    def stop(self) -> bool:
        self.timer.disarm()
        self.speech.cancel()
        if not self.playing:
            return False
        self.state = PlaybackState.STOPPED
        logger.debug("flash stopped at index %s", self.index)
        self._notify()
        return True

    def toggle(self) -> bool:
        if self.playing:
            self.stop()
            return False
        if self.count and self.index >= self.count - 1:
            self.index = 0
        return self.start()

    def tick(self) -> None:
        if not self.playing:
            return
        next_index = self.index + self.group_size
        if next_index >= self.count:
            self.index = max(0, self.count - 1)
            self.stop()
            return
        self.index = next_index
        self._changed()

    def halt(self, exc: Exception) -> None:
        """Settle into the stopped state after the driver died on an error."""
        logger.warning("flash playback halted at index %s: %s", self.index, exc)
        self.state = PlaybackState.STOPPED
        self.speech.cancel()

    def reset(self) -> None:
        self.stop()
        self.index = 0
        self._changed()

    # --- navigation -------------------------------------------------------

    def seek(self, fraction: float) -> None:
        if not self.count:
            return
        fraction = clamp(float(fraction), 0.0, 1.0)
        self.index = clamp(math.floor(fraction * self.count), 0, self.count - 1)
        self._changed()

    def step(self, delta: int) -> None:
        if not self.count:
            return
        self.index = clamp(self.index + int(delta), 0, self.count - 1)
        self._changed()

    def next_group(self) -> None:
        self.step(self.group_size)

    def previous_group(self) -> None:
        self.step(-self.group_size)

    def skip_forward(self) -> None:
        self.step(self.skip_step)

    def skip_back(self) -> None:
        self.step(-self.skip_step)

    # --- rate -------------------------------------------------------------

    def set_wpm(self, wpm: int) -> int:
        # The timer re-reads interval_ms every period, so no re-arm is needed.
        self.wpm = clamp(int(wpm), MIN_WPM, MAX_WPM)
        return self.wpm

    def adjust_wpm(self, delta: int = WPM_KEY_STEP) -> int:
        return self.set_wpm(self.wpm + delta)

    def set_group_size(self, group_size: int) -> int:
        self.group_size = clamp(int(group_size), MIN_GROUP_SIZE, MAX_GROUP_SIZE)
        return self.group_size

    def _changed(self) -> None:
        if self.playing:
            self.speech.say(self.current_text())
        else:
            self.speech.cancel()
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.cursor)
