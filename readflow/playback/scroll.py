from __future__ import annotations

import logging
from typing import Callable, Optional

from ..config import PlaybackConfig
from .drivers import Driver, FrameLoop
from .models import MAX_SCROLL_SPEED, MIN_SCROLL_SPEED, PlaybackState, clamp
from .speech import SpeechChannel

logger = logging.getLogger(__name__)

DEFAULT_SCROLL_SPEED = 50.0
DEFAULT_EPSILON = 10.0
MANUAL_SCROLL_STEP = 200.0


class ContinuousScrollScheduler:
    """
    Scrolls the reading surface at ``speed`` pixels per second.

    Advancement uses the real time between frames, never an assumed frame
    rate. ``stop`` forgets the last frame time, so a paused interval is
    never applied on the next start.
    """

    def __init__(
        self,
        text: str = "",
        speed: float = DEFAULT_SCROLL_SPEED,
        epsilon: float = DEFAULT_EPSILON,
        content_extent: float = 0.0,
        viewport_extent: float = 0.0,
        speech: Optional[SpeechChannel] = None,
        frame_loop: Optional[Driver] = None,
        on_change: Optional[Callable[[float], None]] = None,
    ):
        self.text = text
        self.speed = clamp(float(speed), MIN_SCROLL_SPEED, MAX_SCROLL_SPEED)
        self.epsilon = max(0.0, float(epsilon))
        self.content_extent = max(0.0, float(content_extent))
        self.viewport_extent = max(0.0, float(viewport_extent))
        self.speech = speech if speech is not None else SpeechChannel()
        self.frame_loop: Driver = (
            frame_loop if frame_loop is not None else FrameLoop(self.on_frame, on_error=self.halt)
        )
        self.on_change = on_change
        self.state = PlaybackState.STOPPED
        self.position = 0.0
        self.last_frame_time: Optional[float] = None

    @classmethod
    def from_config(
        cls,
        text: str,
        config: PlaybackConfig,
        speech: Optional[SpeechChannel] = None,
        frame_loop: Optional[Driver] = None,
        on_change: Optional[Callable[[float], None]] = None,
    ) -> "ContinuousScrollScheduler":
        return cls(
            text=text,
            speed=config.scroll_speed,
            epsilon=config.scroll_epsilon,
            speech=speech if speech is not None else SpeechChannel.from_config(config),
            frame_loop=frame_loop,
            on_change=on_change,
        )

    @property
    def playing(self) -> bool:
        return self.state is PlaybackState.PLAYING

    @property
    def max_position(self) -> float:
        return max(0.0, self.content_extent - self.viewport_extent)

    @property
    def at_end(self) -> bool:
        return self.position + self.viewport_extent >= self.content_extent - self.epsilon

    @property
    def progress(self) -> float:
        if self.max_position <= 0:
            return 0.0
        return self.position / self.max_position * 100

    def start(self) -> bool:
        # A playing state whose frame loop died is stale and may be restarted.
        if self.playing and self.frame_loop.active:
            return False
        self.last_frame_time = None
        self.frame_loop.arm()
        self.state = PlaybackState.PLAYING
        logger.debug("scroll started at %.1fpx (%.0f px/s)", self.position, self.speed)
        self.speech.say(self.text)
        return True

    def stop(self) -> bool:
        self.frame_loop.disarm()
        self.last_frame_time = None
        self.speech.cancel()
        if not self.playing:
            return False
        self.state = PlaybackState.STOPPED
        logger.debug("scroll stopped at %.1fpx", self.position)
        return True

    def toggle(self) -> bool:
        if self.playing:
            self.stop()
            return False
        return self.start()

    def on_frame(self, now: float) -> None:
        if not self.playing:
            return
        if self.last_frame_time is None:
            self.last_frame_time = now
            return
        elapsed = max(0.0, now - self.last_frame_time)
        self.last_frame_time = now
        self._move_to(self.position + self.speed * elapsed)
        if self.at_end:
            self.stop()

    def scroll_by(self, delta: float = MANUAL_SCROLL_STEP) -> None:
        self._move_to(self.position + delta)

    def set_speed(self, speed: float) -> float:
        self.speed = clamp(float(speed), MIN_SCROLL_SPEED, MAX_SCROLL_SPEED)
        return self.speed

    def adjust_speed(self, delta: float) -> float:
        return self.set_speed(self.speed + delta)

    def set_extents(self, content_extent: float, viewport_extent: float) -> None:
        self.content_extent = max(0.0, float(content_extent))
        self.viewport_extent = max(0.0, float(viewport_extent))
        self._move_to(self.position)

    def reset(self) -> None:
        self.stop()
        self._move_to(0.0)

    def halt(self, exc: Exception) -> None:
        """Settle into the stopped state after the driver died on an error."""
        logger.warning("scroll halted at %.1fpx: %s", self.position, exc)
        self.state = PlaybackState.STOPPED
        self.last_frame_time = None
        self.speech.cancel()

    def _move_to(self, position: float) -> None:
        self.position = clamp(position, 0.0, self.max_position)
        if self.on_change is not None:
            self.on_change(self.position)
