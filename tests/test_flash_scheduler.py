import asyncio

import pytest

from readflow.config import PlaybackConfig
from readflow.playback import PlaybackState, RepeatingTimer, SpeechChannel, TimedFlashScheduler

WORDS = [f"w{i}" for i in range(20)]


class ManualTimer:
    """Stands in for the repeating timer; the test calls tick() itself."""

    def __init__(self):
        self.armed = False
        self.arm_calls = 0

    @property
    def active(self):
        return self.armed

    def arm(self):
        if self.armed:
            return False
        self.armed = True
        self.arm_calls += 1
        return True

    def disarm(self):
        self.armed = False


class RecordingSynth:
    def __init__(self):
        self.events = []

    def speak(self, request):
        self.events.append(("speak", request.text))

    def cancel(self):
        self.events.append(("cancel", None))


def make_scheduler(words=WORDS, speech_enabled=False, **kwargs):
    synth = RecordingSynth()
    timer = ManualTimer()
    scheduler = TimedFlashScheduler(
        words,
        speech=SpeechChannel(synth, enabled=speech_enabled),
        timer=timer,
        **kwargs,
    )
    return scheduler, timer, synth


def test_interval_and_five_ticks():
    scheduler, _, _ = make_scheduler(wpm=300, group_size=1)
    assert scheduler.interval_ms == 200
    scheduler.start()
    for _ in range(5):
        scheduler.tick()
    assert scheduler.index == 5
    assert scheduler.playing


def test_interval_scales_with_group_size():
    scheduler, _, _ = make_scheduler(wpm=600, group_size=3)
    assert scheduler.interval_ms == 300


def test_second_start_is_a_noop():
    scheduler, timer, _ = make_scheduler()
    assert scheduler.start()
    assert not scheduler.start()
    assert timer.arm_calls == 1


def test_start_with_no_words_does_nothing():
    scheduler, timer, _ = make_scheduler(words=[])
    assert not scheduler.start()
    assert scheduler.state == PlaybackState.STOPPED
    assert timer.arm_calls == 0


def test_tick_past_end_clamps_and_stops():
    scheduler, timer, _ = make_scheduler(words=WORDS[:5], group_size=3)
    scheduler.start()
    scheduler.tick()
    assert scheduler.index == 3
    scheduler.tick()
    assert scheduler.index == 4
    assert scheduler.state == PlaybackState.STOPPED
    assert not timer.active


def test_stop_is_idempotent():
    scheduler, timer, _ = make_scheduler()
    assert not scheduler.stop()
    scheduler.start()
    assert scheduler.stop()
    assert not scheduler.stop()
    assert not timer.active


def test_toggle_at_end_rewinds():
    scheduler, _, _ = make_scheduler(words=WORDS[:4], group_size=2)
    scheduler.start()
    scheduler.tick()
    scheduler.tick()
    assert scheduler.index == 3 and not scheduler.playing
    assert scheduler.toggle()
    assert scheduler.index == 0
    assert scheduler.playing
    assert not scheduler.toggle()
    assert not scheduler.playing


def test_seek_clamps_and_keeps_play_state():
    scheduler, _, _ = make_scheduler()
    scheduler.seek(0.55)
    assert scheduler.index == 11
    scheduler.seek(2)
    assert scheduler.index == 19
    scheduler.seek(-1)
    assert scheduler.index == 0
    assert not scheduler.playing

    scheduler.start()
    scheduler.seek(0.5)
    assert scheduler.playing
    assert scheduler.index == 10


def test_navigation_steps():
    scheduler, _, _ = make_scheduler(group_size=3)
    scheduler.next_group()
    assert scheduler.index == 3
    scheduler.skip_forward()
    assert scheduler.index == 13
    scheduler.skip_forward()
    assert scheduler.index == 19
    scheduler.previous_group()
    assert scheduler.index == 16
    scheduler.skip_back()
    scheduler.skip_back()
    assert scheduler.index == 0
    scheduler.step(-5)
    assert scheduler.index == 0


def test_reset_rewinds_and_stops():
    scheduler, timer, _ = make_scheduler()
    scheduler.start()
    scheduler.step(7)
    scheduler.reset()
    assert scheduler.index == 0
    assert not scheduler.playing
    assert not timer.active


def test_rate_changes_apply_without_rearming():
    scheduler, timer, _ = make_scheduler(group_size=1)
    scheduler.start()
    assert scheduler.set_wpm(50) == 100
    assert scheduler.set_wpm(5000) == 1000
    scheduler.set_wpm(300)
    assert scheduler.adjust_wpm() == 325
    assert scheduler.adjust_wpm(-50) == 275
    assert scheduler.interval_ms == (60 / 275) * 1000
    assert timer.arm_calls == 1


def test_group_size_is_clamped():
    scheduler, _, _ = make_scheduler(group_size=12)
    assert scheduler.group_size == 7
    assert scheduler.set_group_size(0) == 1


def test_current_words_and_progress():
    scheduler, _, _ = make_scheduler(group_size=3)
    scheduler.step(18)
    assert scheduler.current_words() == ["w18", "w19"]
    assert scheduler.progress == pytest.approx(95.0)


def test_every_transition_cancels_speech_first():
    scheduler, _, synth = make_scheduler(words=WORDS[:6], speech_enabled=True, group_size=2)
    scheduler.start()
    scheduler.tick()
    scheduler.seek(0)
    scheduler.stop()
    assert synth.events == [
        ("cancel", None),
        ("speak", "w0 w1"),
        ("cancel", None),
        ("speak", "w2 w3"),
        ("cancel", None),
        ("speak", "w0 w1"),
        ("cancel", None),
    ]


def test_paused_navigation_only_cancels():
    scheduler, _, synth = make_scheduler(speech_enabled=True)
    scheduler.step(1)
    assert synth.events == [("cancel", None)]


def test_on_change_receives_cursor():
    seen = []
    scheduler, _, _ = make_scheduler(group_size=1, on_change=seen.append)
    scheduler.start()
    scheduler.tick()
    scheduler.stop()
    assert [(c.index, c.playing) for c in seen] == [(0, True), (1, True), (1, False)]


def test_repeating_timer_drives_the_scheduler():
    delays = []

    async def fake_sleep(seconds):
        delays.append(seconds)
        await asyncio.sleep(0)

    async def scenario():
        scheduler = TimedFlashScheduler(WORDS[:4], wpm=300, group_size=1)
        scheduler.timer = RepeatingTimer(scheduler.tick, lambda: scheduler.interval_ms, sleep=fake_sleep)
        assert scheduler.start()
        assert not scheduler.timer.arm()
        for _ in range(50):
            await asyncio.sleep(0)
        return scheduler

    scheduler = asyncio.run(scenario())
    assert scheduler.index == 3
    assert not scheduler.playing
    assert not scheduler.timer.active
    assert delays[0] == 0.2


def test_from_config():
    config = PlaybackConfig(wpm=400, words_per_group=2, skip_step=5, speech_enabled=True, speech_rate=1.5)
    scheduler = TimedFlashScheduler.from_config(WORDS, config, timer=ManualTimer())
    assert (scheduler.wpm, scheduler.group_size, scheduler.skip_step) == (400, 2, 5)
    assert scheduler.speech.enabled
    assert scheduler.speech.rate == 1.5
    scheduler.skip_forward()
    assert scheduler.index == 5


def test_start_without_event_loop_stays_stopped():
    scheduler = TimedFlashScheduler(["a", "b", "c"])
    with pytest.raises(RuntimeError):
        scheduler.start()
    assert scheduler.state is PlaybackState.STOPPED
    assert not scheduler.timer.active


def test_failing_callback_stops_playback_and_allows_restart():
    calls = []

    def on_change(cursor):
        calls.append(cursor.index)
        if len(calls) == 2:
            raise ValueError("display went away")

    async def fast_sleep(seconds):
        await asyncio.sleep(0)

    async def scenario():
        synth = RecordingSynth()
        scheduler = TimedFlashScheduler(
            WORDS,
            group_size=1,
            speech=SpeechChannel(synth, enabled=True),
            on_change=on_change,
        )
        scheduler.timer = RepeatingTimer(
            scheduler.tick, lambda: scheduler.interval_ms, sleep=fast_sleep, on_error=scheduler.halt
        )
        assert scheduler.start()
        for _ in range(10):
            await asyncio.sleep(0)
        halted = (scheduler.index, scheduler.playing, scheduler.timer.active, synth.events[-1])
        restarted = scheduler.start()
        scheduler.stop()
        return halted, restarted

    halted, restarted = asyncio.run(scenario())
    assert halted == (1, False, False, ("cancel", None))
    assert restarted


def test_stale_playing_state_can_restart():
    scheduler, timer, _ = make_scheduler()
    scheduler.start()
    timer.disarm()
    assert scheduler.start()
    assert timer.arm_calls == 2
