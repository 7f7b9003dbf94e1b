import threading
import time
import unittest
from typing import Callable

from speaking_timer.service import TimerManager, TimerSnapshot


class _ManualTickHandle:
    def __init__(self, callback: Callable[[], None]):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class _ManualScheduler:
    """Scheduler whose ticks fire only when the test asks for them."""

    def __init__(self):
        self.handles: list[_ManualTickHandle] = []
        self.intervals: list[tuple[float, bool]] = []

    def schedule(self, callback, *, interval_seconds, fire_immediately=True):
        handle = _ManualTickHandle(callback)
        self.handles.append(handle)
        self.intervals.append((interval_seconds, fire_immediately))
        return handle

    @property
    def active(self) -> list[_ManualTickHandle]:
        return [handle for handle in self.handles if not handle.cancelled]

    def tick(self, count: int = 1) -> None:
        for _ in range(count):
            for handle in self.active:
                handle.callback()


class _RecordingSpeechSink:
    def __init__(self, busy: bool = False):
        self.busy = busy
        self.phrases: list[str] = []

    def is_busy(self) -> bool:
        return self.busy

    def speak(self, text: str) -> None:
        self.phrases.append(text)


def _build_timer(**kwargs):
    scheduler = _ManualScheduler()
    speech = _RecordingSpeechSink()
    timer = TimerManager(scheduler=scheduler, speech=speech, **kwargs)
    return timer, scheduler, speech


class TimerManagerTests(unittest.TestCase):
    def test_timer_starts_correctly(self) -> None:
        timer, scheduler, _ = _build_timer()

        result = timer.start()

        self.assertTrue(result.accepted)
        self.assertEqual("started", result.reason)
        self.assertTrue(timer.is_running)
        self.assertEqual([(1.0, True)], scheduler.intervals)

    def test_second_start_is_noop_without_second_tick_source(self) -> None:
        timer, scheduler, _ = _build_timer()
        timer.start()

        result = timer.start()

        self.assertFalse(result.accepted)
        self.assertEqual("already_running", result.reason)
        self.assertTrue(timer.is_running)
        self.assertEqual(1, len(scheduler.handles))

    def test_timer_pauses_correctly(self) -> None:
        timer, scheduler, _ = _build_timer()
        timer.start()

        result = timer.pause()

        self.assertTrue(result.accepted)
        self.assertFalse(timer.is_running)
        self.assertTrue(scheduler.handles[0].cancelled)

    def test_pause_is_idempotent(self) -> None:
        timer, _, _ = _build_timer()
        timer.start()
        timer.update_time(12)
        timer.pause()

        result = timer.pause()

        self.assertFalse(result.accepted)
        self.assertEqual("not_running", result.reason)
        self.assertFalse(timer.is_running)
        self.assertEqual(12, timer.elapsed_seconds)

    def test_timer_resets_correctly(self) -> None:
        timer, _, _ = _build_timer()
        timer.start()
        timer.update_time(45)

        timer.reset()

        self.assertEqual(0, timer.minutes)
        self.assertEqual(0, timer.seconds)
        self.assertFalse(timer.is_running)

    def test_reset_from_idle_yields_zero(self) -> None:
        timer, _, _ = _build_timer()
        timer.update_time(75)

        result = timer.reset()

        self.assertTrue(result.accepted)
        self.assertEqual(TimerSnapshot(elapsed_seconds=0, running=False), result.snapshot)

    def test_timer_stops_after_one_hour(self) -> None:
        timer, scheduler, speech = _build_timer()
        timer.start()

        result = timer.update_time(60 * 60)

        self.assertFalse(timer.is_running)
        self.assertEqual("auto_stopped", result.reason)
        self.assertTrue(scheduler.handles[0].cancelled)
        self.assertEqual(["60 minutes"], speech.phrases)

    def test_one_second_before_the_hour_keeps_running(self) -> None:
        timer, _, _ = _build_timer()
        timer.start()

        timer.update_time(60 * 60 - 1)

        self.assertTrue(timer.is_running)

    def test_forty_five_seconds_projection(self) -> None:
        timer, _, speech = _build_timer()
        timer.start()

        timer.update_time(45)

        self.assertEqual(0, timer.minutes)
        self.assertEqual(45, timer.seconds)
        self.assertEqual([], speech.phrases)

    def test_thirty_seconds_announces_half_minute_only(self) -> None:
        timer, _, speech = _build_timer()
        timer.start()

        timer.update_time(30)

        self.assertEqual([" and thirty seconds"], speech.phrases)
        self.assertTrue(speech.phrases[0].endswith(" and thirty seconds"))

    def test_ninety_seconds_announces_minute_and_half(self) -> None:
        timer, _, speech = _build_timer()
        timer.start()

        timer.update_time(90)

        self.assertEqual(["1 minute and thirty seconds"], speech.phrases)

    def test_minute_boundaries_use_plural(self) -> None:
        timer, _, speech = _build_timer()
        timer.start()

        timer.update_time(60)
        timer.update_time(120)

        self.assertEqual(["1 minute", "2 minutes"], speech.phrases)

    def test_busy_speech_sink_drops_announcement(self) -> None:
        timer, _, speech = _build_timer()
        speech.busy = True
        timer.start()

        timer.update_time(60)
        speech.busy = False
        timer.update_time(61)

        self.assertEqual([], speech.phrases)

    def test_update_time_projection_is_repeatable(self) -> None:
        timer, _, speech = _build_timer()

        first = timer.update_time(150).snapshot
        second = timer.update_time(150).snapshot

        self.assertEqual(first, second)
        self.assertEqual((2, 30), (second.minutes, second.seconds))
        self.assertEqual(2, len(speech.phrases))

    def test_ticks_increment_elapsed_seconds(self) -> None:
        timer, scheduler, _ = _build_timer()
        timer.start()

        scheduler.tick(5)

        self.assertEqual(5, timer.elapsed_seconds)
        self.assertTrue(timer.is_running)

    def test_ticks_announce_every_thirty_seconds(self) -> None:
        timer, scheduler, speech = _build_timer()
        timer.start()

        scheduler.tick(90)

        self.assertEqual(
            [" and thirty seconds", "1 minute", "1 minute and thirty seconds"],
            speech.phrases,
        )

    def test_ticks_auto_stop_at_one_hour(self) -> None:
        timer, scheduler, speech = _build_timer()
        timer.start()

        scheduler.tick(60 * 60 + 5)

        self.assertFalse(timer.is_running)
        self.assertEqual(60 * 60, timer.elapsed_seconds)
        self.assertEqual(120, len(speech.phrases))

    def test_late_tick_after_pause_is_ignored(self) -> None:
        timer, scheduler, _ = _build_timer()
        timer.start()
        scheduler.tick(3)
        stale_handle = scheduler.handles[0]
        timer.pause()

        stale_handle.callback()

        self.assertEqual(3, timer.elapsed_seconds)
        self.assertFalse(timer.is_running)

    def test_late_tick_from_previous_run_is_ignored(self) -> None:
        timer, scheduler, _ = _build_timer()
        timer.start()
        stale_handle = scheduler.handles[0]
        timer.pause()
        timer.start()

        stale_handle.callback()
        scheduler.tick()

        self.assertEqual(1, timer.elapsed_seconds)

    def test_pause_then_start_resumes_elapsed(self) -> None:
        timer, scheduler, _ = _build_timer()
        timer.start()
        scheduler.tick(10)
        timer.pause()
        timer.start()
        scheduler.tick(2)

        self.assertEqual(12, timer.elapsed_seconds)
        self.assertEqual(2, len(scheduler.handles))

    def test_listener_receives_each_change(self) -> None:
        snapshots: list[TimerSnapshot] = []
        timer, scheduler, _ = _build_timer(on_change=snapshots.append)

        timer.start()
        scheduler.tick()
        timer.pause()
        timer.pause()
        timer.reset()

        self.assertEqual(
            [
                TimerSnapshot(elapsed_seconds=0, running=True),
                TimerSnapshot(elapsed_seconds=1, running=True),
                TimerSnapshot(elapsed_seconds=1, running=False),
                TimerSnapshot(elapsed_seconds=0, running=False),
            ],
            snapshots,
        )

    def test_failing_listener_does_not_break_timer(self) -> None:
        def listener(snapshot: TimerSnapshot) -> None:
            raise RuntimeError("display gone")

        timer, scheduler, _ = _build_timer(on_change=listener)
        with self.assertLogs("timer", level="ERROR"):
            timer.start()
            scheduler.tick()

        self.assertEqual(1, timer.elapsed_seconds)

    def test_listener_never_ends_on_a_stale_snapshot(self) -> None:
        seen: list[TimerSnapshot] = []
        tick_delivered = threading.Event()
        release_tick = threading.Event()

        def listener(snapshot: TimerSnapshot) -> None:
            seen.append(snapshot)
            if snapshot == TimerSnapshot(elapsed_seconds=1, running=True):
                tick_delivered.set()
                release_tick.wait(timeout=5.0)

        timer, scheduler, _ = _build_timer(on_change=listener)
        timer.start()

        tick_thread = threading.Thread(target=scheduler.tick)
        tick_thread.start()
        self.assertTrue(tick_delivered.wait(timeout=2.0))

        reset_thread = threading.Thread(target=timer.reset)
        reset_thread.start()
        deadline = time.monotonic() + 2.0
        while timer.elapsed_seconds != 0 and time.monotonic() < deadline:
            time.sleep(0.01)
        self.assertEqual(0, timer.elapsed_seconds)

        release_tick.set()
        tick_thread.join(timeout=2.0)
        reset_thread.join(timeout=2.0)

        self.assertEqual(TimerSnapshot(elapsed_seconds=0, running=False), seen[-1])

    def test_notification_older_than_last_delivered_is_dropped(self) -> None:
        seen: list[TimerSnapshot] = []
        timer, _, _ = _build_timer(on_change=seen.append)

        timer.update_time(5)
        timer._notify(TimerSnapshot(elapsed_seconds=4, running=False), revision=1)

        self.assertEqual([TimerSnapshot(elapsed_seconds=5, running=False)], seen)

    def test_speak_time_skips_empty_phrase(self) -> None:
        timer, _, speech = _build_timer()
        timer.update_time(15)

        self.assertFalse(timer.speak_time())
        self.assertEqual([], speech.phrases)


if __name__ == "__main__":
    unittest.main()
