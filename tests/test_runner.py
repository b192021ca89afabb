from __future__ import annotations

import asyncio

import pytest

from hiit.core.events import PhaseStarted, SequencerEvent, WorkoutCompleted
from hiit.core.session import WorkoutSession
from hiit.ui.audio import AudioCue, COMPLETION_CUE
from hiit.ui.controller import UIController
from hiit.workout.model import PREP_SECONDS, WorkoutConfig
from hiit.workout.runner import WorkoutRunner


TICK = 0.01
CONFIG = WorkoutConfig(cycles=2, rest_period_sec=2, round_durations_sec=(3, 1))


async def _wait_for(flag: list[bool], timeout: float = 5.0) -> None:
    async def _poll() -> None:
        while not flag:
            await asyncio.sleep(TICK)

    await asyncio.wait_for(_poll(), timeout=timeout)


def test_runner_completes_workout() -> None:
    async def _run() -> None:
        runner = WorkoutRunner(tick_interval_sec=TICK)
        session = WorkoutSession(CONFIG)
        events: list[SequencerEvent] = []
        session.subscribe(events.append)
        finishes: list[bool] = []

        await runner.start(session, finishes.append)
        assert runner.is_running
        await _wait_for(finishes)

        assert finishes == [True]
        assert session.is_complete
        assert events[0] == PhaseStarted(phase="prepare", cycle=1, round=1, duration_sec=PREP_SECONDS)
        assert events[-1] == WorkoutCompleted()
        assert not runner.is_running

    asyncio.run(_run())


def test_runner_rejects_second_start() -> None:
    async def _run() -> None:
        runner = WorkoutRunner(tick_interval_sec=TICK)
        await runner.start(WorkoutSession(CONFIG), lambda _done: None)
        with pytest.raises(RuntimeError):
            await runner.start(WorkoutSession(CONFIG), lambda _done: None)
        await runner.stop()

    asyncio.run(_run())


def test_runner_pause_resume_and_stop() -> None:
    async def _run() -> None:
        runner = WorkoutRunner(tick_interval_sec=TICK)
        session = WorkoutSession(WorkoutConfig(cycles=1, rest_period_sec=0, round_durations_sec=(60,)))
        finishes: list[bool] = []
        await runner.start(session, finishes.append)

        assert runner.toggle_pause() is True
        await asyncio.sleep(TICK * 3)
        frozen = session.state
        await asyncio.sleep(TICK * 10)
        assert session.state == frozen
        assert runner.is_paused

        assert runner.toggle_pause() is False
        await asyncio.sleep(TICK * 5)
        assert session.state != frozen

        await runner.stop()
        assert finishes == [False]
        assert not runner.is_running

    asyncio.run(_run())


def test_runner_skip_resumes_and_can_finish() -> None:
    async def _run() -> None:
        runner = WorkoutRunner(tick_interval_sec=1.0)
        session = WorkoutSession(WorkoutConfig(cycles=1, rest_period_sec=0, round_durations_sec=(30,)))
        finishes: list[bool] = []
        await runner.start(session, finishes.append)
        runner.pause()

        runner.skip()
        assert session.state.phase == "work"
        assert not runner.is_paused

        runner.skip()
        assert session.is_complete
        await _wait_for(finishes)
        assert finishes == [True]

    asyncio.run(_run())


def test_controller_routes_cues_and_snapshots() -> None:
    async def _run() -> None:
        played: list[tuple[AudioCue, ...]] = []
        controller = UIController(cue_sink=played.append, tick_interval_sec=TICK)
        finishes: list[bool] = []
        phases: list[str] = []

        def on_event(event: SequencerEvent) -> None:
            if isinstance(event, PhaseStarted):
                phases.append(event.phase)

        assert controller.snapshot() is None
        await controller.start_workout(CONFIG, on_event=on_event, on_finish=finishes.append)
        snapshot = controller.snapshot()
        assert snapshot is not None
        assert snapshot.phase_label == "Get Ready!"

        await _wait_for(finishes)
        assert finishes == [True]
        assert phases == ["prepare", "work", "rest", "work", "rest", "work", "rest", "work"]
        assert played[-1] == (COMPLETION_CUE,) * 3

        await controller.reset()
        assert controller.snapshot() is None

    asyncio.run(_run())


def test_controller_respects_sound_toggle() -> None:
    async def _run() -> None:
        played: list[tuple[AudioCue, ...]] = []
        controller = UIController(cue_sink=played.append, sound_enabled=False, tick_interval_sec=TICK)
        finishes: list[bool] = []

        await controller.start_workout(CONFIG, on_event=lambda _e: None, on_finish=finishes.append)
        await _wait_for(finishes)
        assert played == []

        controller.test_audio()
        assert len(played) == 1

    asyncio.run(_run())


def test_runner_resume_waits_a_full_interval_before_ticking() -> None:
    async def _run() -> None:
        interval = 0.3
        runner = WorkoutRunner(tick_interval_sec=interval)
        session = WorkoutSession(WorkoutConfig(cycles=1, rest_period_sec=0, round_durations_sec=(60,)))
        await runner.start(session, lambda _done: None)

        # Pause partway through the first second, long enough for it to be overdue.
        await asyncio.sleep(interval / 3)
        runner.pause()
        await asyncio.sleep(interval * 2)
        frozen = session.state
        assert frozen.remaining_sec == PREP_SECONDS

        runner.resume()
        await asyncio.sleep(interval / 3)
        assert session.state == frozen

        await asyncio.sleep(interval)
        assert session.state.remaining_sec == PREP_SECONDS - 1

        await runner.stop()

    asyncio.run(_run())


def test_runner_skip_restarts_the_second() -> None:
    async def _run() -> None:
        interval = 0.3
        runner = WorkoutRunner(tick_interval_sec=interval)
        session = WorkoutSession(WorkoutConfig(cycles=1, rest_period_sec=0, round_durations_sec=(60,)))
        await runner.start(session, lambda _done: None)

        await asyncio.sleep(interval * 2 / 3)
        runner.skip()
        assert session.state.remaining_sec == 60
        await asyncio.sleep(interval / 2)
        assert session.state.remaining_sec == 60

        await asyncio.sleep(interval)
        assert session.state.remaining_sec == 59

        await runner.stop()

    asyncio.run(_run())


def test_controller_snapshot_hides_controls_once_workout_ends() -> None:
    async def _run() -> None:
        controller = UIController(tick_interval_sec=TICK)
        finishes: list[bool] = []

        await controller.start_workout(
            WorkoutConfig(cycles=1, rest_period_sec=0, round_durations_sec=(60,)),
            on_event=lambda _e: None,
            on_finish=finishes.append,
        )
        snapshot = controller.snapshot()
        assert snapshot is not None and snapshot.controls_enabled

        # Stopping mid-workout drops the session instead of leaving live controls.
        await controller.reset()
        assert finishes == [False]
        assert controller.snapshot() is None

        completions: list[bool] = []
        await controller.start_workout(CONFIG, on_event=lambda _e: None, on_finish=completions.append)
        await _wait_for(completions)
        assert completions == [True]
        snapshot = controller.snapshot()
        assert snapshot is not None
        assert not snapshot.controls_enabled
        assert not controller.workout_running

    asyncio.run(_run())
