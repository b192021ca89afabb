"""Async controller shared by the terminal and web front ends."""

from __future__ import annotations

from typing import Callable

from hiit.core.events import SequencerEvent
from hiit.core.session import WorkoutSession
from hiit.ui.audio import AudioCue, TEST_CUE, cues_for_event
from hiit.ui.display import DisplaySnapshot, build_snapshot
from hiit.workout.model import WorkoutConfig
from hiit.workout.runner import WorkoutRunner


CueSink = Callable[[tuple[AudioCue, ...]], None]
EventCallback = Callable[[SequencerEvent], None]


class UIController:
    def __init__(
        self,
        cue_sink: CueSink | None = None,
        sound_enabled: bool = True,
        tick_interval_sec: float = 1.0,
    ) -> None:
        self._cue_sink = cue_sink
        self._runner = WorkoutRunner(tick_interval_sec=tick_interval_sec)
        self._session: WorkoutSession | None = None
        self._unsubscribe: Callable[[], None] | None = None
        self.sound_enabled = sound_enabled

    async def start_workout(
        self,
        config: WorkoutConfig,
        on_event: EventCallback,
        on_finish: Callable[[bool], None],
    ) -> None:
        await self.reset()
        session = WorkoutSession(config)

        def _on_event(event: SequencerEvent) -> None:
            self._play(cues_for_event(event))
            on_event(event)

        self._unsubscribe = session.subscribe(_on_event)
        self._session = session
        await self._runner.start(session, on_finish)

    async def reset(self) -> None:
        await self._runner.stop()
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
        self._session = None

    def toggle_pause(self) -> bool:
        return self._runner.toggle_pause()

    def skip(self) -> None:
        self._runner.skip()

    def test_audio(self) -> None:
        self._play((TEST_CUE,), force=True)

    def snapshot(self) -> DisplaySnapshot | None:
        if self._session is None:
            return None
        return build_snapshot(self._session.state)

    @property
    def workout_running(self) -> bool:
        return self._runner.is_running

    @property
    def paused(self) -> bool:
        return self._runner.is_paused

    def _play(self, cues: tuple[AudioCue, ...], force: bool = False) -> None:
        if not cues or self._cue_sink is None:
            return
        if self.sound_enabled or force:
            self._cue_sink(cues)
