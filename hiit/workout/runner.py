"""Wall-clock driver delivering one tick per second to a workout session."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from hiit.core.session import WorkoutSession


logger = logging.getLogger(__name__)

FinishCallback = Callable[[bool], None]


class WorkoutRunner:
    """Run a session on the current event loop.

    Ticks, skips and pauses all execute on the loop thread, so the session never
    sees two operations at once.
    """

    def __init__(self, tick_interval_sec: float = 1.0) -> None:
        self._tick_interval_sec = tick_interval_sec
        self._session: Optional[WorkoutSession] = None
        self._task: Optional[asyncio.Task[None]] = None
        self._stop_event = asyncio.Event()
        self._resume_event = asyncio.Event()
        self._resume_event.set()
        self._wake_event = asyncio.Event()

    @property
    def is_running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def is_paused(self) -> bool:
        return self.is_running and not self._resume_event.is_set()

    @property
    def session(self) -> WorkoutSession | None:
        return self._session

    async def start(self, session: WorkoutSession, on_finish: FinishCallback) -> None:
        if self.is_running:
            raise RuntimeError("Workout already running")

        self._session = session
        self._stop_event = asyncio.Event()
        self._resume_event = asyncio.Event()
        self._resume_event.set()
        self._wake_event = asyncio.Event()
        session.start()
        self._task = asyncio.create_task(self._run(session, on_finish))

    async def stop(self) -> None:
        if not self.is_running:
            return

        self._stop_event.set()
        self._resume_event.set()
        self._wake_event.set()
        assert self._task is not None
        await self._task
        self._task = None

    def pause(self) -> None:
        if self.is_running:
            self._resume_event.clear()
            self._wake_event.set()

    def resume(self) -> None:
        self._resume_event.set()

    def toggle_pause(self) -> bool:
        """Flip pause state; returns True when now paused."""
        if self.is_paused:
            self.resume()
        else:
            self.pause()
        return self.is_paused

    def skip(self) -> None:
        if self._session is None or not self.is_running:
            return
        self._session.skip()
        # A skipped-to phase always starts running, even from a paused one.
        self._resume_event.set()
        self._wake_event.set()

    async def _run(self, session: WorkoutSession, on_finish: FinishCallback) -> None:
        completed = False
        try:
            while not session.is_complete and not self._stop_event.is_set():
                await self._resume_event.wait()
                if self._stop_event.is_set() or session.is_complete:
                    break
                # Pause, skip and stop cut the current second short; the next
                # tick then lands a full interval after the loop comes back.
                self._wake_event.clear()
                try:
                    await asyncio.wait_for(
                        self._wake_event.wait(), timeout=self._tick_interval_sec
                    )
                except asyncio.TimeoutError:
                    session.tick()

            completed = session.is_complete and not self._stop_event.is_set()
            logger.info("workout finished completed=%s", completed)
        finally:
            on_finish(completed)
