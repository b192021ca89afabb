"""Caller-owned workout session publishing sequencer events to listeners."""

from __future__ import annotations

import logging
from dataclasses import replace
from typing import Callable

from hiit.core import sequencer
from hiit.core.events import PhaseStarted, SequencerEvent, WorkoutCompleted
from hiit.core.sequencer import SequencerInvariantError
from hiit.core.state import SequencerState
from hiit.workout.model import WorkoutConfig


logger = logging.getLogger(__name__)

EventListener = Callable[[SequencerEvent], None]


class WorkoutSession:
    def __init__(self, config: WorkoutConfig) -> None:
        self._config = config
        self._state = sequencer.start(config)
        self._listeners: list[EventListener] = []

    @property
    def config(self) -> WorkoutConfig:
        return self._config

    @property
    def state(self) -> SequencerState:
        return self._state

    @property
    def is_complete(self) -> bool:
        return self._state.is_complete

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def start(self) -> None:
        """Reset to the preparation countdown and announce it."""
        self._state = sequencer.start(self._config)
        self._publish(
            (
                PhaseStarted(
                    phase="prepare",
                    cycle=self._state.cycle,
                    round=self._state.round,
                    duration_sec=self._state.phase_total_sec,
                ),
            )
        )

    def tick(self) -> tuple[SequencerEvent, ...]:
        return self._advance(sequencer.tick)

    def skip(self) -> tuple[SequencerEvent, ...]:
        return self._advance(sequencer.skip)

    def _advance(
        self,
        step: Callable[[SequencerState], sequencer.Transition],
    ) -> tuple[SequencerEvent, ...]:
        try:
            self._state, events = step(self._state)
        except SequencerInvariantError:
            logger.error("Sequencer state corrupted, ending workout: %r", self._state, exc_info=True)
            self._state = replace(
                self._state,
                phase="complete",
                remaining_sec=0,
                phase_total_sec=0,
                rest_kind=None,
            )
            events = (WorkoutCompleted(aborted=True),)
        self._publish(events)
        return events

    def _publish(self, events: tuple[SequencerEvent, ...]) -> None:
        for event in events:
            for listener in list(self._listeners):
                listener(event)
