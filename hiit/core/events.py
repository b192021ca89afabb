"""Events emitted by the phase sequencer."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from hiit.core.state import Phase, RestKind


@dataclass(frozen=True)
class PhaseStarted:
    phase: Phase
    cycle: int
    round: int
    duration_sec: int
    rest_kind: RestKind | None = None


@dataclass(frozen=True)
class CountdownUpdated:
    remaining_sec: int


@dataclass(frozen=True)
class ImminentTransitionWarning:
    remaining_sec: int


@dataclass(frozen=True)
class PhaseElapsed:
    phase: Phase
    cycle: int
    round: int


@dataclass(frozen=True)
class WorkoutCompleted:
    # True when the session was forced to complete by a broken state.
    aborted: bool = False


SequencerEvent = Union[
    PhaseStarted,
    CountdownUpdated,
    ImminentTransitionWarning,
    PhaseElapsed,
    WorkoutCompleted,
]
