"""Phase sequencing state machine.

Every operation is a pure function from a ``SequencerState`` to a new state plus
the events the transition produced. Hosts deliver ticks and skips one at a time;
nothing here sleeps, schedules or renders.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from hiit.core.events import (
    CountdownUpdated,
    ImminentTransitionWarning,
    PhaseElapsed,
    PhaseStarted,
    SequencerEvent,
    WorkoutCompleted,
)
from hiit.core.state import Phase, RestKind, SequencerState
from hiit.workout.model import PREP_SECONDS, WorkoutConfig


logger = logging.getLogger(__name__)

WARNING_WINDOW_SEC = 3

Transition = tuple[SequencerState, tuple[SequencerEvent, ...]]


class SequencerInvariantError(AssertionError):
    """Raised when a state breaks the sequencer invariants (programming error)."""


def start(config: WorkoutConfig) -> SequencerState:
    return SequencerState(
        config=config,
        phase="prepare",
        cycle=1,
        round=1,
        remaining_sec=PREP_SECONDS,
        phase_total_sec=PREP_SECONDS,
    )


def tick(state: SequencerState) -> Transition:
    """Advance the countdown by one second."""
    if state.is_complete:
        return state, ()
    _check_invariants(state)

    remaining = max(0, state.remaining_sec - 1)
    if remaining > 0:
        events: list[SequencerEvent] = [CountdownUpdated(remaining_sec=remaining)]
        if remaining <= WARNING_WINDOW_SEC:
            events.append(ImminentTransitionWarning(remaining_sec=remaining))
        return replace(state, remaining_sec=remaining), tuple(events)

    return _elapse(replace(state, remaining_sec=0))


def skip(state: SequencerState) -> Transition:
    """Force the current phase to elapse regardless of the time left."""
    if state.is_complete:
        return state, ()
    _check_invariants(state)
    return _elapse(state)


def transition(state: SequencerState) -> Transition:
    """Pick the phase that follows ``state``.

    The rest kind is read from the state rather than re-derived from the round
    number: the rest after round 1 and the rest opening a new cycle both sit at
    ``round == 1``.
    """
    _check_invariants(state)
    return _next_phase(state)


def _next_phase(state: SequencerState) -> Transition:
    config = state.config

    if state.phase == "prepare":
        return _begin_work(state, cycle=state.cycle, round_no=1)

    if state.phase == "work":
        if state.round < config.round_count:
            if config.rest_period_sec > 0:
                return _begin_rest(
                    state, cycle=state.cycle, round_no=state.round, kind="inter_round"
                )
            return _begin_work(state, cycle=state.cycle, round_no=state.round + 1)

        if state.cycle < config.cycles:
            next_cycle = state.cycle + 1
            if config.round_count > 1 and config.rest_period_sec > 0:
                return _begin_rest(state, cycle=next_cycle, round_no=1, kind="inter_cycle")
            return _begin_work(state, cycle=next_cycle, round_no=1)

        return _complete(state)

    if state.phase == "rest":
        if state.rest_kind == "inter_round":
            return _begin_work(state, cycle=state.cycle, round_no=state.round + 1)
        return _begin_work(state, cycle=state.cycle, round_no=1)

    raise SequencerInvariantError(f"No transition out of phase {state.phase!r}")


def plan_phases(config: WorkoutConfig) -> tuple[PhaseStarted, ...]:
    """Return every phase the workout will run through, in order."""
    state = start(config)
    phases: list[PhaseStarted] = [
        PhaseStarted(phase="prepare", cycle=1, round=1, duration_sec=PREP_SECONDS)
    ]
    while not state.is_complete:
        state, events = skip(state)
        phases.extend(event for event in events if isinstance(event, PhaseStarted))
    return tuple(phases)


def planned_duration_sec(config: WorkoutConfig) -> int:
    return sum(phase.duration_sec for phase in plan_phases(config))


def _elapse(state: SequencerState) -> Transition:
    # Callers have already checked the invariants.
    elapsed = PhaseElapsed(phase=state.phase, cycle=state.cycle, round=state.round)
    next_state, events = _next_phase(state)
    return next_state, (elapsed, *events)


def _begin_work(state: SequencerState, *, cycle: int, round_no: int) -> Transition:
    durations = state.config.round_durations_sec
    if not 1 <= round_no <= len(durations):
        raise SequencerInvariantError(
            f"Round {round_no} out of range 1..{len(durations)}"
        )
    duration = durations[round_no - 1]
    return _enter(state, phase="work", cycle=cycle, round_no=round_no, duration=duration)


def _begin_rest(
    state: SequencerState,
    *,
    cycle: int,
    round_no: int,
    kind: RestKind,
) -> Transition:
    return _enter(
        state,
        phase="rest",
        cycle=cycle,
        round_no=round_no,
        duration=state.config.rest_period_sec,
        rest_kind=kind,
    )


def _enter(
    state: SequencerState,
    *,
    phase: Phase,
    cycle: int,
    round_no: int,
    duration: int,
    rest_kind: RestKind | None = None,
) -> Transition:
    logger.debug(
        "phase %s cycle=%d round=%d duration=%ds rest_kind=%s",
        phase,
        cycle,
        round_no,
        duration,
        rest_kind,
    )
    next_state = replace(
        state,
        phase=phase,
        cycle=cycle,
        round=round_no,
        remaining_sec=duration,
        phase_total_sec=duration,
        rest_kind=rest_kind,
    )
    started = PhaseStarted(
        phase=phase,
        cycle=cycle,
        round=round_no,
        duration_sec=duration,
        rest_kind=rest_kind,
    )
    return next_state, (started,)


def _complete(state: SequencerState) -> Transition:
    logger.debug("workout complete after %d cycles", state.cycle)
    done = replace(state, phase="complete", remaining_sec=0, phase_total_sec=0, rest_kind=None)
    return done, (WorkoutCompleted(),)


def _check_invariants(state: SequencerState) -> None:
    config = state.config
    if not 1 <= state.cycle <= config.cycles:
        raise SequencerInvariantError(f"Cycle {state.cycle} out of range 1..{config.cycles}")
    if not 1 <= state.round <= config.round_count:
        raise SequencerInvariantError(
            f"Round {state.round} out of range 1..{config.round_count}"
        )
    if state.remaining_sec < 0:
        raise SequencerInvariantError(f"Negative remaining time {state.remaining_sec}s")
    if state.phase == "rest" and state.rest_kind is None:
        raise SequencerInvariantError("Rest phase without a rest kind")
