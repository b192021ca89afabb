"""Text shown by the timer panel for a given sequencer state."""

from __future__ import annotations

from dataclasses import dataclass

from hiit.core.progress import format_clock, format_clock_spoken, progress_fraction
from hiit.core.state import Phase, SequencerState


PHASE_LABELS: dict[Phase, str] = {
    "prepare": "Get Ready!",
    "work": "WORK!",
    "rest": "REST",
    "complete": "Workout Complete! 🎉",
}

# CSS class per phase; completion reuses the preparation colours.
PHASE_STYLES: dict[Phase, str] = {
    "prepare": "prepare-phase",
    "work": "work-phase",
    "rest": "rest-phase",
    "complete": "prepare-phase",
}


@dataclass(frozen=True)
class DisplaySnapshot:
    phase_label: str
    phase_style: str
    clock: str
    clock_spoken: str
    progress_info: str
    progress_pct: int
    controls_enabled: bool


def progress_info(state: SequencerState) -> str:
    if state.phase == "prepare":
        return "Starting in..."
    if state.phase == "complete":
        return "Great job!"
    config = state.config
    return (
        f"Cycle {state.cycle} of {config.cycles} • "
        f"Round {state.round} of {config.round_count}"
    )


def build_snapshot(state: SequencerState) -> DisplaySnapshot:
    return DisplaySnapshot(
        phase_label=PHASE_LABELS[state.phase],
        phase_style=PHASE_STYLES[state.phase],
        clock=format_clock(state.remaining_sec),
        clock_spoken=format_clock_spoken(state.remaining_sec),
        progress_info=progress_info(state),
        progress_pct=int(round(progress_fraction(state) * 100)),
        controls_enabled=not state.is_complete,
    )
