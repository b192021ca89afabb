"""Countdown arithmetic shared by the terminal and web front ends."""

from __future__ import annotations

from hiit.core.state import SequencerState


def progress_fraction(state: SequencerState) -> float:
    """Fraction of the current phase already elapsed, clamped to [0, 1]."""
    if state.phase == "complete":
        return 1.0
    total = state.phase_total_sec
    if total <= 0:
        return 0.0
    return max(0.0, min(1.0, (total - state.remaining_sec) / total))


def format_clock(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes:02d}:{seconds:02d}"


def format_clock_spoken(total_seconds: int) -> str:
    minutes, seconds = divmod(max(0, total_seconds), 60)
    return f"{minutes} minutes and {seconds} seconds remaining"
