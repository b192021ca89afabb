"""Sequencer state for one workout session."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from hiit.workout.model import WorkoutConfig


Phase = Literal["prepare", "work", "rest", "complete"]
RestKind = Literal["inter_round", "inter_cycle"]


@dataclass(frozen=True)
class SequencerState:
    config: WorkoutConfig
    phase: Phase
    cycle: int
    round: int
    remaining_sec: int
    phase_total_sec: int
    # Only set while phase == "rest".
    rest_kind: RestKind | None = None

    @property
    def is_complete(self) -> bool:
        return self.phase == "complete"
