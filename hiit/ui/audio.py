"""Audio cues announcing countdown warnings, phase boundaries and completion."""

from __future__ import annotations

from dataclasses import dataclass

from hiit.core.events import (
    ImminentTransitionWarning,
    PhaseElapsed,
    SequencerEvent,
    WorkoutCompleted,
)


@dataclass(frozen=True)
class AudioCue:
    frequency_hz: int
    duration_ms: int


WARNING_CUE = AudioCue(frequency_hz=600, duration_ms=100)
BOUNDARY_CUE = AudioCue(frequency_hz=800, duration_ms=200)
COMPLETION_CUE = AudioCue(frequency_hz=1000, duration_ms=500)
TEST_CUE = AudioCue(frequency_hz=600, duration_ms=300)
COMPLETION_REPEAT = 3


def cues_for_event(event: SequencerEvent) -> tuple[AudioCue, ...]:
    if isinstance(event, ImminentTransitionWarning):
        return (WARNING_CUE,)
    if isinstance(event, PhaseElapsed):
        return (BOUNDARY_CUE,)
    if isinstance(event, WorkoutCompleted):
        return (COMPLETION_CUE,) * COMPLETION_REPEAT
    return ()


def web_audio_script(cues: tuple[AudioCue, ...], gain: float = 0.2) -> str:
    """JavaScript playing ``cues`` back to back through the Web Audio API."""
    if not cues:
        return ""
    tones = ", ".join(f"[{cue.frequency_hz}, {cue.duration_ms}]" for cue in cues)
    return f"""
    (() => {{
      const ctx = new (window.AudioContext || window.webkitAudioContext)();
      const tones = [{tones}];
      let at = ctx.currentTime;
      for (const [freq, ms] of tones) {{
        const osc = ctx.createOscillator();
        const gain = ctx.createGain();
        osc.type = 'sine';
        osc.frequency.value = freq;
        gain.gain.setValueAtTime({gain}, at);
        gain.gain.exponentialRampToValueAtTime(0.01, at + ms / 1000);
        osc.connect(gain);
        gain.connect(ctx.destination);
        osc.start(at);
        osc.stop(at + ms / 1000);
        at += ms / 1000 + 0.05;
      }}
      setTimeout(() => ctx.close(), (at - ctx.currentTime) * 1000 + 100);
    }})();
    """
