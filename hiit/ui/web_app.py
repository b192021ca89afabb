"""NiceGUI web UI for the HIIT timer."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from nicegui import ui

from hiit.core.events import PhaseStarted, SequencerEvent, WorkoutCompleted
from hiit.ui.audio import AudioCue, web_audio_script
from hiit.ui.controller import UIController
from hiit.workout.model import (
    CYCLES_MAX,
    CYCLES_MIN,
    DEFAULT_CONFIG,
    DEFAULT_ROUND_DURATION_SEC,
    REST_PERIOD_MAX_SEC,
    ROUND_DURATION_MAX_SEC,
    WorkoutConfig,
)
from hiit.workout.parser import WorkoutConfigError, validate_config


logger = logging.getLogger(__name__)

REFRESH_SEC = 0.2


@dataclass
class WebState:
    pending_cues: list[AudioCue] = field(default_factory=list)
    last_event: SequencerEvent | None = None


def run_web_ui(
    *,
    host: str = "127.0.0.1",
    port: int = 8088,
    sound_enabled: bool = True,
    initial_config: WorkoutConfig = DEFAULT_CONFIG,
) -> int:
    state = WebState()
    controller = UIController(
        cue_sink=lambda cues: state.pending_cues.extend(cues),
        sound_enabled=sound_enabled,
    )
    round_inputs: list[ui.number] = []

    ui.add_head_html(
        """
        <style>
          body { background: #0b1220; color: #e5e7eb; font-family: Arial, sans-serif; }
          .hiit-card { background: #0f1b35; border-radius: 14px; min-width: 360px; }
          .current-phase { font-size: 2rem; font-weight: 700; }
          .prepare-phase { color: #f59e0b; }
          .work-phase { color: #ef4444; }
          .rest-phase { color: #22c55e; }
          .hiit-clock { font-size: 4rem; font-variant-numeric: tabular-nums; }
        </style>
        """
    )

    with ui.card().classes("hiit-card self-center") as config_panel:
        ui.label("HIIT Timer").classes("text-xl font-semibold")
        cycles_input = ui.number(
            "Cycles", value=initial_config.cycles, min=CYCLES_MIN, max=CYCLES_MAX
        )
        rest_input = ui.number(
            "Rest period (sec)",
            value=initial_config.rest_period_sec,
            min=0,
            max=REST_PERIOD_MAX_SEC,
        )
        ui.label("Rounds (sec)").classes("text-sm")
        rounds_container = ui.column()
        with ui.row():
            add_round_btn = ui.button("Add round")
            start_btn = ui.button("Start workout").props("color=primary")
        with ui.row().classes("items-center"):
            sound_toggle = ui.switch("Sound", value=sound_enabled)
            test_audio_btn = ui.button("Test audio").props("outline")

    with ui.card().classes("hiit-card self-center") as timer_panel:
        phase_label = ui.label("Get Ready!").classes("current-phase prepare-phase")
        clock_label = ui.label("00:00").classes("hiit-clock")
        info_label = ui.label("Cycle 1 of 1 • Round 1 of 1").classes("text-sm")
        progress_bar = ui.linear_progress(value=0, show_value=False)
        with ui.row():
            pause_btn = ui.button("Pause")
            skip_btn = ui.button("Skip")
            reset_btn = ui.button("Reset").props("outline")

    def add_round(duration: int = DEFAULT_ROUND_DURATION_SEC) -> None:
        with rounds_container:
            with ui.row().classes("items-center") as row:
                number = ui.number(
                    f"Round {len(round_inputs) + 1}",
                    value=duration,
                    min=0,
                    max=ROUND_DURATION_MAX_SEC,
                )
                ui.button("×", on_click=lambda: remove_round(row, number)).props("flat dense")
        round_inputs.append(number)

    def remove_round(row: ui.row, number: ui.number) -> None:
        if len(round_inputs) <= 1:
            ui.notify("You need at least one round", color="negative")
            return
        round_inputs.remove(number)
        rounds_container.remove(row)

    def show_config_panel() -> None:
        config_panel.set_visibility(True)
        timer_panel.set_visibility(False)

    def show_timer_panel() -> None:
        config_panel.set_visibility(False)
        timer_panel.set_visibility(True)

    def on_event(event: SequencerEvent) -> None:
        state.last_event = event
        if isinstance(event, PhaseStarted):
            logger.debug("phase started %s", event)

    def on_finish(completed: bool) -> None:
        logger.info("workout ended completed=%s", completed)

    async def on_start() -> None:
        try:
            config = validate_config(
                cycles_input.value,
                rest_input.value,
                [number.value for number in round_inputs],
            )
        except WorkoutConfigError as exc:
            ui.notify(str(exc), color="negative")
            return
        state.last_event = None
        pause_btn.text = "Pause"
        show_timer_panel()
        await controller.start_workout(config, on_event=on_event, on_finish=on_finish)
        refresh_ui()

    def on_pause() -> None:
        paused = controller.toggle_pause()
        pause_btn.text = "Resume" if paused else "Pause"

    def on_skip() -> None:
        controller.skip()
        pause_btn.text = "Pause"
        refresh_ui()

    async def on_reset() -> None:
        await controller.reset()
        state.pending_cues.clear()
        show_config_panel()

    def on_sound_toggle() -> None:
        controller.sound_enabled = bool(sound_toggle.value)

    def refresh_ui() -> None:
        if state.pending_cues:
            cues = tuple(state.pending_cues)
            state.pending_cues.clear()
            ui.run_javascript(web_audio_script(cues))

        snapshot = controller.snapshot()
        if snapshot is None:
            return
        phase_label.text = snapshot.phase_label
        phase_label.classes(replace=f"current-phase {snapshot.phase_style}")
        clock_label.text = snapshot.clock
        clock_label.props(f'aria-label="{snapshot.clock_spoken}"')
        info_label.text = snapshot.progress_info
        progress_bar.value = snapshot.progress_pct / 100
        pause_btn.set_visibility(snapshot.controls_enabled)
        skip_btn.set_visibility(snapshot.controls_enabled)
        if isinstance(state.last_event, WorkoutCompleted) and state.last_event.aborted:
            info_label.text = "Workout stopped after an internal error"

    for duration in initial_config.round_durations_sec:
        add_round(duration)

    add_round_btn.on_click(lambda: add_round())
    start_btn.on_click(on_start)
    pause_btn.on_click(on_pause)
    skip_btn.on_click(on_skip)
    reset_btn.on_click(on_reset)
    sound_toggle.on_value_change(lambda _: on_sound_toggle())
    test_audio_btn.on_click(controller.test_audio)

    show_config_panel()
    ui.timer(REFRESH_SEC, refresh_ui)
    ui.run(host=host, port=port, reload=False, title="HIIT Timer")
    return 0
