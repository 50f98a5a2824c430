import logging
from enum import Enum
from typing import Optional, Sequence, Tuple

from ..models.recipe import TimelineItem
from ..models.timer import ControlVisibility, TimerState, TimerStatus, TimerView
from .timeline import FIRING_THRESHOLD_SEC, compute_display_state
from .timer_store import TimerStateStore

log = logging.getLogger(__name__)


class TimerCommand(str, Enum):
    START = "start"
    PAUSE = "pause"
    RESUME = "resume"
    RESET = "reset"
    VISIBLE = "visible"
    SERVING = "serving"


def control_visibility(status: TimerStatus) -> ControlVisibility:
    if status is TimerStatus.STOPPED:
        return ControlVisibility()
    running = status is TimerStatus.RUNNING
    return ControlVisibility(
        timer_status=True,
        start=False,
        pause=running,
        resume=not running,
        reset=True,
        countdowns=True,
        recipe_details=False,
    )


class TimerSession:
    """
    Start/pause/resume/reset control for one recipe's timer.

    The session holds no timer state of its own; every transition reads and
    writes the store, so several sessions (or a reloaded page) for the same
    recipe agree on where the timer is. Out-of-order commands are no-ops.
    """

    def __init__(
        self,
        recipe_id: str,
        store: TimerStateStore,
        timeline: Sequence[TimelineItem] = (),
        default_serving_size: int = 4,
        firing_threshold_sec: float = FIRING_THRESHOLD_SEC,
    ):
        self.recipe_id = recipe_id
        self.store = store
        self.timeline = list(timeline)
        self.default_serving_size = default_serving_size
        self.firing_threshold_sec = firing_threshold_sec

    @property
    def state(self) -> Optional[TimerState]:
        return self.store.get(self.recipe_id)

    @property
    def status(self) -> TimerStatus:
        state = self.state
        if state is None or state.start_time is None:
            return TimerStatus.STOPPED
        if state.is_paused:
            return TimerStatus.PAUSED
        return TimerStatus.RUNNING

    @property
    def serving_size(self) -> int:
        state = self.state
        if state is not None and state.serving_size:
            return state.serving_size
        return self.default_serving_size

    def start(self, serving_size: Optional[int] = None) -> None:
        if serving_size is not None and serving_size < 1:
            raise ValueError(f"serving size must be at least 1, got {serving_size}")
        state = TimerState(
            start_time=self.store.clock(),
            serving_size=serving_size if serving_size is not None else self.serving_size,
        )
        self.store.set(self.recipe_id, state)
        log.info(f"Timer started for '{self.recipe_id}'")

    def pause(self) -> None:
        state = self.state
        if state is None or state.start_time is None or state.is_paused:
            log.debug(f"Pause ignored for '{self.recipe_id}': timer not running")
            return
        state.is_paused = True
        state.paused_at = self.store.clock()
        self.store.set(self.recipe_id, state)
        log.info(f"Timer paused for '{self.recipe_id}'")

    def resume(self) -> None:
        state = self.state
        if state is None or state.start_time is None or not state.is_paused:
            log.debug(f"Resume ignored for '{self.recipe_id}': timer not paused")
            return
        state.start_time += self.store.clock() - state.paused_at
        state.is_paused = False
        state.paused_at = None
        self.store.set(self.recipe_id, state)
        log.info(f"Timer resumed for '{self.recipe_id}'")

    def reset(self) -> None:
        self.store.clear(self.recipe_id)
        log.info(f"Timer reset for '{self.recipe_id}'")

    def update_serving_size(self, size: int) -> None:
        if size < 1:
            raise ValueError(f"serving size must be at least 1, got {size}")
        state = self.state or TimerState()
        state.serving_size = size
        self.store.set(self.recipe_id, state)

    def view(self) -> TimerView:
        status = self.status
        elapsed = self.store.elapsed_ms(self.recipe_id)
        # minute 0 projected onto the wall clock, so paused time pushes steps later
        started_at = None if status is TimerStatus.STOPPED else self.store.clock() - elapsed
        display = compute_display_state(
            self.timeline,
            elapsed,
            self.firing_threshold_sec,
            started_at,
        )
        return TimerView(
            recipe_id=self.recipe_id,
            status=status,
            serving_size=self.serving_size,
            controls=control_visibility(status),
            display=display,
        )

    def handle(self, command: TimerCommand, arg: Optional[int] = None) -> None:
        if command == TimerCommand.START:
            self.start(arg)
        elif command == TimerCommand.PAUSE:
            self.pause()
        elif command == TimerCommand.RESUME:
            self.resume()
        elif command == TimerCommand.RESET:
            self.reset()
        elif command == TimerCommand.SERVING:
            if arg is None:
                raise ValueError("serving command needs a size")
            self.update_serving_size(arg)
        # VISIBLE only asks for a fresh view, which callers take from view()


def parse_command(text: str) -> Tuple[TimerCommand, Optional[int]]:
    """Parse a client message such as 'pause' or 'serving:6'."""
    name, _, raw_arg = text.strip().lower().partition(":")
    command = TimerCommand(name)
    arg = int(raw_arg) if raw_arg else None
    if arg is not None and command not in (TimerCommand.START, TimerCommand.SERVING):
        raise ValueError(f"'{command.value}' takes no argument")
    if arg is not None and arg < 1:
        raise ValueError(f"invalid serving size in {text!r}")
    if command == TimerCommand.SERVING and arg is None:
        raise ValueError(f"missing serving size in {text!r}")
    return command, arg
