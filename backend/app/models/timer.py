from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import model_validator

from .recipe import CamelModel


class TimerStatus(str, Enum):
    STOPPED = "stopped"
    RUNNING = "running"
    PAUSED = "paused"


class StepStatus(str, Enum):
    WAITING = "waiting"
    DONE = "done"


class TimerState(CamelModel):
    """Persisted progress of one recipe's timer. Timestamps are epoch milliseconds."""

    start_time: Optional[int] = None
    is_paused: bool = False
    paused_at: Optional[int] = None
    serving_size: Optional[int] = None
    current_step_id: Optional[str] = None

    @model_validator(mode="after")
    def _paused_at_matches_flag(self) -> "TimerState":
        if self.is_paused != (self.paused_at is not None):
            raise ValueError("pausedAt must be set exactly when isPaused is true")
        return self


class StepDisplay(CamelModel):
    id: str
    hidden: bool = False
    status: StepStatus = StepStatus.WAITING
    countdown: str = ""
    # local HH:MM, only while the timer has been started
    starts_at: Optional[str] = None
    remaining_minutes: float = 0.0
    is_next: bool = False
    is_firing: bool = False
    classes: List[str] = []


class DisplayState(CamelModel):
    elapsed_ms: int = 0
    elapsed_text: str = "00:00"
    steps: List[StepDisplay] = []
    current_step_id: Optional[str] = None
    next_step_id: Optional[str] = None


class ControlVisibility(CamelModel):
    timer_status: bool = False
    start: bool = True
    pause: bool = False
    resume: bool = False
    reset: bool = False
    countdowns: bool = False
    recipe_details: bool = True


class TimerView(CamelModel):
    recipe_id: str
    status: TimerStatus
    serving_size: int
    controls: ControlVisibility
    display: DisplayState
