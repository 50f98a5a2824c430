"""
Timeline calculations over a process timeline.

Everything here is a pure function of (timeline, elapsed minutes). The
start minute of every item is precomputed upstream and only read here.
"""

import math
from datetime import datetime
from typing import Iterator, List, Optional, Sequence

from ..models.recipe import Action, ParallelBlock, TimelineItem
from ..models.timer import DisplayState, StepDisplay, StepStatus

FIRING_THRESHOLD_SEC = 30.0


def calculate_absolute_time(start_time_ms: int, start_minute: float) -> int:
    return int(start_time_ms + start_minute * 60_000)


def upcoming_steps(timeline: Sequence[TimelineItem], elapsed_minutes: float) -> List[TimelineItem]:
    """Top-level items that have not started yet, earliest first."""
    return sorted(
        (item for item in timeline if item.start_minute > elapsed_minutes),
        key=lambda item: item.start_minute,
    )


def next_step(timeline: Sequence[TimelineItem], elapsed_minutes: float) -> Optional[TimelineItem]:
    upcoming = upcoming_steps(timeline, elapsed_minutes)
    return upcoming[0] if upcoming else None


def current_step(timeline: Sequence[TimelineItem], elapsed_minutes: float) -> Optional[Action]:
    """
    The top-level action whose [start, end) window contains elapsed_minutes.

    When windows overlap the last matching action in timeline order wins.
    Actions inside parallel blocks are not considered.
    """
    current = None
    for item in timeline:
        if not isinstance(item, Action):
            continue
        if item.start_minute <= elapsed_minutes < item.end_minute:
            current = item
    return current


def iter_actions(timeline: Sequence[TimelineItem]) -> Iterator[Action]:
    """Every action in timeline order, descending into parallel blocks."""
    for item in timeline:
        if isinstance(item, ParallelBlock):
            yield from item.actions
        else:
            yield item


def critical_path_steps(timeline: Sequence[TimelineItem]) -> List[Action]:
    steps = [action for action in iter_actions(timeline) if action.is_critical_path]
    return sorted(steps, key=lambda action: action.start_minute)


def format_time(total_seconds: int) -> str:
    total_seconds = int(total_seconds)
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    if hours > 0:
        return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
    return f"{minutes:02d}:{seconds:02d}"


def format_time_of_day(timestamp_ms: int) -> str:
    return datetime.fromtimestamp(timestamp_ms / 1000).strftime("%H:%M")


def _step_display(action: Action, elapsed_minutes: float, started_at_ms: Optional[int]) -> StepDisplay:
    remaining = action.start_minute - elapsed_minutes
    step = StepDisplay(id=action.id, remaining_minutes=remaining)
    if started_at_ms is not None:
        step.starts_at = format_time_of_day(calculate_absolute_time(started_at_ms, action.start_minute))

    # zero-length steps at minute 0 stay visible
    if action.end_minute > 0 and elapsed_minutes > action.end_minute:
        step.hidden = True
        step.classes = ["hidden"]
        return step

    if remaining <= 0:
        step.status = StepStatus.DONE
        step.countdown = "Now"
    else:
        step.status = StepStatus.WAITING
        step.countdown = "T-" + format_time(math.floor(remaining * 60))
    step.classes = [step.status.value]
    return step


def compute_display_state(
    timeline: Sequence[TimelineItem],
    elapsed_ms: int,
    firing_threshold_sec: float = FIRING_THRESHOLD_SEC,
    started_at_ms: Optional[int] = None,
) -> DisplayState:
    """
    Countdown state of every step at `elapsed_ms`. With `started_at_ms` (the
    epoch ms that corresponds to minute 0) each step also gets its wall-clock
    start time.
    """
    elapsed_minutes = elapsed_ms / 60_000
    steps = [
        _step_display(action, elapsed_minutes, started_at_ms) for action in iter_actions(timeline)
    ]

    upcoming = None
    for step in steps:
        if step.remaining_minutes > 0 and (
            upcoming is None or step.remaining_minutes < upcoming.remaining_minutes
        ):
            upcoming = step
    if upcoming is not None:
        upcoming.is_next = True
        upcoming.classes.append("next")
        if upcoming.remaining_minutes * 60 < firing_threshold_sec:
            upcoming.is_firing = True
            upcoming.classes.append("firing")

    current = current_step(timeline, elapsed_minutes)
    following = next_step(timeline, elapsed_minutes)
    return DisplayState(
        elapsed_ms=elapsed_ms,
        elapsed_text=format_time(elapsed_ms // 1000),
        steps=steps,
        current_step_id=current.id if current else None,
        next_step_id=following.id if following else None,
    )
