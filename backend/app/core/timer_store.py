import json
import logging
import time
from typing import Callable, Dict, Optional

from pydantic import ValidationError

from ..models.timer import TimerState
from ..services.storage import KeyValueStorage

log = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "cookingTimer"


def now_ms() -> int:
    return int(time.time() * 1000)


class TimerStateStore:
    """
    One TimerState per recipe, all kept as a single JSON object under one
    storage key. Bad or missing data always reads back as "no state".
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        storage_key: str = DEFAULT_STORAGE_KEY,
        clock: Callable[[], int] = now_ms,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.clock = clock

    def _load(self) -> Dict[str, dict]:
        raw = self.storage.get_item(self.storage_key)
        if not raw:
            return {}
        try:
            parsed = json.loads(raw)
        except ValueError:
            log.warning(f"Discarding corrupted timer data under '{self.storage_key}'")
            return {}
        if not isinstance(parsed, dict):
            log.warning(f"Timer data under '{self.storage_key}' is not a mapping, discarding it")
            return {}
        return parsed

    def _save(self, states: Dict[str, dict]) -> None:
        self.storage.set_item(self.storage_key, json.dumps(states))

    def get(self, recipe_id: str) -> Optional[TimerState]:
        entry = self._load().get(recipe_id)
        if entry is None:
            return None
        try:
            return TimerState.model_validate(entry)
        except ValidationError as e:
            log.warning(f"Ignoring invalid timer state for '{recipe_id}': {e.error_count()} errors")
            return None

    def set(self, recipe_id: str, state: TimerState) -> None:
        states = self._load()
        states[recipe_id] = state.model_dump(by_alias=True)
        self._save(states)

    def clear(self, recipe_id: str) -> None:
        states = self._load()
        if recipe_id not in states:
            return
        del states[recipe_id]
        if states:
            self._save(states)
        else:
            self.storage.remove_item(self.storage_key)

    def elapsed_ms(self, recipe_id: str) -> int:
        state = self.get(recipe_id)
        if state is None or state.start_time is None:
            return 0
        if state.is_paused and state.paused_at is not None:
            return state.paused_at - state.start_time
        return self.clock() - state.start_time
