from functools import lru_cache
from pathlib import Path

from fastapi import Depends, HTTPException

from ..core.config import Settings, get_settings
from ..core.state_machine import TimerSession
from ..core.timer_store import TimerStateStore
from ..services.process_loader import ProcessLoader, ProcessNotFound
from ..services.storage import FileStorage, KeyValueStorage, MemoryStorage


@lru_cache()
def get_storage() -> KeyValueStorage:
    settings = get_settings()
    if settings.storage_path:
        return FileStorage(Path(settings.storage_path))
    return MemoryStorage()


def get_store(
    settings: Settings = Depends(get_settings),
    storage: KeyValueStorage = Depends(get_storage),
) -> TimerStateStore:
    return TimerStateStore(storage, settings.storage_key)


def get_loader(settings: Settings = Depends(get_settings)) -> ProcessLoader:
    return ProcessLoader(Path(settings.processes_path))


def open_session(
    slug: str,
    settings: Settings,
    store: TimerStateStore,
    loader: ProcessLoader,
) -> TimerSession:
    process = loader.get(slug)
    return TimerSession(
        slug,
        store,
        process.timeline,
        default_serving_size=settings.default_serving_size,
        firing_threshold_sec=settings.firing_threshold_sec,
    )


def get_session(
    slug: str,
    settings: Settings = Depends(get_settings),
    store: TimerStateStore = Depends(get_store),
    loader: ProcessLoader = Depends(get_loader),
) -> TimerSession:
    try:
        return open_session(slug, settings, store, loader)
    except ProcessNotFound:
        raise HTTPException(status_code=404, detail=f"Unknown recipe '{slug}'")
