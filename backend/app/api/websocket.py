from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from starlette.concurrency import run_in_threadpool
from starlette.websockets import WebSocketState
import logging

from ..core.config import Settings, get_settings
from ..core.state_machine import TimerCommand, TimerSession, parse_command
from ..core.timer_manager import Ticker
from ..core.timer_store import TimerStateStore
from ..models.timer import TimerStatus
from ..services.process_loader import ProcessLoader, ProcessNotFound
from .deps import get_loader, get_store, open_session

log = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1")


def _apply(session: TimerSession, command: TimerCommand, arg) -> TimerStatus:
    session.handle(command, arg)
    return session.status


async def drive_session(ws: WebSocket, session: TimerSession, ticker: Ticker, push) -> None:
    """Apply client commands to the session and keep the ticker in step with its status."""
    while True:
        text = await ws.receive_text()
        try:
            command, arg = parse_command(text)
        except ValueError:
            log.warning(f"Invalid timer message: '{text[:50]}'")
            await ws.send_json({"error": f"Invalid command: {text[:50]}"})
            continue

        # the store may sit on disk, so keep its reads and writes off the event loop
        status = await run_in_threadpool(_apply, session, command, arg)
        if status is TimerStatus.RUNNING:
            if not ticker.running or command in (TimerCommand.START, TimerCommand.RESUME):
                ticker.start()
            else:
                await push()
        else:
            ticker.stop()
            await push()


@router.websocket("/recipes/{slug}/ws")
async def timer_websocket(
    ws: WebSocket,
    slug: str,
    settings: Settings = Depends(get_settings),
    store: TimerStateStore = Depends(get_store),
    loader: ProcessLoader = Depends(get_loader),
):
    await ws.accept()
    try:
        session = await run_in_threadpool(open_session, slug, settings, store, loader)
    except ProcessNotFound:
        log.warning(f"WebSocket opened for unknown recipe '{slug}'")
        await ws.send_json({"error": f"Unknown recipe '{slug}'"})
        await ws.close(code=4404)
        return

    async def push():
        view = await run_in_threadpool(session.view)
        if ws.application_state == WebSocketState.CONNECTED:
            await ws.send_json(view.model_dump(mode="json", by_alias=True))
        else:
            log.debug("WebSocket not connected, display update dropped")

    ticker = Ticker(push, settings.tick_interval_sec)
    status = await run_in_threadpool(lambda: session.status)
    log.info(f"Timer connection opened for '{slug}' ({status.value})")

    # a reload picks up where the stored state left off
    if status is TimerStatus.RUNNING:
        ticker.start()
    else:
        await push()

    try:
        await drive_session(ws, session, ticker, push)
    except WebSocketDisconnect:
        log.info(f"Timer connection closed for '{slug}'")
    finally:
        ticker.stop()
