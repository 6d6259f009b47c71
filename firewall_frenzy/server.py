"""FastAPI application serving Firewall Frenzy to browsers over websockets."""

from __future__ import annotations

import asyncio
import contextlib
import json
import time
import uuid
from dataclasses import asdict
from pathlib import Path
from typing import AsyncIterator, Dict

import uvicorn
from fastapi import FastAPI, HTTPException, WebSocket, WebSocketDisconnect
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from loguru import logger

from . import config
from .game.models import Action
from .game.session import GameSession

STATIC_DIR = Path(__file__).resolve().parent / "web" / "static"
INDEX_FILE = STATIC_DIR / "index.html"


def _state_message(session: GameSession, message_type: str = "state", drain: bool = False) -> Dict[str, object]:
    return {
        "type": message_type,
        "payload": asdict(session.snapshot()),
        "events": session.drain_events() if drain else [],
    }


async def _broadcast(app: FastAPI, message: Dict[str, object]) -> None:
    disconnects = []
    for connection_id, websocket in list(app.state.connections.items()):
        try:
            await websocket.send_json(message)
        except (RuntimeError, WebSocketDisconnect):
            disconnects.append(connection_id)
    for connection_id in disconnects:
        logger.warning("Dropping unreachable client {}", connection_id)
        app.state.connections.pop(connection_id, None)


async def _game_loop(app: FastAPI) -> None:
    """Tick the shared session at a fixed rate and push snapshots out."""

    tick_interval = 1.0 / config.TICK_RATE
    broadcast_every = max(1, config.TICK_RATE // config.STATE_BROADCAST_RATE)
    ticks = 0
    next_tick = time.perf_counter()
    while True:
        async with app.state.lock:
            app.state.session.tick()
            ticks += 1
            message = _state_message(app.state.session, drain=True) if ticks % broadcast_every == 0 else None
        if message is not None:
            await _broadcast(app, message)
        next_tick += tick_interval
        await asyncio.sleep(max(0.0, next_tick - time.perf_counter()))


@contextlib.asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    task = asyncio.create_task(_game_loop(app))
    logger.info("Game loop running at {} ticks per second", config.TICK_RATE)
    try:
        yield
    finally:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Game loop stopped")


def create_app(session: GameSession | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(title=config.GAME_NAME, description="Browser tower-defense against malware", lifespan=_lifespan)
    app.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")
    app.state.session = session or GameSession()
    app.state.lock = asyncio.Lock()
    app.state.connections: Dict[str, WebSocket] = {}

    @app.get("/")
    async def serve_index() -> FileResponse:
        if not INDEX_FILE.exists():
            raise HTTPException(status_code=500, detail="Missing web assets")
        return FileResponse(INDEX_FILE)

    @app.get("/health")
    async def healthcheck() -> JSONResponse:
        return JSONResponse({"status": "ok", "clients": len(app.state.connections)})

    @app.get("/api/state")
    async def current_state() -> JSONResponse:
        async with app.state.lock:
            snapshot = asdict(app.state.session.snapshot())
        return JSONResponse(snapshot)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await websocket.accept()
        connection_id = uuid.uuid4().hex
        async with app.state.lock:
            app.state.connections[connection_id] = websocket
            init = _state_message(app.state.session, "init")
        logger.info("Client {} connected", connection_id)
        await websocket.send_json(init)

        try:
            while True:
                try:
                    data = json.loads(await websocket.receive_text())
                except ValueError:
                    logger.debug("Ignoring non-JSON frame from {}", connection_id)
                    continue
                if not isinstance(data, dict):
                    continue
                payload = data.get("payload")
                action = Action(
                    type=str(data.get("type", "")).lower(),
                    payload=payload if isinstance(payload, dict) else {},
                )
                async with app.state.lock:
                    applied = app.state.session.handle(action)
                    reply = _state_message(app.state.session) if applied and action.type != "pointer_move" else None
                if reply is not None:
                    await websocket.send_json(reply)
        except WebSocketDisconnect:
            logger.info("Client {} disconnected", connection_id)
        finally:
            app.state.connections.pop(connection_id, None)

    return app


app = create_app()


def main() -> None:
    uvicorn.run(app, host=config.HOST, port=config.PORT)


if __name__ == "__main__":
    main()


__all__ = ["app", "create_app", "main"]
