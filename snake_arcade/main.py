"""FastAPI application: HTTP routes, WebSocket endpoint, broadcast loop."""

import asyncio
import json
import logging
import os

from contextlib import asynccontextmanager

from fastapi import FastAPI, WebSocket, WebSocketDisconnect

from .connection_manager import (
    ConnectionManager, build_catalog, build_error_msg, build_state_msg, state_payload,
)
from .constants import BROADCAST_RATE
from .errors import InvalidCommand
from .game import GameState
from .scheduler import AsyncioScheduler
from .storage import JsonFileStore, ProfileStore

DATA_PATH = os.environ.get(
    "SNAKE_ARCADE_DATA",
    os.path.join(os.path.expanduser("~"), ".snake_arcade", "profile.json"),
)
HOST = os.environ.get("SNAKE_ARCADE_HOST", "0.0.0.0")
PORT = int(os.environ.get("SNAKE_ARCADE_PORT", "8765"))
LOG_LEVEL = os.environ.get("SNAKE_ARCADE_LOG_LEVEL", "INFO")

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await game.load_profile()
    task = asyncio.create_task(broadcast_loop())
    yield
    task.cancel()
    try:
        await task
    except asyncio.CancelledError:
        pass
    game.shutdown()
    await scheduler.drain()


app = FastAPI(lifespan=lifespan)
scheduler = AsyncioScheduler()
profiles = ProfileStore(JsonFileStore(DATA_PATH), scheduler.spawn)
game = GameState(profiles, scheduler)
manager = ConnectionManager()


@app.get("/")
async def catalog():
    return build_catalog(game)


@app.get("/state")
async def current_state():
    return state_payload(game)


def handle_command(msg) -> None:
    if not isinstance(msg, dict):
        raise InvalidCommand("expected a JSON object")
    kind = msg.get("type")
    if kind == "start":
        game.start_game(msg.get("mode"))
    elif kind == "input":
        game.change_direction(msg.get("direction"))
    elif kind == "action":
        game.action()
    elif kind == "restart":
        game.restart()
    elif kind == "quit":
        game.quit_to_menu()
    elif kind == "customize":
        game.open_customize()
    elif kind == "color":
        game.choose_color(msg.get("color"))
    elif kind == "pattern":
        game.choose_pattern(msg.get("pattern"))
    elif kind == "unlock_pattern":
        game.unlock_pattern(msg.get("pattern"))
    elif kind == "save_customization":
        game.save_customization()
    elif kind == "cancel_customization":
        game.cancel_customization()
    else:
        raise InvalidCommand(f"unknown message type: {kind!r}")


@app.websocket("/ws")
async def websocket_endpoint(ws: WebSocket):
    await ws.accept()
    await manager.send_personal(ws, json.dumps({"type": "welcome", **build_catalog(game)}))
    await manager.send_personal(ws, build_state_msg(game))
    manager.register(ws)
    try:
        while True:
            raw = await ws.receive_text()
            try:
                handle_command(json.loads(raw))
            except ValueError:
                await manager.send_personal(ws, build_error_msg("malformed JSON"))
                continue
            except InvalidCommand as e:
                await manager.send_personal(ws, build_error_msg(str(e)))
                continue
            await manager.send_personal(ws, build_state_msg(game))
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(ws)


async def broadcast_loop():
    last_version = None
    while True:
        if game.version != last_version:
            last_version = game.version
            await manager.broadcast(build_state_msg(game, game.drain_events()))
        await asyncio.sleep(1 / BROADCAST_RATE)


if __name__ == "__main__":
    import uvicorn
    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    print(f"Snake Arcade starting on http://localhost:{PORT}")
    uvicorn.run(app, host=HOST, port=PORT)
