"""WebSocket connection management and state serialization."""

import json
import logging

from fastapi import WebSocket

from .constants import COLORS
from .game import GameState
from .models import PATTERNS
from .modes import GameMode, describe_mode

logger = logging.getLogger(__name__)


class ConnectionManager:
    def __init__(self):
        self.connections: set[WebSocket] = set()

    def register(self, ws: WebSocket):
        self.connections.add(ws)

    def disconnect(self, ws: WebSocket):
        self.connections.discard(ws)

    async def broadcast(self, message: str):
        disconnected = []
        for ws in list(self.connections):
            try:
                await ws.send_text(message)
            except Exception as e:
                logger.debug("Dropping connection: %s", e)
                disconnected.append(ws)
        for ws in disconnected:
            self.connections.discard(ws)

    async def send_personal(self, ws: WebSocket, message: str):
        await ws.send_text(message)


def state_payload(game: GameState, events=()) -> dict:
    return {
        "type": "state",
        "version": game.version,
        "game": game.snapshot().to_dict(),
        "profile": game.profile.to_dict(),
        "events": [e.value for e in events],
    }


def build_state_msg(game: GameState, events=()) -> str:
    return json.dumps(state_payload(game, events))


def build_error_msg(message: str) -> str:
    return json.dumps({"type": "error", "message": message})


def build_catalog(game: GameState) -> dict:
    unlocked = set(game.profile.unlocked_modes)
    return {
        "modes": [
            {**describe_mode(mode), "unlocked": mode in unlocked}
            for mode in GameMode
        ],
        "colors": COLORS,
        "patterns": [
            {
                "id": p.id,
                "name": p.name,
                "glyph": p.glyph,
                "cost": p.cost,
                "unlocked": p.id in game.profile.unlocked_patterns,
            }
            for p in PATTERNS.values()
        ],
    }
