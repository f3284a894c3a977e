"""Persistence facade: a key-value store and the profile mapped onto it."""

import asyncio
import json
import logging
import os
from typing import Optional, Protocol

from .constants import (
    COLORS, DEFAULT_COLOR, DEFAULT_PATTERN,
    KEY_CUSTOMIZATION, KEY_HIGH_SCORES, KEY_STAR_POINTS,
    KEY_UNLOCKED_MODES, KEY_UNLOCKED_PATTERNS,
)
from .errors import PersistenceReadError, PersistenceWriteError
from .models import PATTERNS, Profile
from .modes import GameMode

logger = logging.getLogger(__name__)

MODE_VALUES = {m.value for m in GameMode}


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]: ...

    async def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    def __init__(self, data: Optional[dict] = None):
        self.data: dict[str, str] = dict(data or {})

    async def get(self, key: str) -> Optional[str]:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> None:
        self.data[key] = value


class JsonFileStore:
    """All keys in one JSON object on disk."""

    def __init__(self, path: str):
        self.path = path
        self._lock = asyncio.Lock()

    def _read_all(self) -> dict:
        if not os.path.exists(self.path):
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            raise PersistenceReadError(f"cannot read {self.path}: {e}") from e
        if not isinstance(data, dict):
            raise PersistenceReadError(f"{self.path} does not hold an object")
        return data

    def _write_all(self, data: dict):
        directory = os.path.dirname(self.path)
        tmp = self.path + ".tmp"
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2)
            os.replace(tmp, self.path)
        except OSError as e:
            raise PersistenceWriteError(f"cannot write {self.path}: {e}") from e

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._read_all)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            try:
                data = await asyncio.to_thread(self._read_all)
            except PersistenceReadError:
                logger.warning("Replacing unreadable profile file %s", self.path)
                data = {}
            data[key] = value
            await asyncio.to_thread(self._write_all, data)


class ProfileStore:
    """Loads the profile once and saves each part after it changes.

    Saves are fire-and-forget: ``spawn`` schedules the write and gameplay
    carries on. A failed write is logged and dropped; the in-memory profile
    stays authoritative for the session.
    """

    def __init__(self, store: KeyValueStore, spawn):
        self.store = store
        self.spawn = spawn

    async def load(self) -> Profile:
        profile = Profile()

        modes = await self._read(KEY_UNLOCKED_MODES, "modes")
        if isinstance(modes, list):
            for value in modes:
                if value in MODE_VALUES:
                    mode = GameMode(value)
                    if mode not in profile.unlocked_modes:
                        profile.unlocked_modes.append(mode)

        scores = await self._read(KEY_HIGH_SCORES, "scores")
        if isinstance(scores, dict):
            for value, score in scores.items():
                if value in MODE_VALUES and isinstance(score, (int, float)):
                    profile.high_scores[GameMode(value)] = int(score)

        patterns = await self._read(KEY_UNLOCKED_PATTERNS, "patterns")
        if isinstance(patterns, list):
            for pid in patterns:
                if pid in PATTERNS and pid not in profile.unlocked_patterns:
                    profile.unlocked_patterns.append(pid)

        custom = await self._read(KEY_CUSTOMIZATION, "customization")
        if isinstance(custom, dict):
            color = custom.get("color") or DEFAULT_COLOR
            pattern = custom.get("pattern") or DEFAULT_PATTERN
            profile.color = color if color in COLORS else DEFAULT_COLOR
            profile.pattern = pattern if pattern in profile.unlocked_patterns else DEFAULT_PATTERN

        stars = await self._read(KEY_STAR_POINTS, "star points")
        if isinstance(stars, (int, float)) and stars >= 0:
            profile.star_points = stars

        return profile

    async def _read(self, key: str, label: str):
        try:
            raw = await self.store.get(key)
            if raw is None:
                logger.info("No saved %s yet", label)
                return None
            return json.loads(raw)
        except Exception as e:
            logger.warning("Ignoring saved %s: %s", label, e)
            return None

    def save_unlocked_modes(self, profile: Profile):
        self._persist(KEY_UNLOCKED_MODES, [m.value for m in profile.unlocked_modes])

    def save_high_scores(self, profile: Profile):
        self._persist(KEY_HIGH_SCORES, {m.value: s for m, s in profile.high_scores.items()})

    def save_customization(self, profile: Profile):
        self._persist(KEY_CUSTOMIZATION, {"color": profile.color, "pattern": profile.pattern})

    def save_star_points(self, profile: Profile):
        self._persist(KEY_STAR_POINTS, profile.star_points)

    def save_unlocked_patterns(self, profile: Profile):
        self._persist(KEY_UNLOCKED_PATTERNS, list(profile.unlocked_patterns))

    def _persist(self, key: str, value):
        self.spawn(self._write(key, json.dumps(value)))

    async def _write(self, key: str, raw: str):
        try:
            await self.store.set(key, raw)
        except Exception as e:
            logger.error("Failed to save %s: %s", key, e)
