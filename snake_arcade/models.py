"""Data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from .constants import DEFAULT_COLOR, DEFAULT_PATTERN, GRID_SIZE
from .modes import GameMode


class Phase(Enum):
    MENU = "menu"
    CUSTOMIZE = "customize"
    PLAYING = "playing"


class PlayStatus(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    REVIVE = "revive"
    GAME_OVER = "game-over"
    VICTORY = "victory"


class GameEvent(Enum):
    EAT = "eat"
    GAIN_LIFE = "gain-life"
    GAME_OVER = "game-over"
    UNLOCK = "unlock"
    VICTORY = "victory"


@dataclass(frozen=True)
class Pattern:
    id: str
    name: str
    glyph: str
    cost: float


PATTERNS: dict[str, Pattern] = {p.id: p for p in (
    Pattern("squares", "Squares", "■", 0),
    Pattern("rectangles", "Rectangles", "▬", 0),
    Pattern("triangles", "Triangles", "▲", 0),
    Pattern("stars", "Stars", "★", 3),
    Pattern("pentagon", "Pentagon", "⬟", 4.5),
    Pattern("hexagon", "Hexagon", "⬡", 5),
    Pattern("heptagon", "Heptagon", "⬢", 6),
    Pattern("octagon", "Octagon", "⯃", 6.3),
    Pattern("nonagon", "Nonagon", "⬣", 7.3),
    Pattern("decagon", "Decagon", "⬤", 8),
    Pattern("freeze", "Freeze", "❄", 12.5),
)}

FREE_PATTERNS = [p.id for p in PATTERNS.values() if p.cost == 0]


def default_high_scores() -> dict[GameMode, int]:
    return {mode: 0 for mode in GameMode}


@dataclass
class Profile:
    """Everything that survives between runs and restarts."""

    unlocked_modes: list = field(default_factory=lambda: [GameMode.CLASSIC])
    high_scores: dict = field(default_factory=default_high_scores)
    color: str = DEFAULT_COLOR
    pattern: str = DEFAULT_PATTERN
    star_points: float = 0
    unlocked_patterns: list = field(default_factory=lambda: list(FREE_PATTERNS))

    def to_dict(self) -> dict:
        return {
            "unlocked_modes": [m.value for m in self.unlocked_modes],
            "high_scores": {m.value: s for m, s in self.high_scores.items()},
            "color": self.color,
            "pattern": self.pattern,
            "star_points": self.star_points,
            "unlocked_patterns": list(self.unlocked_patterns),
        }


@dataclass
class RunState:
    score: int = 0
    lives: int = 0
    last_star_check: int = 0
    new_high_score: bool = False


@dataclass(frozen=True)
class Snapshot:
    phase: Phase
    status: PlayStatus
    mode: GameMode
    snake: tuple
    direction: str
    food: Optional[tuple]
    score: int
    lives: int
    speed: float
    slowdown: bool
    boost: bool
    high_score: int
    new_high_score: bool
    grid_size: int = GRID_SIZE

    def to_dict(self) -> dict:
        return {
            "phase": self.phase.value,
            "status": self.status.value,
            "mode": self.mode.value,
            "snake": [list(cell) for cell in self.snake],
            "direction": self.direction,
            "food": list(self.food) if self.food else None,
            "score": self.score,
            "lives": self.lives,
            "speed": self.speed,
            "slowdown": self.slowdown,
            "boost": self.boost,
            "high_score": self.high_score,
            "new_high_score": self.new_high_score,
            "grid": self.grid_size,
        }
