"""Game mode definitions."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .constants import BASE_INTERVAL
from .errors import InvalidCommand


class GameMode(str, Enum):
    CLASSIC = "classic"
    SPEED = "speed"
    HARD = "hard"
    ENDLESS_CLASSIC = "endless-classic"
    ENDLESS_SPEEDY = "endless-speedy"
    ENDLESS_HARD = "endless-hard"
    UNCOMPROMISING = "uncompromising"


@dataclass(frozen=True)
class ModeRules:
    title: str
    speed_factor: float = 1.0
    life_threshold: int = 150
    # speed / endless-speedy: compounding speed-up plus periodic slowdown
    decay_step: Optional[int] = None
    decay_factor: float = 1.0
    slowdown_step: Optional[int] = None
    # hard / endless-hard / uncompromising: periodic boost
    boost_step: Optional[int] = None
    boost_divisor: float = 1.0
    victory_score: Optional[int] = None
    unlocks: tuple = ()

    @property
    def base_speed(self) -> float:
        return BASE_INTERVAL / self.speed_factor


MODE_RULES: dict[GameMode, ModeRules] = {
    GameMode.CLASSIC: ModeRules(
        title="Classic Mode",
        unlocks=((3000, (GameMode.SPEED,)),),
    ),
    GameMode.SPEED: ModeRules(
        title="Speed Mode",
        speed_factor=1.30,
        decay_step=50,
        decay_factor=0.95,
        slowdown_step=200,
        unlocks=((100, (GameMode.HARD,)),),
    ),
    GameMode.HARD: ModeRules(
        title="Hard Mode",
        speed_factor=1.45,
        life_threshold=200,
        boost_step=800,
        boost_divisor=2.0,
        unlocks=((7500, (
            GameMode.ENDLESS_CLASSIC,
            GameMode.ENDLESS_SPEEDY,
            GameMode.ENDLESS_HARD,
        )),),
    ),
    GameMode.ENDLESS_CLASSIC: ModeRules(
        title="Classic Endless",
        life_threshold=200,
    ),
    GameMode.ENDLESS_SPEEDY: ModeRules(
        title="Speedy Endless",
        speed_factor=1.50,
        decay_step=50,
        decay_factor=0.90,
        slowdown_step=200,
    ),
    GameMode.ENDLESS_HARD: ModeRules(
        title="Hard Endless",
        speed_factor=1.45,
        life_threshold=200,
        boost_step=700,
        boost_divisor=2.0,
        unlocks=((10000, (GameMode.UNCOMPROMISING,)),),
    ),
    GameMode.UNCOMPROMISING: ModeRules(
        title="Uncompromising Mode",
        speed_factor=1.75,
        life_threshold=350,
        boost_step=250,
        boost_divisor=2.5,
        victory_score=10000,
    ),
}


def crossed(before: int, after: int, step: int) -> bool:
    """True when a multiple of ``step`` lies in (before, after]."""
    return after // step > before // step


def parse_mode(value) -> GameMode:
    try:
        return GameMode(value)
    except ValueError:
        raise InvalidCommand(f"unknown game mode: {value!r}") from None


def describe_mode(mode: GameMode) -> dict:
    rules = MODE_RULES[mode]
    return {
        "id": mode.value,
        "title": rules.title,
        "speed_factor": rules.speed_factor,
        "life_threshold": rules.life_threshold,
        "boost_step": rules.boost_step,
        "slowdown_step": rules.slowdown_step,
        "victory_score": rules.victory_score,
    }
