"""Core game state and logic."""

import logging
import random
from typing import Callable, Optional

from .constants import (
    COLORS, DIRECTIONS, GRID_SIZE,
    INITIAL_DIRECTION, INITIAL_FOOD, INITIAL_SNAKE,
)
from .errors import Collision, CustomizationError, InvalidCommand, ModeLockedError
from .models import (
    PATTERNS, GameEvent, Phase, PlayStatus, Profile, RunState, Snapshot,
)
from .modes import GameMode, parse_mode
from .movement import place_food, step, turn_allowed
from .scoring import Progression
from .speed import SpeedController

logger = logging.getLogger(__name__)


class GameState:
    def __init__(self, profiles, scheduler, profile: Optional[Profile] = None,
                 rng: Optional[random.Random] = None,
                 on_event: Optional[Callable[[GameEvent], None]] = None,
                 grid_size: int = GRID_SIZE):
        self.profiles = profiles
        self.scheduler = scheduler
        self.profile = profile or Profile()
        self.rng = rng or random.Random()
        self.on_event = on_event
        self.grid_size = grid_size

        self.phase = Phase.MENU
        self.status = PlayStatus.IDLE
        self.mode = GameMode.CLASSIC
        self.snake: list[tuple[int, int]] = list(INITIAL_SNAKE)
        self.direction = INITIAL_DIRECTION
        self.next_direction = INITIAL_DIRECTION
        self.food: Optional[tuple[int, int]] = INITIAL_FOOD
        self.run = RunState()
        self.events: list[GameEvent] = []
        self.version = 0

        self.progression = Progression(self.profile, profiles)
        self.speed = SpeedController(scheduler, on_change=self._speed_changed)
        self._ticker = None
        self._draft: Optional[tuple[str, str]] = None

    async def load_profile(self):
        self.profile = await self.profiles.load()
        self.progression.profile = self.profile
        self._touch()

    def start_game(self, mode):
        if self.phase == Phase.CUSTOMIZE:
            raise InvalidCommand("save or cancel customization first")
        if self.phase != Phase.MENU:
            raise InvalidCommand("a game is already running, quit to the menu first")
        if not isinstance(mode, GameMode):
            mode = parse_mode(mode)
        if mode not in self.profile.unlocked_modes:
            raise ModeLockedError(f"{mode.value} is locked")

        self._stop_ticker()
        self.mode = mode
        self.phase = Phase.PLAYING
        self._reset_run()
        self._start_ticker()
        logger.info("Started %s", mode.value)

    def restart(self):
        if self.phase != Phase.PLAYING:
            raise InvalidCommand("no game to restart")
        self._stop_ticker()
        self._reset_run()
        self._start_ticker()

    def quit_to_menu(self):
        if self.phase == Phase.CUSTOMIZE:
            self.cancel_customization()
            return
        self._stop_ticker()
        self.speed.cancel_windows()
        self.phase = Phase.MENU
        self.status = PlayStatus.IDLE
        self._touch()

    def shutdown(self):
        self._stop_ticker()
        self.speed.cancel_windows()

    def _reset_run(self):
        self.snake = list(INITIAL_SNAKE)
        self.direction = self.next_direction = INITIAL_DIRECTION
        self.food = INITIAL_FOOD
        self.run = RunState()
        self.status = PlayStatus.IDLE
        self.speed.reset(self.mode)
        self._touch()

    def change_direction(self, name: str) -> bool:
        """Queue a turn for the next tick; returns True if it was accepted.

        Turns are checked against the direction the snake last moved in, so
        several inputs between two ticks can never fold it back on itself.
        """
        if self.phase != Phase.PLAYING:
            raise InvalidCommand("not playing")
        if not isinstance(name, str) or name not in DIRECTIONS:
            raise InvalidCommand(f"unknown direction: {name!r}")

        if self.status == PlayStatus.IDLE:
            self.status = PlayStatus.ACTIVE
            self._touch()
        if self.status != PlayStatus.ACTIVE:
            return False
        if not turn_allowed(self.direction, name):
            return False
        self.next_direction = name
        self._touch()
        return True

    def action(self) -> bool:
        """The single use-life-or-restart command."""
        if self.phase != Phase.PLAYING:
            return False
        if self.status == PlayStatus.REVIVE:
            self.revive()
            return True
        if self.status in (PlayStatus.GAME_OVER, PlayStatus.VICTORY):
            self.restart()
            return True
        return False

    def revive(self):
        if self.status != PlayStatus.REVIVE or self.run.lives <= 0:
            raise InvalidCommand("nothing to revive from")
        self.run.lives -= 1
        self.snake = list(INITIAL_SNAKE)
        self.direction = self.next_direction = INITIAL_DIRECTION
        if self.food in self.snake:
            self.food = place_food(self.snake, self.rng, self.grid_size)
        self.status = PlayStatus.IDLE
        self._touch()

    def tick(self):
        if self.phase != Phase.PLAYING or self.status != PlayStatus.ACTIVE:
            return

        self.direction = self.next_direction
        try:
            move = step(self.snake, self.direction, self.food, self.grid_size)
        except Collision as e:
            if self.run.lives > 0:
                logger.debug("%s with %d lives left", e, self.run.lives)
                self.status = PlayStatus.REVIVE
                self._touch()
            else:
                self._finish(PlayStatus.GAME_OVER)
            return

        self.snake = move.snake
        if move.ate:
            self._eat()
        self._touch()

    def _eat(self):
        self._emit(GameEvent.EAT)
        outcome = self.progression.eat(self.run, self.mode)
        if outcome.life_gained:
            self._emit(GameEvent.GAIN_LIFE)
        for _ in outcome.unlocked:
            self._emit(GameEvent.UNLOCK)

        self.speed.apply_score(outcome.before, outcome.after)

        if outcome.victory:
            self._finish(PlayStatus.VICTORY)
            return
        self.food = place_food(self.snake, self.rng, self.grid_size)

    def _finish(self, status: PlayStatus):
        self.status = status
        self._stop_ticker()
        self.speed.cancel_windows()
        self.run.new_high_score = self.progression.record_high_score(self.mode, self.run.score)
        self._emit(GameEvent.VICTORY if status == PlayStatus.VICTORY else GameEvent.GAME_OVER)
        logger.info("%s finished (%s) with %d points",
                    self.mode.value, status.value, self.run.score)
        self._touch()

    def _start_ticker(self):
        self._stop_ticker()
        self._ticker = self.scheduler.schedule_repeating(self.speed.current, self.tick)

    def _stop_ticker(self):
        if self._ticker is not None:
            self.scheduler.cancel(self._ticker)
            self._ticker = None

    def _speed_changed(self, value: float):
        if self._ticker is not None:
            self._start_ticker()
        self._touch()

    def open_customize(self):
        if self.phase != Phase.MENU:
            raise InvalidCommand("customize is only reachable from the menu")
        self._draft = (self.profile.color, self.profile.pattern)
        self.phase = Phase.CUSTOMIZE
        self._touch()

    def choose_color(self, color: str):
        self._require_customize()
        if not isinstance(color, str) or color not in COLORS:
            raise CustomizationError(f"unknown color: {color!r}")
        self.profile.color = color
        self._touch()

    def choose_pattern(self, pattern_id: str):
        self._require_customize()
        if not isinstance(pattern_id, str) or pattern_id not in PATTERNS:
            raise CustomizationError(f"unknown pattern: {pattern_id!r}")
        if pattern_id not in self.profile.unlocked_patterns:
            raise CustomizationError(f"{pattern_id} is locked")
        self.profile.pattern = pattern_id
        self._touch()

    def unlock_pattern(self, pattern_id: str):
        self._require_customize()
        pattern = PATTERNS.get(pattern_id) if isinstance(pattern_id, str) else None
        if pattern is None:
            raise CustomizationError(f"unknown pattern: {pattern_id!r}")
        if pattern_id in self.profile.unlocked_patterns:
            raise CustomizationError(f"{pattern_id} is already unlocked")
        if self.profile.star_points < pattern.cost:
            raise CustomizationError(
                f"{pattern.name} costs {pattern.cost} stars, you have {self.profile.star_points}")

        self.profile.star_points = round(self.profile.star_points - pattern.cost, 2)
        self.profile.unlocked_patterns.append(pattern_id)
        self.profiles.save_star_points(self.profile)
        self.profiles.save_unlocked_patterns(self.profile)
        self._emit(GameEvent.UNLOCK)
        self._touch()

    def save_customization(self):
        self._require_customize()
        self.profiles.save_customization(self.profile)
        self._draft = None
        self.phase = Phase.MENU
        self._touch()

    def cancel_customization(self):
        self._require_customize()
        if self._draft is not None:
            self.profile.color, self.profile.pattern = self._draft
        self._draft = None
        self.phase = Phase.MENU
        self._touch()

    def _require_customize(self):
        if self.phase != Phase.CUSTOMIZE:
            raise InvalidCommand("not customizing")

    def snapshot(self) -> Snapshot:
        return Snapshot(
            phase=self.phase,
            status=self.status,
            mode=self.mode,
            snake=tuple(self.snake),
            direction=self.next_direction,
            food=self.food,
            score=self.run.score,
            lives=self.run.lives,
            speed=self.speed.current,
            slowdown=self.speed.slowdown_active,
            boost=self.speed.boost_active,
            high_score=self.profile.high_scores.get(self.mode, 0),
            new_high_score=self.run.new_high_score,
            grid_size=self.grid_size,
        )

    def drain_events(self) -> list[GameEvent]:
        events, self.events = self.events, []
        return events

    def _emit(self, event: GameEvent):
        self.events.append(event)
        if self.on_event:
            self.on_event(event)

    def _touch(self):
        self.version += 1
