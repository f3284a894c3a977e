"""Per-mode tick interval with timed slowdown and boost windows."""

import logging
from dataclasses import dataclass
from typing import Callable, Optional

from .constants import BASE_INTERVAL, BOOST_SECONDS, SLOWDOWN_SECONDS
from .modes import MODE_RULES, GameMode, crossed

logger = logging.getLogger(__name__)


@dataclass
class _Window:
    restore: float
    handle: object = None


class SpeedController:
    """Owns CurrentSpeed.

    At most one slowdown and one boost window are open at any time. A new
    trigger of the same kind replaces the pending revert but keeps the speed
    recorded when the window first opened. A boost outranks a slowdown: while
    a boost is open, slowdown changes only rewrite what the boost reverts to.
    """

    def __init__(self, scheduler, on_change: Optional[Callable[[float], None]] = None,
                 base: float = BASE_INTERVAL):
        self.scheduler = scheduler
        self.on_change = on_change
        self.base = base
        self.mode = GameMode.CLASSIC
        self.current = MODE_RULES[self.mode].base_speed
        self._slowdown: Optional[_Window] = None
        self._boost: Optional[_Window] = None

    @property
    def slowdown_active(self) -> bool:
        return self._slowdown is not None

    @property
    def boost_active(self) -> bool:
        return self._boost is not None

    def reset(self, mode: GameMode):
        self.cancel_windows()
        self.mode = mode
        self._set(self.base / MODE_RULES[mode].speed_factor)

    def cancel_windows(self):
        for window in (self._slowdown, self._boost):
            if window is not None:
                self.scheduler.cancel(window.handle)
        self._slowdown = None
        self._boost = None

    def apply_score(self, before: int, after: int):
        rules = MODE_RULES[self.mode]
        if rules.decay_step and crossed(before, after, rules.decay_step):
            self._set(self.current * rules.decay_factor)
        if rules.slowdown_step and crossed(before, after, rules.slowdown_step):
            self._open_slowdown()
        if rules.boost_step and crossed(before, after, rules.boost_step):
            self._open_boost(self.base / rules.boost_divisor)

    def _set(self, value: float):
        if value == self.current:
            return
        self.current = value
        if self.on_change:
            self.on_change(value)

    def _open_slowdown(self):
        if self._slowdown is not None:
            self.scheduler.cancel(self._slowdown.handle)
            restore = self._slowdown.restore
        elif self._boost is not None:
            restore = self._boost.restore
        else:
            restore = self.current

        if self._boost is not None:
            self._boost.restore = self.base
        else:
            self._set(self.base)

        handle = self.scheduler.schedule_once(SLOWDOWN_SECONDS, self._close_slowdown)
        self._slowdown = _Window(restore, handle)
        logger.debug("Slowdown until revert to %.4f", restore)

    def _close_slowdown(self):
        window, self._slowdown = self._slowdown, None
        if window is None:
            return
        if self._boost is not None:
            self._boost.restore = window.restore
        else:
            self._set(window.restore)

    def _open_boost(self, speed: float):
        if self._boost is not None:
            self.scheduler.cancel(self._boost.handle)
            restore = self._boost.restore
        else:
            restore = self.current
        self._set(speed)
        handle = self.scheduler.schedule_once(BOOST_SECONDS, self._close_boost)
        self._boost = _Window(restore, handle)
        logger.debug("Boost at %.4f until revert to %.4f", speed, restore)

    def _close_boost(self):
        window, self._boost = self._boost, None
        if window is None:
            return
        self._set(window.restore)
