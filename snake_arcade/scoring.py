"""Points, lives, star points, mode unlocks and high scores."""

import logging
from dataclasses import dataclass, field

from .constants import FOOD_SCORE, STAR_STEP
from .models import Profile, RunState
from .modes import MODE_RULES, GameMode, crossed

logger = logging.getLogger(__name__)


@dataclass
class FoodOutcome:
    before: int
    after: int
    stars_earned: int = 0
    life_gained: bool = False
    unlocked: list = field(default_factory=list)
    victory: bool = False


class Progression:
    def __init__(self, profile: Profile, profiles):
        self.profile = profile
        self.profiles = profiles

    def eat(self, run: RunState, mode: GameMode) -> FoodOutcome:
        """Score one food item and apply every threshold it crosses."""
        rules = MODE_RULES[mode]
        before = run.score
        after = before + FOOD_SCORE
        run.score = after
        outcome = FoodOutcome(before, after)

        earned = after // STAR_STEP - run.last_star_check // STAR_STEP
        if earned > 0:
            self.profile.star_points += earned
            run.last_star_check = after
            outcome.stars_earned = earned
            self.profiles.save_star_points(self.profile)

        if crossed(before, after, rules.life_threshold):
            run.lives += 1
            outcome.life_gained = True

        for threshold, targets in rules.unlocks:
            if after >= threshold:
                for target in targets:
                    if self.unlock_mode(target):
                        outcome.unlocked.append(target)

        if rules.victory_score is not None and before < rules.victory_score <= after:
            outcome.victory = True

        return outcome

    def unlock_mode(self, mode: GameMode) -> bool:
        if mode in self.profile.unlocked_modes:
            return False
        self.profile.unlocked_modes.append(mode)
        self.profiles.save_unlocked_modes(self.profile)
        logger.info("Unlocked mode %s", mode.value)
        return True

    def record_high_score(self, mode: GameMode, score: int) -> bool:
        if score <= self.profile.high_scores.get(mode, 0):
            return False
        self.profile.high_scores[mode] = score
        self.profiles.save_high_scores(self.profile)
        return True
