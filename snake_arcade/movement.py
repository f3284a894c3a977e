"""Grid movement, collision detection and food placement."""

import random
from dataclasses import dataclass
from typing import Optional

from .constants import DIRECTIONS, GRID_SIZE, OPPOSITES
from .errors import SelfCollision, WallCollision


@dataclass(frozen=True)
class Move:
    snake: list
    ate: bool


def turn_allowed(current: str, new: str) -> bool:
    """A turn is legal only onto the other axis."""
    return new != current and new != OPPOSITES[current]


def next_head(snake, direction: str) -> tuple[int, int]:
    dx, dy = DIRECTIONS[direction]
    hx, hy = snake[0]
    return (hx + dx, hy + dy)


def step(snake, direction: str, food, grid_size: int = GRID_SIZE) -> Move:
    """Advance the snake one cell.

    Raises WallCollision or SelfCollision without touching ``snake``.
    Returns a new segment list: one longer when the head lands on ``food``,
    the same length otherwise.
    """
    head = next_head(snake, direction)
    x, y = head
    if x < 0 or x >= grid_size or y < 0 or y >= grid_size:
        raise WallCollision(head)
    if head in snake:
        raise SelfCollision(head)

    segments = [head] + list(snake)
    ate = head == food
    if not ate:
        segments.pop()
    return Move(segments, ate)


def place_food(snake, rng: Optional[random.Random] = None,
               grid_size: int = GRID_SIZE) -> Optional[tuple[int, int]]:
    """Pick a free cell uniformly at random, or None if the grid is full."""
    rng = rng or random
    occupied = set(snake)
    free = [
        (x, y)
        for x in range(grid_size)
        for y in range(grid_size)
        if (x, y) not in occupied
    ]
    if not free:
        return None
    return rng.choice(free)
