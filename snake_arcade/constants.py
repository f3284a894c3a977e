"""Game constants."""

GRID_SIZE = 20
INITIAL_SNAKE = [(10, 10)]
INITIAL_DIRECTION = "right"
INITIAL_FOOD = (5, 5)
FOOD_SCORE = 10

# Tick intervals are in seconds; smaller is faster.
BASE_INTERVAL = 0.150
SLOWDOWN_SECONDS = 7.0
BOOST_SECONDS = 6.0
STAR_STEP = 250
BROADCAST_RATE = 30

DIRECTIONS = {
    "up": (0, -1),
    "down": (0, 1),
    "left": (-1, 0),
    "right": (1, 0),
}
OPPOSITES = {"up": "down", "down": "up", "left": "right", "right": "left"}

COLORS = {
    "red": "#ef4444",
    "yellow": "#eab308",
    "blue": "#3b82f6",
    "black": "#1f2937",
    "green": "#10b981",
}
DEFAULT_COLOR = "green"
DEFAULT_PATTERN = "squares"

# Storage keys
KEY_UNLOCKED_MODES = "unlocked-modes"
KEY_HIGH_SCORES = "high-scores"
KEY_CUSTOMIZATION = "snake-customization"
KEY_STAR_POINTS = "star-points"
KEY_UNLOCKED_PATTERNS = "unlocked-patterns"
