"""Tuning constants for the cafe simulation."""
import os

# Agent motion
WALK_SPEED = 50.0  # units per second
ARRIVAL_THRESHOLD = 5.0
DESTINATION_INSET = 60.0
FIRST_IDLE_RANGE_MS = (1000, 3000)
IDLE_RANGE_MS = (2000, 4000)
BOB_AMPLITUDE = 2.0
BOB_FREQUENCY = 0.02
SQUASH_FACTOR = 0.03
STRETCH_FACTOR = 0.02

# Cafe floor: x, y, width, height
WALKABLE_AREA = (200.0, 400.0, 880.0, 250.0)
SPAWN_POINTS = {
    "bear": (900.0, 480.0),
    "bunny": (400.0, 500.0),
}
FRAME_MS = 16.0

# Quiz
QUIZ_QUESTION_COUNT = 3
QUIZ_OPERAND_RANGE = (1, 12)
MAX_WRONG_ATTEMPTS = 3
FAST_AVERAGE_SECONDS = 3.0
STEADY_AVERAGE_SECONDS = 5.0

# Deferred display pauses
REVEAL_DELAY_MS = 2000
RECIPE_SUCCESS_DELAY_MS = 2000
RECIPE_RETRY_DELAY_MS = 1500

DEFAULT_RECIPE = "galbi-dinner"


def get_seed() -> int | None:
    """Random seed for the terminal app, taken from CAFE_SIM_SEED if set."""
    raw = os.environ.get("CAFE_SIM_SEED", "").strip()
    if not raw:
        return None
    return int(raw)
