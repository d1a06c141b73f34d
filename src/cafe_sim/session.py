"""Session stages tying the wandering floor, the kitchen and the quiz together."""
import heapq
import itertools
import logging
import random
from enum import Enum
from typing import Callable

from cafe_sim import motion
from cafe_sim import quiz as quiz_engine
from cafe_sim.config import (
    DEFAULT_RECIPE, QUIZ_OPERAND_RANGE, QUIZ_QUESTION_COUNT, RECIPE_RETRY_DELAY_MS,
    RECIPE_SUCCESS_DELAY_MS, REVEAL_DELAY_MS, SPAWN_POINTS, WALKABLE_AREA,
)
from cafe_sim.errors import StageError
from cafe_sim.models import (
    AdvanceResult, Agent, QuizSession, Recipe, RecipeOutcome, Rect, SessionResult,
    SubmitOutcome, SubmitResult,
)
from cafe_sim.recipes import RecipeCatalog, Selection, load_catalog, validate

logger = logging.getLogger(__name__)


class Stage(Enum):
    AWAITING_START = "awaiting start"
    FREE_ROAM = "free roam"
    RECIPE_CHALLENGE = "recipe challenge"
    QUIZ_CHALLENGE = "quiz challenge"
    RESULT = "result"


class Scheduler:
    """Deferred callbacks driven by frame time instead of wall-clock timers."""

    def __init__(self) -> None:
        self._now_ms = 0.0
        self._queue: list = []
        self._seq = itertools.count()

    @property
    def now_ms(self) -> float:
        return self._now_ms

    @property
    def pending(self) -> int:
        return len(self._queue)

    def schedule(self, delay_ms: float, callback: Callable[[], None]) -> None:
        heapq.heappush(self._queue, (self._now_ms + max(0.0, delay_ms), next(self._seq), callback))

    def tick(self, delta_ms: float) -> None:
        self._now_ms += max(0.0, delta_ms)
        while self._queue and self._queue[0][0] <= self._now_ms:
            _, _, callback = heapq.heappop(self._queue)
            callback()

    def clear(self) -> None:
        self._queue.clear()


class CafeSession:
    """Explicit context for one play-through of the cafe."""

    def __init__(
        self,
        catalog: RecipeCatalog | None = None,
        area: Rect | None = None,
        spawn_points: dict | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], float] | None = None,
        question_count: int = QUIZ_QUESTION_COUNT,
        operand_range: tuple[int, int] = QUIZ_OPERAND_RANGE,
        on_quiz_complete: Callable[[int], None] | None = None,
    ) -> None:
        self.catalog = catalog or load_catalog()
        self.area = area or Rect(*WALKABLE_AREA)
        self.spawn_points = spawn_points or SPAWN_POINTS
        self.rng = rng or random.Random()
        self.clock = clock
        self.question_count = question_count
        self.operand_range = operand_range
        self.on_quiz_complete = on_quiz_complete

        self.scheduler = Scheduler()
        self.stage = Stage.AWAITING_START
        self.agents: list[Agent] = []
        self.recipe: Recipe | None = None
        self.selection = Selection()
        self.selection_locked = False
        self.quiz: QuizSession | None = None
        self.result = SessionResult()

    def _require(self, operation: str, *stages: Stage) -> None:
        if self.stage not in stages:
            raise StageError(operation, self.stage)

    def _set_stage(self, stage: Stage) -> None:
        logger.info("Stage %s -> %s", self.stage.value, stage.value)
        self.stage = stage

    # --- Free roam ---

    def start(self) -> None:
        self._require("start", Stage.AWAITING_START)
        self._enter_free_roam()

    def _enter_free_roam(self) -> None:
        self.agents = [
            motion.create_agent(kind, x, y, self.area, rng=self.rng)
            for kind, (x, y) in self.spawn_points.items()
        ]
        self._set_stage(Stage.FREE_ROAM)

    def tick(self, delta_ms: float) -> None:
        """One frame: fire due callbacks, then move the characters."""
        self.scheduler.tick(delta_ms)
        if self.stage is Stage.FREE_ROAM:
            motion.tick_all(self.agents, delta_ms, self.rng)

    # --- Kitchen ---

    def enter_kitchen(self, recipe_key: str | None = None) -> Recipe:
        self._require("enter_kitchen", Stage.FREE_ROAM)
        self.recipe = self.catalog.get(recipe_key or DEFAULT_RECIPE)
        self.selection.clear()
        self.selection_locked = False
        self._set_stage(Stage.RECIPE_CHALLENGE)
        return self.recipe

    def leave_kitchen(self) -> None:
        self._require("leave_kitchen", Stage.RECIPE_CHALLENGE)
        self.scheduler.clear()
        self.recipe = None
        self.selection.clear()
        self.selection_locked = False
        self._enter_free_roam()

    def toggle_ingredient(self, ingredient_id: str) -> bool:
        """Toggle an ingredient. Returns whether it is selected afterwards."""
        self._require("toggle_ingredient", Stage.RECIPE_CHALLENGE)
        self.catalog.check_ingredient(ingredient_id)
        if self.selection_locked:
            return ingredient_id in self.selection
        return self.selection.toggle(ingredient_id)

    def submit_recipe(self) -> RecipeOutcome:
        self._require("submit_recipe", Stage.RECIPE_CHALLENGE)
        if self.selection_locked:
            return RecipeOutcome.LOCKED
        self.selection_locked = True
        if validate(self.selection.ids, self.recipe):
            logger.info("Served %s", self.recipe.name)
            self.scheduler.schedule(RECIPE_SUCCESS_DELAY_MS, self._serve_recipe)
            return RecipeOutcome.MATCH
        logger.info("Wrong ingredients for %s: %s", self.recipe.name, ", ".join(self.selection))
        self.scheduler.schedule(RECIPE_RETRY_DELAY_MS, self._retry_recipe)
        return RecipeOutcome.MISMATCH

    def _serve_recipe(self) -> None:
        self.result = SessionResult(recipe=self.recipe)
        self.selection_locked = False
        self._set_stage(Stage.RESULT)

    def _retry_recipe(self) -> None:
        self.selection.clear()
        self.selection_locked = False

    # --- Quiz ---

    def start_quiz(self) -> QuizSession:
        self._require("start_quiz", Stage.RESULT)
        if self.result.recipe is None or self.result.stars is not None:
            raise StageError("start_quiz", self.stage)
        self.quiz = quiz_engine.start_quiz(
            self.question_count, self.operand_range, rng=self.rng, clock=self.clock,
        )
        self._set_stage(Stage.QUIZ_CHALLENGE)
        return self.quiz

    def answer(self, raw_input: str | None) -> SubmitResult:
        self._require("answer", Stage.QUIZ_CHALLENGE)
        result = quiz_engine.submit_answer(self.quiz, raw_input)
        if result.outcome is SubmitOutcome.REVEALED:
            self.scheduler.schedule(REVEAL_DELAY_MS, self._advance_after_reveal)
        elif result.progress is not None and result.progress.completed:
            self._finish_quiz(result.progress)
        return result

    def _advance_after_reveal(self) -> None:
        progress = quiz_engine.advance(self.quiz)
        if progress.completed:
            self._finish_quiz(progress)

    def _finish_quiz(self, progress: AdvanceResult) -> None:
        self.result.stars = progress.stars
        self.result.total_elapsed = progress.total_elapsed
        self.result.correct_count = self.quiz.correct_count
        self.result.question_count = self.quiz.question_count
        self.quiz = None
        self._set_stage(Stage.RESULT)
        if self.on_quiz_complete:
            self.on_quiz_complete(progress.stars)

    def quiz_elapsed(self) -> float:
        if self.quiz is None:
            return self.result.total_elapsed or 0.0
        return quiz_engine.elapsed_seconds(self.quiz)

    # --- Result / reset ---

    def proceed(self) -> None:
        """Take the next step from the result screen."""
        self._require("proceed", Stage.RESULT)
        if self.result.stars is None:
            self.start_quiz()
        else:
            self.reset()

    def reset(self) -> None:
        self.scheduler.clear()
        self.agents = []
        self.recipe = None
        self.selection.clear()
        self.selection_locked = False
        self.quiz = None
        self.result = SessionResult()
        self._set_stage(Stage.AWAITING_START)
