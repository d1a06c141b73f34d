"""Data classes for the cafe simulation."""
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def contains(self, x: float, y: float) -> bool:
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def shrink(self, inset: float) -> "Rect":
        return Rect(self.x + inset, self.y + inset, self.width - 2 * inset, self.height - 2 * inset)


class AgentState(Enum):
    IDLE = "idle"
    WALKING = "walking"


@dataclass(frozen=True)
class WalkPose:
    """Cosmetic bob for the renderer. Has no effect on position."""
    offset: float = 0.0
    squash: float = 1.0
    stretch: float = 1.0


@dataclass
class Agent:
    kind: str
    x: float
    y: float
    area: Rect
    walk_speed: float
    idle_duration_ms: float
    state: AgentState = AgentState.IDLE
    target: Optional[Point] = None
    facing_left: bool = False
    idle_elapsed_ms: float = 0.0
    walk_elapsed_ms: float = 0.0

    @property
    def depth(self) -> float:
        # Lower on screen renders in front
        return self.y

    @property
    def is_walking(self) -> bool:
        return self.state is AgentState.WALKING


@dataclass(frozen=True)
class Recipe:
    key: str
    name: str
    required: frozenset = frozenset()


@dataclass(frozen=True)
class QuizQuestion:
    a: int
    b: int

    @property
    def answer(self) -> int:
        return self.a * self.b

    @property
    def text(self) -> str:
        return f"{self.a} x {self.b} = ?"


class SubmitOutcome(Enum):
    IGNORED = "ignored"
    CORRECT = "correct"
    RETRY = "retry"
    REVEALED = "revealed"


class QuizStatus(Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass(frozen=True)
class AdvanceResult:
    status: QuizStatus
    next_question: Optional[QuizQuestion] = None
    stars: Optional[int] = None
    total_elapsed: Optional[float] = None

    @property
    def completed(self) -> bool:
        return self.status is QuizStatus.COMPLETED


@dataclass(frozen=True)
class SubmitResult:
    outcome: SubmitOutcome
    revealed_answer: Optional[int] = None
    progress: Optional[AdvanceResult] = None


@dataclass
class QuizSession:
    questions: list[QuizQuestion]
    clock: Callable[[], float] = time.monotonic
    index: int = 0
    correct_count: int = 0
    wrong_attempts: int = 0
    started_at: Optional[float] = None
    total_elapsed: Optional[float] = None
    awaiting_advance: bool = False
    stars: Optional[int] = None

    @property
    def question_count(self) -> int:
        return len(self.questions)

    @property
    def finished(self) -> bool:
        return self.index >= len(self.questions)


@dataclass
class SessionResult:
    recipe: Optional[Recipe] = None
    stars: Optional[int] = None
    total_elapsed: Optional[float] = None
    correct_count: int = 0
    question_count: int = 0


class RecipeOutcome(Enum):
    MATCH = "match"
    MISMATCH = "mismatch"
    LOCKED = "locked"
