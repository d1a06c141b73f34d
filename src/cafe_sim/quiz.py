"""Timed multiplication quiz engine."""
import logging
import random
import re
import time
from typing import Callable

from cafe_sim.config import MAX_WRONG_ATTEMPTS, QUIZ_OPERAND_RANGE, QUIZ_QUESTION_COUNT
from cafe_sim.errors import PreconditionViolation, QuizFinishedError
from cafe_sim.models import (
    AdvanceResult, QuizQuestion, QuizSession, QuizStatus, SubmitOutcome, SubmitResult,
)
from cafe_sim.rating import calculate_stars

logger = logging.getLogger(__name__)

_ANSWER_PATTERN = re.compile(r"[+-]?[0-9]+")


def generate_questions(
    count: int, operand_range: tuple[int, int], rng: random.Random | None = None
) -> list[QuizQuestion]:
    rng = rng or random.Random()
    low, high = operand_range
    return [QuizQuestion(rng.randint(low, high), rng.randint(low, high)) for _ in range(count)]


def start_quiz(
    question_count: int = QUIZ_QUESTION_COUNT,
    operand_range: tuple[int, int] = QUIZ_OPERAND_RANGE,
    rng: random.Random | None = None,
    clock: Callable[[], float] | None = None,
) -> QuizSession:
    """Generate the questions and start the session clock."""
    if question_count < 1:
        raise PreconditionViolation(f"A quiz needs at least one question, got {question_count}")
    low, high = operand_range
    if low > high:
        raise PreconditionViolation(f"Operand range {operand_range} is inverted")
    if question_count != QUIZ_QUESTION_COUNT:
        logger.warning(
            "Star thresholds are tuned for %d questions; rating %d questions with the same averages",
            QUIZ_QUESTION_COUNT, question_count,
        )
    clock = clock or time.monotonic
    session = QuizSession(
        questions=generate_questions(question_count, operand_range, rng),
        clock=clock,
    )
    session.started_at = clock()
    return session


def _parse_answer(raw_input: str | None) -> int | None:
    if raw_input is None:
        return None
    text = raw_input.strip()
    if not _ANSWER_PATTERN.fullmatch(text):
        return None
    return int(text)


def current_question(session: QuizSession) -> QuizQuestion | None:
    if session.finished:
        return None
    return session.questions[session.index]


def submit_answer(session: QuizSession, raw_input: str | None) -> SubmitResult:
    """Check a typed answer against the current question.

    Blank or non-numeric input is ignored without touching the session, as is
    anything typed while a revealed answer is on display.
    """
    if session.finished:
        raise QuizFinishedError("Quiz is already complete")
    if session.awaiting_advance:
        return SubmitResult(SubmitOutcome.IGNORED)
    answer = _parse_answer(raw_input)
    if answer is None:
        return SubmitResult(SubmitOutcome.IGNORED)

    question = session.questions[session.index]
    if answer == question.answer:
        session.correct_count += 1
        return SubmitResult(SubmitOutcome.CORRECT, progress=advance(session))

    session.wrong_attempts += 1
    if session.wrong_attempts >= MAX_WRONG_ATTEMPTS:
        # Caller shows the answer, waits, then calls advance()
        session.awaiting_advance = True
        return SubmitResult(SubmitOutcome.REVEALED, revealed_answer=question.answer)
    return SubmitResult(SubmitOutcome.RETRY)


def _since_start(session: QuizSession) -> float:
    # Sessions built without start_quiz have no clock reading yet
    if session.started_at is None:
        return 0.0
    return max(0.0, session.clock() - session.started_at)


def advance(session: QuizSession) -> AdvanceResult:
    """Move to the next question, finalizing the session after the last one."""
    if session.finished:
        raise QuizFinishedError("Quiz is already complete")
    session.index += 1
    session.wrong_attempts = 0
    session.awaiting_advance = False

    if session.finished:
        session.total_elapsed = _since_start(session)
        session.stars = calculate_stars(session.correct_count, session.question_count, session.total_elapsed)
        logger.info(
            "Quiz complete: %d/%d correct in %.1fs (%d stars)",
            session.correct_count, session.question_count, session.total_elapsed, session.stars,
        )
        return AdvanceResult(QuizStatus.COMPLETED, stars=session.stars, total_elapsed=session.total_elapsed)
    return AdvanceResult(QuizStatus.IN_PROGRESS, next_question=session.questions[session.index])


def elapsed_seconds(session: QuizSession) -> float:
    """Live timer reading; frozen at the final time once the quiz is done."""
    if session.total_elapsed is not None:
        return session.total_elapsed
    return _since_start(session)


def progress_fraction(session: QuizSession) -> float:
    return session.index / session.question_count
