# tests/test_quiz.py
import random

import pytest

from cafe_sim.errors import PreconditionViolation, QuizFinishedError
from cafe_sim.models import QuizQuestion, QuizSession, QuizStatus, SubmitOutcome
from cafe_sim.quiz import (
    advance, current_question, elapsed_seconds, generate_questions, progress_fraction,
    start_quiz, submit_answer,
)


def _session(clock, *pairs):
    session = QuizSession(questions=[QuizQuestion(a, b) for a, b in pairs], clock=clock)
    session.started_at = clock()
    return session


def test_start_quiz_defaults(rng, clock):
    session = start_quiz(rng=rng, clock=clock)
    assert session.question_count == 3
    assert session.index == 0
    assert session.correct_count == 0
    assert session.started_at == clock.now
    for q in session.questions:
        assert 1 <= q.a <= 12
        assert 1 <= q.b <= 12
        assert q.answer == q.a * q.b


def test_generate_questions_inclusive_range():
    questions = generate_questions(500, (2, 3), random.Random(7))
    operands = {q.a for q in questions} | {q.b for q in questions}
    assert operands == {2, 3}


def test_start_quiz_rejects_bad_config(clock):
    with pytest.raises(PreconditionViolation):
        start_quiz(question_count=0, clock=clock)
    with pytest.raises(PreconditionViolation):
        start_quiz(operand_range=(12, 1), clock=clock)


def test_correct_answer(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    result = submit_answer(session, "56")
    assert result.outcome is SubmitOutcome.CORRECT
    assert session.correct_count == 1
    assert session.index == 1
    assert result.progress.status is QuizStatus.IN_PROGRESS
    assert result.progress.next_question == QuizQuestion(2, 3)


def test_empty_input_ignored(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    for raw in ("", "   ", None, "abc", "5.6", "5_6", "\u0665\u0666", "12abc"):
        result = submit_answer(session, raw)
        assert result.outcome is SubmitOutcome.IGNORED
    assert session.wrong_attempts == 0
    assert session.index == 0
    assert session.correct_count == 0


def test_whitespace_around_answer_accepted(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    assert submit_answer(session, " 56 ").outcome is SubmitOutcome.CORRECT


def test_three_wrong_answers_reveal(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    outcomes = [submit_answer(session, "1") for _ in range(3)]
    assert [r.outcome for r in outcomes] == [SubmitOutcome.RETRY, SubmitOutcome.RETRY, SubmitOutcome.REVEALED]
    assert outcomes[2].revealed_answer == 56
    assert outcomes[0].revealed_answer is None
    assert session.wrong_attempts == 3
    assert session.index == 0
    assert session.awaiting_advance is True


def test_input_ignored_while_reveal_pending(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    for _ in range(3):
        submit_answer(session, "1")
    result = submit_answer(session, "56")
    assert result.outcome is SubmitOutcome.IGNORED
    assert session.correct_count == 0
    assert session.wrong_attempts == 3


def test_advance_after_reveal_resets_attempts(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    for _ in range(3):
        submit_answer(session, "1")
    progress = advance(session)
    assert progress.status is QuizStatus.IN_PROGRESS
    assert session.index == 1
    assert session.wrong_attempts == 0
    assert session.awaiting_advance is False
    assert current_question(session) == QuizQuestion(2, 3)


def test_wrong_then_right_keeps_full_credit(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    assert submit_answer(session, "55").outcome is SubmitOutcome.RETRY
    assert submit_answer(session, "56").outcome is SubmitOutcome.CORRECT
    assert session.correct_count == 1
    assert session.wrong_attempts == 0


def test_three_correct_completes(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    submit_answer(session, "56")
    submit_answer(session, "6")
    clock.advance(6.0)
    result = submit_answer(session, "20")
    assert result.outcome is SubmitOutcome.CORRECT
    assert result.progress.completed
    assert result.progress.stars == 5
    assert result.progress.total_elapsed == pytest.approx(6.0)
    assert session.finished
    assert session.stars == 5


def test_completed_session_not_resubmittable(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    for raw in ("56", "6", "20"):
        submit_answer(session, raw)
    with pytest.raises(QuizFinishedError):
        submit_answer(session, "1")
    with pytest.raises(QuizFinishedError):
        advance(session)
    assert session.index == 3


def test_star_rating_from_timing(clock):
    for seconds_per_question, expected in ((1, 5), (4, 4), (10, 3)):
        session = _session(clock, (7, 8), (2, 3), (4, 5))
        for raw in ("56", "6", "20"):
            clock.advance(seconds_per_question)
            result = submit_answer(session, raw)
        assert result.progress.stars == expected


def test_one_miss_gives_two_stars(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    submit_answer(session, "56")
    for _ in range(3):
        submit_answer(session, "0")
    advance(session)
    result = submit_answer(session, "20")
    assert result.progress.stars == 2
    assert session.correct_count == 2


def test_reveal_on_last_question_completes_on_advance(clock):
    session = _session(clock, (7, 8))
    for _ in range(3):
        submit_answer(session, "0")
    progress = advance(session)
    assert progress.completed
    assert progress.stars == 1


def test_elapsed_seconds_live_then_frozen(clock):
    session = _session(clock, (7, 8))
    assert elapsed_seconds(session) == 0
    clock.advance(1.5)
    assert elapsed_seconds(session) == pytest.approx(1.5)
    submit_answer(session, "56")
    clock.advance(30)
    assert elapsed_seconds(session) == pytest.approx(1.5)


def test_elapsed_seconds_non_decreasing(clock):
    session = _session(clock, (7, 8), (2, 3))
    readings = []
    for _ in range(5):
        clock.advance(0.3)
        readings.append(elapsed_seconds(session))
    assert readings == sorted(readings)


def test_progress_fraction(clock):
    session = _session(clock, (7, 8), (2, 3), (4, 5))
    assert progress_fraction(session) == 0
    submit_answer(session, "56")
    assert progress_fraction(session) == pytest.approx(1 / 3)


def test_current_question_none_when_finished(clock):
    session = _session(clock, (7, 8))
    submit_answer(session, "56")
    assert current_question(session) is None


def test_signed_ascii_answer_accepted(clock):
    session = _session(clock, (7, 8))
    assert submit_answer(session, " +56 ").outcome is SubmitOutcome.CORRECT


def test_unstarted_session_reads_zero_elapsed(clock):
    clock.advance(500)
    session = QuizSession(questions=[QuizQuestion(7, 8)], clock=clock)
    assert elapsed_seconds(session) == 0.0
    progress = submit_answer(session, "56").progress
    assert progress.total_elapsed == 0.0
    assert progress.stars == 5
