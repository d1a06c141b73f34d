"""Star rating for the arithmetic quiz."""
from cafe_sim.config import FAST_AVERAGE_SECONDS, STEADY_AVERAGE_SECONDS


def calculate_stars(correct: int, question_count: int, total_elapsed: float) -> int:
    """Rate a finished quiz from 1 to 5 stars.

    Args:
        correct: Number of questions answered correctly
        question_count: Number of questions in the quiz
        total_elapsed: Seconds from quiz start to completion

    Returns:
        5/4/3 stars for a perfect quiz depending on the average seconds per
        question, 2 stars for one miss with at least one right, 1 star otherwise.
    """
    avg = total_elapsed / question_count
    if correct == question_count:
        if avg < FAST_AVERAGE_SECONDS:
            return 5
        elif avg <= STEADY_AVERAGE_SECONDS:
            return 4
        return 3
    elif correct == question_count - 1 and correct > 0:
        return 2
    return 1


def star_label(stars: int) -> str:
    if stars >= 5:
        return "PERFECT"
    elif stars == 4:
        return "GREAT"
    elif stars == 3:
        return "GOOD"
    elif stars == 2:
        return "ALMOST"
    return "KEEP PRACTICING"


def star_color(stars: int) -> str:
    if stars >= 5:
        return "green"
    elif stars >= 4:
        return "yellow"
    elif stars >= 3:
        return "dark_orange"
    return "red"


def format_stars(stars: int, out_of: int = 5) -> str:
    return "★" * stars + "☆" * (out_of - stars)
