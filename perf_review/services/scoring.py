"""
Scoring engine.

Section score: mean of the section's rating answers with score > 0, 2 decimal places.
Final score: mean of every rating answer with score > 0 across the whole form, 1 decimal place.
Unrated answers are left out of both numerator and denominator. No qualifying answers -> None.
Keep the two scopes and precisions independent.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Iterable, Optional

from perf_review.models.review_question import ReviewSection
from perf_review.schemas.answers import AnswerSet

SECTION_SCORE_PLACES = 2
FINAL_SCORE_PLACES = 1


def round_half_up(value: float, places: int) -> float:
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _mean_of_rated(questions: Iterable, answers: AnswerSet, places: int) -> Optional[float]:
    scores = []
    for question in questions:
        answer = answers.get(question.id)
        if answer is not None and answer.kind == "rating" and answer.is_rated:
            scores.append(answer.score)
    if not scores:
        return None
    return round_half_up(sum(scores) / len(scores), places)


def section_score(catalog, answers: AnswerSet, section: ReviewSection) -> Optional[float]:
    return _mean_of_rated(catalog.rating_questions(section), answers, SECTION_SCORE_PLACES)


def section_scores(catalog, answers: AnswerSet) -> Dict[ReviewSection, Optional[float]]:
    return {section: section_score(catalog, answers, section) for section in ReviewSection}


def final_score(catalog, answers: AnswerSet) -> Optional[float]:
    return _mean_of_rated(catalog.rating_questions(), answers, FINAL_SCORE_PLACES)
