import pytest
from perf_review.models.review_question import ReviewQuestion, ReviewSection, QuestionType
from perf_review.schemas.answers import RatingAnswer, TextAnswer
from perf_review.services.catalog import Catalog
from perf_review.services.scoring import final_score, round_half_up, section_score, section_scores

CC = ReviewSection.CORE_COMPETENCIES
GOALS = ReviewSection.GOALS_AND_DELIVERABLES
GROWTH = ReviewSection.GROWTH_AND_DEVELOPMENT


def _question(qid, section, qtype=QuestionType.RATING, required=True, order=0):
    return ReviewQuestion(id=qid, section=section, question_text=f"Q{qid}", type=qtype, is_required=required, sort_order=order)


@pytest.fixture
def catalog():
    return Catalog([
        _question(1, CC, order=1),
        _question(2, CC, order=2),
        _question(3, CC, order=3),
        _question(4, CC, order=4),
        _question(5, CC, order=5),
        _question(6, GOALS, QuestionType.LONG_TEXT),
        _question(7, GROWTH, order=1),
        _question(8, GROWTH, QuestionType.SHORT_TEXT, required=False, order=2),
    ])


def test_section_score_excludes_unrated_answers(catalog):
    """Scores [3,4,5,0,missing] average only the rated three."""
    answers = {1: RatingAnswer(score=3), 2: RatingAnswer(score=4), 3: RatingAnswer(score=5), 4: RatingAnswer(score=0)}
    assert section_score(catalog, answers, CC) == 4.00


def test_section_score_rounds_to_two_places(catalog):
    answers = {1: RatingAnswer(score=4), 2: RatingAnswer(score=4), 3: RatingAnswer(score=5)}
    assert section_score(catalog, answers, CC) == 4.33


def test_section_score_undefined_without_ratings(catalog):
    answers = {1: RatingAnswer(score=0), 2: RatingAnswer(score=None, comment="n/a")}
    assert section_score(catalog, answers, CC) is None
    assert section_score(catalog, {}, GOALS) is None


def test_section_score_ignores_other_sections(catalog):
    answers = {1: RatingAnswer(score=2), 7: RatingAnswer(score=5)}
    assert section_score(catalog, answers, CC) == 2.0
    assert section_score(catalog, answers, GROWTH) == 5.0


def test_section_scores_cover_every_section(catalog):
    scores = section_scores(catalog, {1: RatingAnswer(score=5)})
    assert list(scores) == [CC, GOALS, GROWTH]
    assert scores[CC] == 5.0
    assert scores[GOALS] is None


def test_final_score_spans_all_sections(catalog):
    """Manager scores {4,5,3,4} -> 4.0."""
    answers = {1: RatingAnswer(score=4), 2: RatingAnswer(score=5), 3: RatingAnswer(score=3), 7: RatingAnswer(score=4)}
    assert final_score(catalog, answers) == 4.0


def test_final_score_rounds_to_one_place(catalog):
    answers = {1: RatingAnswer(score=4), 2: RatingAnswer(score=4), 3: RatingAnswer(score=5)}
    assert final_score(catalog, answers) == 4.3


def test_final_score_ignores_text_and_unrated(catalog):
    answers = {
        1: RatingAnswer(score=5),
        2: RatingAnswer(score=0),
        6: TextAnswer(text="Delivered the roadmap"),
        8: TextAnswer(text="Kotlin"),
    }
    assert final_score(catalog, answers) == 5.0


def test_final_score_undefined_without_ratings(catalog):
    assert final_score(catalog, {}) is None
    assert final_score(catalog, {6: TextAnswer(text="Lots")}) is None


def test_round_half_up():
    assert round_half_up(4.25, 1) == 4.3
    assert round_half_up(2.675, 2) == 2.68
    assert round_half_up(3.0, 2) == 3.0
