import pytest
from perf_review.core.exceptions import AnswerValidationError
from perf_review.models.review_question import ReviewQuestion, ReviewSection, QuestionType
from perf_review.schemas.answers import RatingAnswer, TextAnswer, answers_from_rows, build_answer_set
from perf_review.services.catalog import Catalog
from perf_review.services.completion import ReviewRole, evaluate_completion


def _question(qid, section, qtype, required, order=0):
    return ReviewQuestion(id=qid, section=section, question_text=f"Q{qid}", type=qtype, is_required=required, sort_order=order)


@pytest.fixture
def catalog():
    return Catalog([
        _question(1, ReviewSection.CORE_COMPETENCIES, QuestionType.RATING, True, 1),
        _question(2, ReviewSection.CORE_COMPETENCIES, QuestionType.RATING, False, 2),
        _question(3, ReviewSection.GOALS_AND_DELIVERABLES, QuestionType.LONG_TEXT, True),
        _question(4, ReviewSection.GROWTH_AND_DEVELOPMENT, QuestionType.SHORT_TEXT, True),
    ])


class _Row:
    def __init__(self, question_id, score=None, response_text=None):
        self.question_id = question_id
        self.score = score
        self.response_text = response_text


def test_empty_answer_set_reports_all_required_missing(catalog):
    result = evaluate_completion(catalog, {})
    assert result.required_count == 3
    assert result.answered_count == 0
    assert result.percent == 0
    assert result.missing_question_ids == [1, 3, 4]
    assert not result.is_complete


def test_rating_needs_positive_score(catalog):
    result = evaluate_completion(catalog, {1: RatingAnswer(score=0, comment="thinking")})
    assert 1 in result.missing_question_ids


def test_blank_text_does_not_count(catalog):
    answers = {1: RatingAnswer(score=3), 3: TextAnswer(text="   \n"), 4: TextAnswer(text="Go")}
    result = evaluate_completion(catalog, answers)
    assert result.missing_question_ids == [3]
    assert round(result.percent, 2) == 66.67


def test_complete_when_every_required_answered(catalog):
    answers = {1: RatingAnswer(score=5), 3: TextAnswer(text="Shipped v2"), 4: TextAnswer(text="SQL")}
    result = evaluate_completion(catalog, answers)
    assert result.is_complete
    assert result.percent == 100


def test_no_required_questions_is_always_complete():
    catalog = Catalog([_question(1, ReviewSection.CORE_COMPETENCIES, QuestionType.RATING, False)])
    assert evaluate_completion(catalog, {}).percent == 100
    assert evaluate_completion(Catalog([]), {}).is_complete


def test_manager_role_only_tracks_required_ratings(catalog):
    result = evaluate_completion(catalog, {1: RatingAnswer(score=4)}, ReviewRole.MANAGER)
    assert result.required_count == 1
    assert result.is_complete


def test_build_answer_set_picks_variant_from_question_type(catalog):
    answers = build_answer_set(catalog, {"1": {"score": 4, "comment": "solid"}, 3: {"text": "Delivered"}})
    assert answers[1] == RatingAnswer(score=4, comment="solid")
    assert answers[3] == TextAnswer(text="Delivered")


def test_build_answer_set_rejects_unknown_question(catalog):
    with pytest.raises(AnswerValidationError) as exc:
        build_answer_set(catalog, {99: {"score": 3}})
    assert exc.value.details["question_ids"] == [99]


def test_build_answer_set_rejects_mismatched_kind(catalog):
    with pytest.raises(AnswerValidationError):
        build_answer_set(catalog, {1: {"kind": "text", "text": "five"}})


def test_build_answer_set_rejects_out_of_range_score(catalog):
    with pytest.raises(AnswerValidationError):
        build_answer_set(catalog, {1: {"score": 6}})


def test_answers_from_rows_skips_orphaned_questions(catalog):
    rows = [_Row(1, score=4, response_text="note"), _Row(3, response_text="Shipped"), _Row(42, score=5)]
    answers = answers_from_rows(catalog, rows)
    assert set(answers) == {1, 3}
    assert answers[1].comment == "note"
    assert answers[3] == TextAnswer(text="Shipped")


def test_catalog_orders_by_section_then_sort_order():
    catalog = Catalog([
        _question(10, ReviewSection.GROWTH_AND_DEVELOPMENT, QuestionType.RATING, True, 1),
        _question(11, ReviewSection.CORE_COMPETENCIES, QuestionType.RATING, True, 2),
        _question(12, ReviewSection.CORE_COMPETENCIES, QuestionType.RATING, True, 1),
        _question(13, ReviewSection.GOALS_AND_DELIVERABLES, QuestionType.LONG_TEXT, True, 0),
    ])
    assert [q.id for q in catalog] == [12, 11, 13, 10]
    assert [len(qs) for qs in catalog.sections().values()] == [2, 1, 1]
