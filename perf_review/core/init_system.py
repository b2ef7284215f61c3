import logging
from perf_review.models.review_question import QuestionType, ReviewSection
from perf_review.store import ReviewStores

logger = logging.getLogger(__name__)

DEFAULT_QUESTIONS = [
    (ReviewSection.CORE_COMPETENCIES, "Communication: shares information clearly and listens actively.", QuestionType.RATING, True),
    (ReviewSection.CORE_COMPETENCIES, "Collaboration: works effectively with others toward shared goals.", QuestionType.RATING, True),
    (ReviewSection.CORE_COMPETENCIES, "Problem solving: analyses issues and delivers practical solutions.", QuestionType.RATING, True),
    (ReviewSection.CORE_COMPETENCIES, "Ownership: takes responsibility for outcomes and follows through.", QuestionType.RATING, True),
    (ReviewSection.GOALS_AND_DELIVERABLES, "What were your most significant contributions this period?", QuestionType.LONG_TEXT, True),
    (ReviewSection.GOALS_AND_DELIVERABLES, "Which goals did you not reach, and what got in the way?", QuestionType.LONG_TEXT, False),
    (ReviewSection.GROWTH_AND_DEVELOPMENT, "How much have you grown in your role this period?", QuestionType.RATING, True),
    (ReviewSection.GROWTH_AND_DEVELOPMENT, "What support do you need to keep growing?", QuestionType.LONG_TEXT, False),
    (ReviewSection.GROWTH_AND_DEVELOPMENT, "One skill you want to build next cycle", QuestionType.SHORT_TEXT, False),
]


async def init_system_data(stores: ReviewStores):
    """
    Seeds the default questionnaire when the catalog is empty.
    An existing catalog is never touched.
    """
    existing = await stores.questions.list(limit=1)
    if existing:
        logger.info("Question catalog already present, skipping seed")
        return 0

    logger.info("Seeding default question catalog...")
    for order, (section, text, qtype, required) in enumerate(DEFAULT_QUESTIONS, start=1):
        await stores.questions.create({
            "section": section,
            "question_text": text,
            "type": qtype,
            "is_required": required,
            "points": 1 if qtype == QuestionType.RATING else 0,
            "sort_order": order,
        })
    logger.info(f"✓ Seeded {len(DEFAULT_QUESTIONS)} default questions")
    return len(DEFAULT_QUESTIONS)
