"""
Side-by-side view of one session: catalog order, employee answer and manager answer
per question, plus a live final-score preview computed with the same formula used
at completion. Read-only.
"""
from typing import Any, Mapping, Optional

from perf_review.schemas.answers import build_answer_set
from perf_review.schemas.question import QuestionResponse
from perf_review.schemas.review import ComparisonItem, ComparisonSection, ReviewComparison, SessionResponse
from perf_review.services.base import BaseService
from perf_review.services.completion import ReviewRole, evaluate_completion
from perf_review.services.review_session import ReviewSessionService
from perf_review.services.scoring import final_score, section_scores


class ReconciliationService(BaseService):
    async def build(
        self,
        session_id: int,
        draft: Optional[Mapping[Any, Any]] = None,
        draft_overall_comment: Optional[str] = None,
    ) -> ReviewComparison:
        """
        Assemble the comparison. A manager `draft` overlays the stored manager answers
        so the preview follows every unsaved edit.
        """
        sessions = ReviewSessionService(self.stores)
        session = await sessions.get_session(session_id)
        catalog = await sessions.catalog_service.load_catalog()

        employee_answers = await sessions.get_answers(session_id, ReviewRole.EMPLOYEE, catalog)
        manager_answers = await sessions.get_answers(session_id, ReviewRole.MANAGER, catalog)
        if draft:
            manager_answers = {**manager_answers, **build_answer_set(catalog, draft)}

        grouped = [
            ComparisonSection(
                section=section,
                items=[
                    ComparisonItem(
                        question=QuestionResponse.model_validate(question),
                        employee_answer=employee_answers.get(question.id),
                        manager_answer=manager_answers.get(question.id),
                    )
                    for question in questions
                ],
            )
            for section, questions in catalog.sections().items()
        ]

        return ReviewComparison(
            session=SessionResponse.model_validate(session),
            sections=grouped,
            employee_section_scores=section_scores(catalog, employee_answers),
            manager_completion=evaluate_completion(catalog, manager_answers, ReviewRole.MANAGER),
            final_score_preview=final_score(catalog, manager_answers),
            overall_comment=draft_overall_comment if draft_overall_comment is not None else session.overall_comment,
        )
