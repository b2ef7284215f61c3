"""
Question catalog access.

Catalog is a read-only, ordered view over the admin-managed questions:
section (form order), then sort_order, then id.
CatalogService loads it from the store and carries the admin mutations.
"""
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Mapping, Optional

from perf_review.core.exceptions import NotFoundError
from perf_review.models.review_question import QuestionType, ReviewSection
from perf_review.services.base import BaseService


class Catalog:
    def __init__(self, questions: Iterable[Any]):
        self._questions = sorted(
            questions,
            key=lambda q: (ReviewSection(q.section).position, q.sort_order or 0, q.id),
        )
        self._by_id = {q.id: q for q in self._questions}

    def __iter__(self):
        return iter(self._questions)

    def __len__(self):
        return len(self._questions)

    def __contains__(self, question_id) -> bool:
        return question_id in self._by_id

    @property
    def questions(self) -> List[Any]:
        return list(self._questions)

    def get(self, question_id: int):
        return self._by_id.get(question_id)

    def by_section(self, section: ReviewSection) -> List[Any]:
        return [q for q in self._questions if q.section == section]

    def sections(self) -> "OrderedDict[ReviewSection, List[Any]]":
        grouped = OrderedDict((section, []) for section in ReviewSection)
        for question in self._questions:
            grouped[question.section].append(question)
        return grouped

    def required(self) -> List[Any]:
        return [q for q in self._questions if q.is_required]

    def rating_questions(self, section: Optional[ReviewSection] = None) -> List[Any]:
        questions = self.by_section(section) if section else self._questions
        return [q for q in questions if q.type == QuestionType.RATING]


class CatalogService(BaseService):
    async def load_catalog(self) -> Catalog:
        questions = await self.stores.questions.list(order_by=["sort_order", "id"])
        return Catalog(questions)

    async def list_questions(self) -> List[Any]:
        return (await self.load_catalog()).questions

    async def create_question(self, data: Mapping[str, Any]):
        question = await self.stores.questions.create(dict(data))
        self._logger.info(f"Question {question.id} added to {question.section.value}")
        return question

    async def update_question(self, question_id: int, changes: Mapping[str, Any]):
        question = await self.stores.questions.update(question_id, dict(changes))
        if question is None:
            raise NotFoundError("Question", question_id)
        self._logger.info(f"Question {question_id} updated: {sorted(changes)}")
        return question

    async def delete_question(self, question_id: int) -> None:
        """Hard delete. Responses already referencing the question stay in the store, orphaned."""
        deleted = await self.stores.questions.delete(question_id)
        if not deleted:
            raise NotFoundError("Question", question_id)
        self._logger.info(f"Question {question_id} deleted")
