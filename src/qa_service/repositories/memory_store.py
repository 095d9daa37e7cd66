"""
In-memory store.

Questions and answers live in two insertion-ordered dicts guarded by one
ReadWriteLock. Each operation takes the lock for exactly one read or one write;
the moderation call in `create_question` runs before the write lock is taken.
Callers always get copies, never the stored objects.
"""

import json
import logging
from pathlib import Path

from qa_service.core.locks import ReadWriteLock
from qa_service.exceptions import (
    QuestionAlreadyExistsError,
    QuestionNotFoundError,
    StorageError,
)
from qa_service.schemas import Answer, AnswerDraft, Question, QuestionDraft
from qa_service.services.moderation import Moderator
from .base_store import BaseStore, DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


class InMemoryStore(BaseStore):
    backend = "memory"

    def __init__(
        self,
        moderator: Moderator,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        allow_client_ids: bool = False,
        questions: list[Question] | None = None,
    ) -> None:
        super().__init__(moderator, default_page_size, allow_client_ids)
        self._lock = ReadWriteLock()
        self._questions: dict[int, Question] = {}
        self._answers: dict[int, Answer] = {}
        self._next_question_id = 1
        self._next_answer_id = 1

        for question in questions or []:
            if question.id in self._questions:
                raise QuestionAlreadyExistsError(question.id)
            self._questions[question.id] = question.model_copy(deep=True)
            self._next_question_id = max(self._next_question_id, question.id + 1)

    @classmethod
    def from_seed_file(cls, path: str | Path, moderator: Moderator, **kwargs) -> "InMemoryStore":
        """
        Build a store pre-filled from a JSON file.

        The file holds either a list of questions or an object keyed by id.
        Seeded content is trusted and not sent to moderation.
        """
        path = Path(path)
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            items = list(raw.values()) if isinstance(raw, dict) else raw
            # pydantic's ValidationError is a ValueError
            questions = [Question.model_validate(item) for item in items]
        except (OSError, ValueError) as exc:
            logger.error("store.seed.load_failed", extra={"path": str(path), "error_detail": str(exc)})
            raise StorageError("Could not load seed file") from exc

        logger.info("store.seed.loaded", extra={"path": str(path), "count": len(questions)})
        return cls(moderator, questions=questions, **kwargs)

    # ---------- questions ----------

    async def _list_questions(self, limit: int, offset: int) -> list[Question]:
        async with self._lock.read():
            page = list(self._questions.values())[offset:offset + limit]
            return [q.model_copy(deep=True) for q in page]

    async def count_questions(self) -> int:
        async with self._lock.read():
            return len(self._questions)

    async def get_question(self, question_id: int) -> Question:
        async with self._lock.read():
            question = self._questions.get(question_id)
            if question is None:
                raise QuestionNotFoundError(question_id)
            return question.model_copy(deep=True)

    async def _ensure_question_id_free(self, question_id: int) -> None:
        async with self._lock.read():
            if question_id in self._questions:
                raise QuestionAlreadyExistsError(question_id)

    async def _insert_question(self, draft: QuestionDraft) -> Question:
        async with self._lock.write():
            if draft.id is not None:
                if draft.id in self._questions:
                    raise QuestionAlreadyExistsError(draft.id)
                question_id = draft.id
            else:
                question_id = self._next_question_id
            self._next_question_id = max(self._next_question_id, question_id + 1)

            question = Question(
                id=question_id,
                title=draft.title,
                content=draft.content,
                tags=list(draft.tags) if draft.tags is not None else None,
            )
            self._questions[question_id] = question
            return question.model_copy(deep=True)

    async def update_question(self, question: Question) -> Question:
        async with self._lock.write():
            if question.id not in self._questions:
                raise QuestionNotFoundError(question.id)
            self._questions[question.id] = question.model_copy(deep=True)
        logger.info("store.update_question.success", extra={"backend": self.backend, "question_id": question.id})
        return question.model_copy(deep=True)

    async def delete_question(self, question_id: int) -> None:
        async with self._lock.write():
            if self._questions.pop(question_id, None) is None:
                raise QuestionNotFoundError(question_id)
            orphaned = [aid for aid, answer in self._answers.items() if answer.question_id == question_id]
            for aid in orphaned:
                del self._answers[aid]
        logger.info(
            "store.delete_question.success",
            extra={"backend": self.backend, "question_id": question_id, "answers_removed": len(orphaned)},
        )

    # ---------- answers ----------

    async def create_answer(self, draft: AnswerDraft) -> Answer:
        async with self._lock.write():
            if draft.question_id not in self._questions:
                raise QuestionNotFoundError(draft.question_id)
            answer = Answer(id=self._next_answer_id, content=draft.content, question_id=draft.question_id)
            self._answers[answer.id] = answer
            self._next_answer_id += 1
        logger.info(
            "store.create_answer.success",
            extra={"backend": self.backend, "answer_id": answer.id, "question_id": answer.question_id},
        )
        return answer.model_copy()

    async def list_answers(self, question_id: int) -> list[Answer]:
        async with self._lock.read():
            return [a.model_copy() for a in self._answers.values() if a.question_id == question_id]
