"""
Relational store over the `questions` and `answers` tables.

Each operation runs in its own transaction:

    async with db_error_handler("Question"):
        async with self._sessions.begin() as session:
            ...

`sessions.begin()` commits on success and rolls back on any exception;
`db_error_handler` then converts whatever escaped into a taxonomy exception
(integrity errors are classified, everything else becomes StorageError).
Connections come from the engine's bounded pool; a pool timeout surfaces as
StorageError as well.
"""

import logging

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from qa_service.exceptions import (
    QuestionAlreadyExistsError,
    QuestionNotFoundError,
    db_error_handler,
)
from qa_service.models import AnswerRecord, QuestionRecord
from qa_service.schemas import Answer, AnswerDraft, Question, QuestionDraft
from qa_service.services.moderation import Moderator
from .base_store import BaseStore, DEFAULT_PAGE_SIZE

logger = logging.getLogger(__name__)


class SqlStore(BaseStore):
    """
    Note: with `allow_client_ids` on Postgres, explicit ids do not advance the
    `questions.id` sequence. Mixing client and server ids can therefore collide
    later, which surfaces as QuestionAlreadyExistsError.
    """

    backend = "sql"

    def __init__(
        self,
        sessions: async_sessionmaker[AsyncSession],
        moderator: Moderator,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        allow_client_ids: bool = False,
    ) -> None:
        super().__init__(moderator, default_page_size, allow_client_ids)
        self._sessions = sessions

    # ---------- questions ----------

    async def _list_questions(self, limit: int, offset: int) -> list[Question]:
        async with db_error_handler("Question"):
            async with self._sessions() as session:
                query = (
                    select(QuestionRecord)
                    .order_by(QuestionRecord.id)
                    .offset(offset)
                    .limit(limit)
                )
                result = await session.execute(query)
                return [record.to_schema() for record in result.scalars().all()]

    async def count_questions(self) -> int:
        async with db_error_handler("Question"):
            async with self._sessions() as session:
                result = await session.execute(select(func.count()).select_from(QuestionRecord))
                return int(result.scalar_one())

    async def get_question(self, question_id: int) -> Question:
        async with db_error_handler("Question"):
            async with self._sessions() as session:
                record = await session.get(QuestionRecord, question_id)
                if record is None:
                    raise QuestionNotFoundError(question_id)
                return record.to_schema()

    async def _ensure_question_id_free(self, question_id: int) -> None:
        async with db_error_handler("Question"):
            async with self._sessions() as session:
                if await session.get(QuestionRecord, question_id) is not None:
                    raise QuestionAlreadyExistsError(question_id)

    async def _insert_question(self, draft: QuestionDraft) -> Question:
        async with db_error_handler("Question"):
            async with self._sessions.begin() as session:
                record = QuestionRecord(
                    title=draft.title,
                    content=draft.content,
                    tags=list(draft.tags) if draft.tags is not None else None,
                )
                if draft.id is not None:
                    record.id = draft.id
                session.add(record)
                # flush to get the generated id and surface unique violations here
                await session.flush()
                return record.to_schema()

    async def update_question(self, question: Question) -> Question:
        async with db_error_handler("Question"):
            async with self._sessions.begin() as session:
                record = await session.get(QuestionRecord, question.id)
                if record is None:
                    raise QuestionNotFoundError(question.id)
                record.title = question.title
                record.content = question.content
                record.tags = list(question.tags) if question.tags is not None else None
                await session.flush()
                updated = record.to_schema()
        logger.info("store.update_question.success", extra={"backend": self.backend, "question_id": question.id})
        return updated

    async def delete_question(self, question_id: int) -> None:
        async with db_error_handler("Question"):
            async with self._sessions.begin() as session:
                # explicit so SQLite (no FK enforcement by default) behaves like Postgres
                answers = await session.execute(
                    delete(AnswerRecord).where(AnswerRecord.question_id == question_id)
                )
                result = await session.execute(
                    delete(QuestionRecord).where(QuestionRecord.id == question_id)
                )
                if result.rowcount == 0:
                    raise QuestionNotFoundError(question_id)
        logger.info(
            "store.delete_question.success",
            extra={"backend": self.backend, "question_id": question_id, "answers_removed": answers.rowcount},
        )

    # ---------- answers ----------

    async def create_answer(self, draft: AnswerDraft) -> Answer:
        async with db_error_handler("Answer"):
            async with self._sessions.begin() as session:
                if await session.get(QuestionRecord, draft.question_id) is None:
                    raise QuestionNotFoundError(draft.question_id)
                record = AnswerRecord(content=draft.content, question_id=draft.question_id)
                session.add(record)
                await session.flush()
                answer = record.to_schema()
        logger.info(
            "store.create_answer.success",
            extra={"backend": self.backend, "answer_id": answer.id, "question_id": answer.question_id},
        )
        return answer

    async def list_answers(self, question_id: int) -> list[Answer]:
        async with db_error_handler("Answer"):
            async with self._sessions() as session:
                result = await session.execute(
                    select(AnswerRecord)
                    .where(AnswerRecord.question_id == question_id)
                    .order_by(AnswerRecord.id)
                )
                return [record.to_schema() for record in result.scalars().all()]
