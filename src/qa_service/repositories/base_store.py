"""
Store interface shared by the in-memory and the relational backends.

`BaseStore` owns the parts of the contract that do not depend on where the data
lives: default paging, client-supplied id policy, and the moderation call that
precedes every question insert. Backends implement the storage primitives.

Every operation either returns domain schemas (`Question`, `Answer`) or raises a
taxonomy exception (`QuestionNotFoundError`, `QuestionAlreadyExistsError`,
`StorageError`, or an upstream error from moderation). Backend exceptions never
cross this boundary.
"""

import logging
from abc import ABC, abstractmethod

from qa_service.schemas import Answer, AnswerDraft, Question, QuestionDraft
from qa_service.services.moderation import Moderator

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 10


class BaseStore(ABC):
    """
    Args:
        moderator: censors question content before it is stored.
        default_page_size: limit applied by list_questions() when none is given.
        allow_client_ids: honour `QuestionDraft.id` instead of always assigning one.
    """

    backend: str = "base"

    def __init__(
        self,
        moderator: Moderator,
        default_page_size: int = DEFAULT_PAGE_SIZE,
        allow_client_ids: bool = False,
    ) -> None:
        self._moderator = moderator
        self.default_page_size = default_page_size
        self.allow_client_ids = allow_client_ids

    # ---------- questions ----------

    async def list_questions(self, limit: int | None = None, offset: int | None = None) -> list[Question]:
        """
        Return one page of questions in stable order.

        `limit=None` means the default page size; `limit=0` is an empty page.
        """
        resolved_limit = self.default_page_size if limit is None else limit
        resolved_offset = 0 if offset is None else offset
        questions = await self._list_questions(resolved_limit, resolved_offset)
        logger.debug(
            "store.list_questions.success",
            extra={"backend": self.backend, "limit": resolved_limit, "offset": resolved_offset, "count": len(questions)},
        )
        return questions

    async def create_question(self, draft: QuestionDraft) -> Question:
        """
        Moderate the draft's content, then insert the censored version.

        Moderation finishes (or fails) before anything is written, so a failed
        moderation call leaves the store untouched.
        """
        if not self.allow_client_ids:
            draft = draft.model_copy(update={"id": None})
        elif draft.id is not None:
            # fail fast before spending a moderation call; the insert re-checks
            await self._ensure_question_id_free(draft.id)

        result = await self._moderator.censor(draft.content)
        moderated = draft.model_copy(update={"content": result.censored_content})

        question = await self._insert_question(moderated)
        logger.info(
            "store.create_question.success",
            extra={"backend": self.backend, "question_id": question.id, "bad_words_total": result.bad_words_total},
        )
        return question

    @abstractmethod
    async def count_questions(self) -> int: ...

    @abstractmethod
    async def get_question(self, question_id: int) -> Question: ...

    @abstractmethod
    async def update_question(self, question: Question) -> Question: ...

    @abstractmethod
    async def delete_question(self, question_id: int) -> None: ...

    # ---------- answers ----------

    @abstractmethod
    async def create_answer(self, draft: AnswerDraft) -> Answer: ...

    @abstractmethod
    async def list_answers(self, question_id: int) -> list[Answer]: ...

    # ---------- backend primitives ----------

    @abstractmethod
    async def _list_questions(self, limit: int, offset: int) -> list[Question]: ...

    @abstractmethod
    async def _ensure_question_id_free(self, question_id: int) -> None: ...

    @abstractmethod
    async def _insert_question(self, draft: QuestionDraft) -> Question: ...

    async def close(self) -> None:
        """Release backend resources. The in-memory store has none."""
