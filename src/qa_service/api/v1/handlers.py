"""
Request handlers.

Each handler is one pass of Received -> Validated -> Delegated -> Responded:
validate the decoded inputs, make one store call, and turn the result into a
response. Failures are raised as taxonomy exceptions and rendered by the
exception handlers in `error_handlers.py`; nothing here retries.

The routes in `routes.py` only decode transport inputs and inject the store and
the request id, so these functions can be called directly in tests.
"""

import logging
from typing import Literal, Mapping

from fastapi import status
from fastapi.responses import JSONResponse, Response

from qa_service.exceptions import InvalidIdError, MissingParametersError
from qa_service.repositories import BaseStore
from qa_service.schemas import AnswerDraft, Question, QuestionDraft
from qa_service.validators import extract_index_range, extract_pagination, parse_bounded_int

logger = logging.getLogger(__name__)

PaginationStyle = Literal["offset", "range"]


def parse_question_id(raw: str) -> int:
    """Decode a path identity: a plain decimal integer in `[0, MAX_INT]`."""
    question_id = parse_bounded_int(raw)
    if question_id is None:
        raise InvalidIdError(f"Invalid question id: {raw[:32]!r}")
    return question_id


async def get_questions(
    params: Mapping[str, str],
    store: BaseStore,
    request_id: str,
    style: PaginationStyle = "offset",
) -> JSONResponse:
    logger.info("handler.get_questions.start", extra={"request_id": request_id, "style": style})

    if not params:
        questions = await store.list_questions()
    elif style == "range":
        total = await store.count_questions()
        bounds = extract_index_range(params, total)
        logger.debug(
            "handler.get_questions.range",
            extra={"request_id": request_id, "start": bounds.start, "end": bounds.end, "total": total},
        )
        questions = await store.list_questions(limit=len(bounds), offset=bounds.start)
    else:
        pagination = extract_pagination(params)
        logger.debug(
            "handler.get_questions.pagination",
            extra={"request_id": request_id, "offset": pagination.offset, "limit": pagination.limit},
        )
        questions = await store.list_questions(limit=pagination.limit, offset=pagination.offset)

    return JSONResponse(
        status_code=status.HTTP_200_OK,
        content=[q.model_dump(mode="json") for q in questions],
    )


async def add_question(store: BaseStore, draft: QuestionDraft, request_id: str) -> JSONResponse:
    logger.info("handler.add_question.start", extra={"request_id": request_id})
    question = await store.create_question(draft)
    logger.info("handler.add_question.success", extra={"request_id": request_id, "question_id": question.id})
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=question.model_dump(mode="json"))


async def update_question(
    question_id: int,
    store: BaseStore,
    question: Question,
    request_id: str,
) -> JSONResponse:
    logger.info("handler.update_question.start", extra={"request_id": request_id, "question_id": question_id})
    if question_id != question.id:
        logger.warning(
            "handler.update_question.id_mismatch",
            extra={"request_id": request_id, "path_id": question_id, "payload_id": question.id},
        )
        raise InvalidIdError("Path id does not match payload id")

    updated = await store.update_question(question)
    return JSONResponse(status_code=status.HTTP_202_ACCEPTED, content=updated.model_dump(mode="json"))


async def delete_question(question_id: int, store: BaseStore, request_id: str) -> Response:
    logger.info("handler.delete_question.start", extra={"request_id": request_id, "question_id": question_id})
    await store.delete_question(question_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


async def add_answer(
    question_id: int,
    store: BaseStore,
    params: Mapping[str, str],
    request_id: str,
) -> JSONResponse:
    logger.info("handler.add_answer.start", extra={"request_id": request_id, "question_id": question_id})
    content = params.get("content")
    if content is None:
        logger.warning("handler.add_answer.missing_content", extra={"request_id": request_id})
        raise MissingParametersError(fields=["content"])

    answer = await store.create_answer(AnswerDraft(content=content, question_id=question_id))
    return JSONResponse(status_code=status.HTTP_201_CREATED, content=answer.model_dump(mode="json"))
