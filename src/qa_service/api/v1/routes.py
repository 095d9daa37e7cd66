"""
HTTP routes.

Routes decode path, query and body, then call the matching handler. Path ids
are taken as strings so an undecodable id is reported as "No valid id provided"
rather than as a body validation error.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse

from qa_service.config.settings import Settings
from qa_service.core.dependencies import enforce_origin, get_app_settings, get_request_id, get_store
from qa_service.repositories import BaseStore
from qa_service.schemas import Answer, Question, QuestionDraft
from . import handlers

router = APIRouter(dependencies=[Depends(enforce_origin)])


@router.get("/questions", response_model=list[Question])
async def list_questions(
    request: Request,
    store: BaseStore = Depends(get_store),
    settings: Settings = Depends(get_app_settings),
    request_id: str = Depends(get_request_id),
):
    return await handlers.get_questions(
        dict(request.query_params), store, request_id, style=settings.PAGINATION_STYLE
    )


@router.post("/questions", status_code=201, response_model=Question)
async def create_question(
    draft: QuestionDraft,
    store: BaseStore = Depends(get_store),
    request_id: str = Depends(get_request_id),
):
    return await handlers.add_question(store, draft, request_id)


@router.put("/questions/{question_id}", status_code=202, response_model=Question)
async def update_question(
    question_id: str,
    question: Question,
    store: BaseStore = Depends(get_store),
    request_id: str = Depends(get_request_id),
):
    return await handlers.update_question(handlers.parse_question_id(question_id), store, question, request_id)


@router.delete("/questions/{question_id}", status_code=204)
async def delete_question(
    question_id: str,
    store: BaseStore = Depends(get_store),
    request_id: str = Depends(get_request_id),
):
    return await handlers.delete_question(handlers.parse_question_id(question_id), store, request_id)


@router.post("/questions/{question_id}/answers", status_code=201, response_model=Answer)
async def create_answer(
    question_id: str,
    request: Request,
    store: BaseStore = Depends(get_store),
    request_id: str = Depends(get_request_id),
):
    parsed_id = handlers.parse_question_id(question_id)
    form = await request.form()
    params = {key: value for key, value in form.items() if isinstance(value, str)}
    return await handlers.add_answer(parsed_id, store, params, request_id)


@router.get("/health", response_class=PlainTextResponse)
async def health() -> str:
    return "Alive"
