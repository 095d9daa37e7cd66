"""Handlers called directly, without the HTTP layer."""

import json

import pytest

from qa_service.api.v1 import handlers
from qa_service.exceptions import (
    InvalidIdError,
    MissingParametersError,
    ParameterParseError,
    QuestionNotFoundError,
    RangeInvertedError,
)
from qa_service.schemas import Question, QuestionDraft

REQUEST_ID = "req-test"


def body(response):
    return json.loads(response.body)


async def _seed(store, count: int) -> list[Question]:
    return [await store.create_question(QuestionDraft(title=f"q{i}", content="c")) for i in range(count)]


async def test_get_questions_on_empty_store(memory_store):
    response = await handlers.get_questions({}, memory_store, REQUEST_ID)
    assert response.status_code == 200
    assert body(response) == []


async def test_get_questions_without_params_returns_default_page(memory_store):
    await _seed(memory_store, 12)
    response = await handlers.get_questions({}, memory_store, REQUEST_ID)
    assert len(body(response)) == 10


async def test_get_questions_offset_limit(memory_store):
    seeded = await _seed(memory_store, 6)
    response = await handlers.get_questions({"offset": "1", "limit": "3"}, memory_store, REQUEST_ID)
    assert [q["id"] for q in body(response)] == [q.id for q in seeded[1:4]]


async def test_get_questions_offset_equal_limit_at_end_is_empty(memory_store):
    await _seed(memory_store, 3)
    response = await handlers.get_questions({"offset": "3", "limit": "3"}, memory_store, REQUEST_ID)
    assert body(response) == []


async def test_get_questions_range_style_slices_clamped_bounds(memory_store):
    seeded = await _seed(memory_store, 5)
    response = await handlers.get_questions({"start": "3", "end": "50"}, memory_store, REQUEST_ID, style="range")
    assert [q["id"] for q in body(response)] == [q.id for q in seeded[3:5]]


@pytest.mark.parametrize(
    "params, style, error",
    [
        ({"offset": "1"}, "offset", MissingParametersError),
        ({"unrelated": "1"}, "offset", MissingParametersError),
        ({"offset": "x", "limit": "1"}, "offset", ParameterParseError),
        ({"offset": "5", "limit": "1"}, "offset", RangeInvertedError),
        ({"start": "5", "end": "1"}, "range", RangeInvertedError),
        ({"end": "1"}, "range", MissingParametersError),
    ],
)
async def test_get_questions_rejects_bad_params(memory_store, params, style, error):
    with pytest.raises(error):
        await handlers.get_questions(params, memory_store, REQUEST_ID, style=style)


async def test_add_question(memory_store, question_draft):
    response = await handlers.add_question(memory_store, question_draft, REQUEST_ID)
    assert response.status_code == 201
    assert body(response) == {"id": 1, "title": "T", "content": "C", "tags": ["a"]}


async def test_update_question(memory_store, question_draft):
    created = await memory_store.create_question(question_draft)
    replacement = Question(id=created.id, title="new", content="body", tags=["x"])

    response = await handlers.update_question(created.id, memory_store, replacement, REQUEST_ID)

    assert response.status_code == 202
    assert body(response) == replacement.model_dump()


async def test_update_id_mismatch_is_rejected_before_store_access():
    class UntouchableStore:
        def __getattr__(self, name):
            raise AssertionError(f"store.{name} must not be used")

    with pytest.raises(InvalidIdError):
        await handlers.update_question(5, UntouchableStore(), Question(id=7, title="t", content="c"), REQUEST_ID)


async def test_update_unknown_question(memory_store):
    with pytest.raises(QuestionNotFoundError):
        await handlers.update_question(3, memory_store, Question(id=3, title="t", content="c"), REQUEST_ID)


async def test_delete_question(memory_store, question_draft):
    created = await memory_store.create_question(question_draft)

    response = await handlers.delete_question(created.id, memory_store, REQUEST_ID)

    assert response.status_code == 204
    assert response.body == b""
    assert await memory_store.count_questions() == 0


async def test_add_answer(memory_store, question_draft):
    created = await memory_store.create_question(question_draft)

    response = await handlers.add_answer(created.id, memory_store, {"content": "x"}, REQUEST_ID)

    assert response.status_code == 201
    assert body(response) == {"id": 1, "content": "x", "question_id": created.id}


async def test_add_answer_without_content(memory_store, question_draft):
    created = await memory_store.create_question(question_draft)
    with pytest.raises(MissingParametersError):
        await handlers.add_answer(created.id, memory_store, {}, REQUEST_ID)


async def test_add_answer_unknown_question(memory_store):
    with pytest.raises(QuestionNotFoundError):
        await handlers.add_answer(99, memory_store, {"content": "x"}, REQUEST_ID)


@pytest.mark.parametrize("raw, expected", [("0", 0), ("12", 12), ("2147483647", 2147483647)])
def test_parse_question_id(raw, expected):
    assert handlers.parse_question_id(raw) == expected


@pytest.mark.parametrize("raw", ["abc", "-1", "1.0", "", "١", "2147483648", "99999999999999999999", "1" * 5000])
def test_parse_question_id_rejects(raw):
    with pytest.raises(InvalidIdError):
        handlers.parse_question_id(raw)


async def test_handlers_log_the_request_id(memory_store, caplog):
    await handlers.get_questions({}, memory_store, "corr-42")
    assert any(getattr(r, "request_id", None) == "corr-42" for r in caplog.records)
