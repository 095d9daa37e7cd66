"""End-to-end HTTP behaviour through FastAPI's TestClient."""

import pytest
from starlette.testclient import TestClient

from qa_service.exceptions import StorageError, UpstreamServerError
from qa_service.main import create_app
from qa_service.repositories import InMemoryStore


def create(client, title="T", content="C", tags=None):
    response = client.post("/questions", json={"title": title, "content": content, "tags": tags})
    assert response.status_code == 201
    return response.json()


def assert_error(response, status, detail):
    assert response.status_code == status
    assert response.json()["detail"] == detail


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.text == "Alive"


def test_empty_listing(client):
    response = client.get("/questions")
    assert response.status_code == 200
    assert response.json() == []


def test_create_and_list(client):
    created = create(client, content="a shit c", tags=["a"])

    assert created["content"] == "a **** c"
    assert client.get("/questions").json() == [created]


def test_pagination(client):
    ids = [create(client, title=str(i))["id"] for i in range(5)]

    response = client.get("/questions", params={"offset": "1", "limit": "3"})

    assert [q["id"] for q in response.json()] == ids[1:4]


@pytest.mark.parametrize(
    "params, status, detail",
    [
        ({"offset": "1"}, 400, "Missing parameters"),
        ({"offset": "a", "limit": "2"}, 400, "Parse error"),
        ({"offset": "3", "limit": "2"}, 400, "Offset cannot be greater than limit"),
    ],
)
def test_bad_pagination(client, params, status, detail):
    assert_error(client.get("/questions", params=params), status, detail)


def test_range_pagination_style(settings, memory_store):
    app = create_app(settings=settings.model_copy(update={"PAGINATION_STYLE": "range"}), store=memory_store)
    with TestClient(app) as client:
        ids = [create(client, title=str(i))["id"] for i in range(4)]

        response = client.get("/questions", params={"start": "2", "end": "99"})
        assert [q["id"] for q in response.json()] == ids[2:]

        assert_error(
            client.get("/questions", params={"start": "3", "end": "1"}),
            400,
            "Start cannot be greater than end",
        )


def test_invalid_body_is_body_deserialize_error(client):
    response = client.post("/questions", json={"title": "missing content"})
    assert_error(response, 422, "Body deserialize error")
    assert response.json()["code"] == "body_deserialize"


def test_update(client):
    created = create(client)
    replacement = {**created, "title": "new"}

    response = client.put(f"/questions/{created['id']}", json=replacement)

    assert response.status_code == 202
    assert response.json() == replacement


def test_update_id_mismatch(client):
    created = create(client)
    response = client.put(f"/questions/{created['id']}", json={**created, "id": created["id"] + 1})
    assert_error(response, 422, "No valid id provided")


def test_update_unparseable_path_id(client):
    response = client.put("/questions/abc", json={"id": 1, "title": "t", "content": "c"})
    assert_error(response, 422, "No valid id provided")


def test_delete(client):
    created = create(client)

    response = client.delete(f"/questions/{created['id']}")

    assert response.status_code == 204
    assert response.content == b""
    assert client.get("/questions").json() == []


def test_delete_missing_twice(client):
    for _ in range(2):
        assert_error(client.delete("/questions/77"), 404, "Question not found")


def test_add_answer(client):
    created = create(client)

    response = client.post(f"/questions/{created['id']}/answers", data={"content": "an answer"})

    assert response.status_code == 201
    assert response.json() == {"id": 1, "content": "an answer", "question_id": created["id"]}


def test_add_answer_missing_content(client):
    created = create(client)
    response = client.post(f"/questions/{created['id']}/answers", data={"other": "x"})
    assert_error(response, 400, "Missing parameters")


def test_add_answer_unknown_question(client):
    assert_error(client.post("/questions/5/answers", data={"content": "x"}), 404, "Question not found")


def test_unknown_route(client):
    assert_error(client.get("/nowhere"), 404, "Route not found")


def test_unsupported_method(client):
    assert_error(client.patch("/questions"), 404, "Route not found")


def test_moderation_failure_is_502(client, moderator):
    moderator.error = UpstreamServerError(503, "maintenance")

    response = client.post("/questions", json={"title": "T", "content": "C"})

    assert_error(response, 502, "External Server error")
    assert "maintenance" not in response.text
    assert client.get("/questions").json() == []


def test_storage_failure_is_500(settings, moderator):
    class BrokenStore(InMemoryStore):
        async def _list_questions(self, limit, offset):
            raise StorageError()

    with TestClient(create_app(settings=settings, store=BrokenStore(moderator))) as client:
        assert_error(client.get("/questions"), 500, "Query could not be executed")


def test_request_id_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "abc-123"})
    assert response.headers["X-Request-ID"] == "abc-123"


def test_request_id_is_generated_for_unsafe_values(client):
    response = client.get("/health", headers={"X-Request-ID": "bad id\nwith newline"})
    assert response.headers["X-Request-ID"] != "bad id\nwith newline"


def test_disallowed_origin_is_forbidden(settings, memory_store):
    restricted = settings.model_copy(update={"CORS_ALLOW_ORIGINS": ["https://ok.example"]})
    with TestClient(create_app(settings=restricted, store=memory_store)) as client:
        allowed = client.get("/questions", headers={"Origin": "https://ok.example"})
        assert allowed.status_code == 200

        response = client.get("/questions", headers={"Origin": "https://evil.example"})
        assert response.status_code == 403
        assert "https://evil.example" in response.json()["detail"]


def test_disallowed_origin_preflight_is_forbidden(settings, memory_store):
    restricted = settings.model_copy(update={"CORS_ALLOW_ORIGINS": ["https://ok.example"]})
    preflight = {"Access-Control-Request-Method": "GET"}
    with TestClient(create_app(settings=restricted, store=memory_store)) as client:
        allowed = client.options("/questions", headers={**preflight, "Origin": "https://ok.example"})
        assert allowed.status_code == 200
        assert allowed.headers["access-control-allow-origin"] == "https://ok.example"

        response = client.options("/questions", headers={**preflight, "Origin": "https://evil.example"})
        assert response.status_code == 403
        assert response.json()["code"] == "cors_forbidden"
        assert "https://evil.example" in response.json()["detail"]


def test_oversized_limit_is_parse_error(client):
    assert_error(client.get("/questions", params={"offset": "0", "limit": "9" * 5000}), 400, "Parse error")


def test_oversized_path_id_is_invalid_id(client):
    assert_error(client.delete("/questions/99999999999999999999"), 422, "No valid id provided")
