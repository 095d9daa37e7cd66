import json

import httpx
import pytest

from qa_service.exceptions import UpstreamClientError, UpstreamServerError, UpstreamUnreachableError
from qa_service.services.moderation import ModerationClient

URL = "https://moderation.test/bad_words"

SUCCESS_BODY = {
    "content": "a shit c",
    "bad_words_total": 1,
    "bad_words_list": [
        {"original": "shit", "word": "shit", "deviations": 0, "info": 2, "start": 2, "end": 6, "replacedLen": 4}
    ],
    "censored_content": "a **** c",
}


def make_client(handler, **kwargs) -> ModerationClient:
    transport = httpx.MockTransport(handler)
    return ModerationClient(URL, client=httpx.AsyncClient(transport=transport), **kwargs)


async def test_censor_sends_raw_text_with_key_and_censor_character():
    seen: dict = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["apikey"] = request.headers.get("apikey")
        seen["censor_character"] = request.url.params.get("censor_character")
        seen["body"] = request.content.decode()
        return httpx.Response(200, json=SUCCESS_BODY)

    client = make_client(handler, api_key="k-123", censor_character="#")
    result = await client.censor("a shit c")
    await client.aclose()

    assert seen == {"method": "POST", "apikey": "k-123", "censor_character": "#", "body": "a shit c"}
    assert result.censored_content == "a **** c"
    assert result.bad_words_total == 1
    assert result.bad_words_list[0].replaced_len == 4


async def test_api_key_header_is_omitted_when_not_configured():
    def handler(request: httpx.Request) -> httpx.Response:
        assert "apikey" not in request.headers
        return httpx.Response(200, json=SUCCESS_BODY)

    await make_client(handler).censor("text")


@pytest.mark.parametrize("status", [400, 401, 404, 429])
async def test_4xx_is_upstream_client_error(status):
    client = make_client(lambda request: httpx.Response(status, json={"message": "No API key found"}))

    with pytest.raises(UpstreamClientError) as info:
        await client.censor("text")

    assert info.value.status == status
    assert info.value.upstream_message == "No API key found"


@pytest.mark.parametrize("status", [500, 502, 503])
async def test_5xx_is_upstream_server_error(status):
    client = make_client(lambda request: httpx.Response(status, json={"message": "Internal error"}))

    with pytest.raises(UpstreamServerError) as info:
        await client.censor("text")

    assert info.value.status == status


async def test_other_non_success_status_is_upstream_server_error():
    client = make_client(lambda request: httpx.Response(302, headers={"location": "https://elsewhere.test"}))

    with pytest.raises(UpstreamServerError) as info:
        await client.censor("text")
    assert info.value.status == 302


async def test_non_json_error_body_falls_back_to_text():
    client = make_client(lambda request: httpx.Response(503, text="<html>down</html>"))

    with pytest.raises(UpstreamServerError) as info:
        await client.censor("text")
    assert info.value.upstream_message == "<html>down</html>"


async def test_transport_failure_is_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnreachableError) as info:
        await make_client(handler).censor("text")
    assert isinstance(info.value.__cause__, httpx.ConnectError)


async def test_timeout_is_unreachable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ReadTimeout("timed out", request=request)

    with pytest.raises(UpstreamUnreachableError):
        await make_client(handler).censor("text")


@pytest.mark.parametrize("body", [b"not json", json.dumps({"content": "x"}).encode()])
async def test_unparseable_success_body_is_unreachable(body):
    client = make_client(lambda request: httpx.Response(200, content=body))

    with pytest.raises(UpstreamUnreachableError):
        await client.censor("text")


def test_from_settings(settings):
    client = ModerationClient.from_settings(settings)
    assert client._url == settings.MODERATION_URL
    assert client._censor_character == settings.MODERATION_CENSOR_CHARACTER


def test_from_settings_warns_when_api_key_is_missing(settings, caplog):
    with caplog.at_level("WARNING", logger="qa_service.services.moderation"):
        ModerationClient.from_settings(settings.model_copy(update={"MODERATION_API_KEY": None}))
    assert any(r.message == "moderation.api_key_missing" for r in caplog.records)


def test_from_settings_is_quiet_with_an_api_key(settings, caplog):
    with caplog.at_level("WARNING", logger="qa_service.services.moderation"):
        ModerationClient.from_settings(settings.model_copy(update={"MODERATION_API_KEY": "k"}))
    assert not any(r.message == "moderation.api_key_missing" for r in caplog.records)
