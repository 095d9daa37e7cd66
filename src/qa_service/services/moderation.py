"""
Client for the external profanity-filter service.

Question content is POSTed as the raw request body; the service answers with
the censored text and the list of words it replaced:

    POST {MODERATION_URL}?censor_character=*
    apikey: <key>

    200 {"content": ..., "bad_words_total": 1, "bad_words_list": [...], "censored_content": ...}
    4xx/5xx {"message": ...}

Failures are classified into the error taxonomy:

    4xx                          -> UpstreamClientError(status, message)
    5xx or any other non-2xx     -> UpstreamServerError(status, message)
    no response / unusable body  -> UpstreamUnreachableError

Nothing is retried; a failed call fails the request that triggered it.
"""

import logging
from typing import Protocol

import httpx
from pydantic import ValidationError

from qa_service.config.settings import Settings
from qa_service.exceptions import (
    UpstreamClientError,
    UpstreamServerError,
    UpstreamUnreachableError,
)
from qa_service.schemas import ModerationErrorBody, ModerationResult

logger = logging.getLogger(__name__)


class Moderator(Protocol):
    async def censor(self, text: str) -> ModerationResult: ...


def _error_message(response: httpx.Response) -> str:
    try:
        return ModerationErrorBody.model_validate_json(response.content).message
    except ValidationError:
        return response.text[:200]


class ModerationClient:
    """
    Args:
        url: moderation endpoint.
        api_key: sent in the `apikey` header when set.
        censor_character: replacement character, sent as the `censor_character` query parameter.
        timeout: seconds for the whole call (connect + read).
        client: optional shared httpx.AsyncClient. When omitted a client is opened per call.
    """

    def __init__(
        self,
        url: str,
        api_key: str | None = None,
        censor_character: str = "*",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._url = url
        self._api_key = api_key
        self._censor_character = censor_character
        self._timeout = timeout
        self._client = client

    @classmethod
    def from_settings(cls, settings: Settings, client: httpx.AsyncClient | None = None) -> "ModerationClient":
        if not settings.MODERATION_API_KEY:
            logger.warning(
                "moderation.api_key_missing",
                extra={"moderation_url": settings.MODERATION_URL},
            )
        return cls(
            url=settings.MODERATION_URL,
            api_key=settings.MODERATION_API_KEY,
            censor_character=settings.MODERATION_CENSOR_CHARACTER,
            timeout=settings.MODERATION_TIMEOUT,
            client=client,
        )

    def _headers(self) -> dict[str, str]:
        headers = {"Content-Type": "text/plain; charset=utf-8"}
        if self._api_key:
            headers["apikey"] = self._api_key
        return headers

    async def _post(self, client: httpx.AsyncClient, text: str) -> httpx.Response:
        return await client.post(
            self._url,
            params={"censor_character": self._censor_character},
            content=text.encode("utf-8"),
            headers=self._headers(),
            timeout=self._timeout,
        )

    async def censor(self, text: str) -> ModerationResult:
        logger.debug("moderation.request", extra={"url": self._url, "content_length": len(text)})

        try:
            if self._client is not None:
                response = await self._post(self._client, text)
            else:
                async with httpx.AsyncClient(timeout=self._timeout) as client:
                    response = await self._post(client, text)
        except httpx.RequestError as exc:
            logger.error(
                "moderation.unreachable",
                extra={"url": self._url, "error_type": type(exc).__name__, "error_detail": str(exc)},
            )
            raise UpstreamUnreachableError() from exc

        status = response.status_code
        if not response.is_success:
            message = _error_message(response)
            if response.is_client_error:
                logger.warning("moderation.client_error", extra={"status": status, "upstream_message": message})
                raise UpstreamClientError(status, message)
            logger.error("moderation.server_error", extra={"status": status, "upstream_message": message})
            raise UpstreamServerError(status, message)

        try:
            result = ModerationResult.model_validate_json(response.content)
        except ValidationError as exc:
            logger.error("moderation.bad_response", extra={"status": status, "error_detail": str(exc)})
            raise UpstreamUnreachableError() from exc

        logger.info("moderation.success", extra={"bad_words_total": result.bad_words_total})
        return result

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
