"""Search provider integrations (Google Custom Search JSON API)."""

from __future__ import annotations

from typing import Any, Protocol

import httpx
from pydantic import ValidationError

from search_rank.config import SearchSettings
from search_rank.domain.models import ResultItem
from search_rank.logging import logger
from search_rank.services.exceptions import SearchConfigurationError, SearchExecutionError

PAGE_SIZE = 10

CONFIGURATION_HINT = "Unable to complete search, check configuration."
EXECUTION_HINT = "Unable to retrieve results, check API and Search Engine keys."


class SearchProvider(Protocol):
    def execute_query(
        self,
        term: str,
        start_offset: int,
        api_key: str | None,
        engine_key: str | None,
    ) -> list[ResultItem]:
        ...


class GoogleCustomSearchProvider:
    """Runs one page of a Custom Search query per call.

    ``start_offset`` is zero-based (0, 10, 20, ...); the API's ``start``
    parameter is one-based, so the offset is shifted by one on the wire.
    """

    def __init__(
        self,
        http_client: httpx.Client | None = None,
        settings: SearchSettings | None = None,
    ) -> None:
        self._settings = settings or SearchSettings()
        self._owns_client = http_client is None
        self._client = http_client if http_client is not None else httpx.Client()

    def execute_query(
        self,
        term: str,
        start_offset: int,
        api_key: str | None,
        engine_key: str | None,
    ) -> list[ResultItem]:
        params: dict[str, Any] = {"q": term, "start": start_offset + 1}
        if api_key:
            params["key"] = api_key
        if engine_key:
            params["cx"] = engine_key

        try:
            request = self._client.build_request(
                "GET",
                str(self._settings.base_url),
                params=params,
                timeout=self._settings.request_timeout_seconds,
            )
        except (httpx.InvalidURL, TypeError, ValueError) as exc:
            raise SearchConfigurationError(CONFIGURATION_HINT) from exc

        try:
            response = self._client.send(request)
            response.raise_for_status()
        except httpx.UnsupportedProtocol as exc:
            raise SearchConfigurationError(CONFIGURATION_HINT) from exc
        except httpx.HTTPStatusError as exc:
            detail = exc.response.text[:500] if exc.response is not None else str(exc)
            status_code = exc.response.status_code if exc.response is not None else "unknown"
            raise SearchExecutionError(f"{EXECUTION_HINT} ({status_code}): {detail}") from exc
        except httpx.RequestError as exc:
            raise SearchExecutionError(f"{EXECUTION_HINT} ({exc})") from exc

        try:
            data = response.json()
        except ValueError as exc:
            raise SearchExecutionError(f"{EXECUTION_HINT} (response is not valid JSON)") from exc
        if not isinstance(data, dict):
            raise SearchExecutionError(f"{EXECUTION_HINT} (unexpected response format)")

        raw_items = data.get("items") or []
        if not isinstance(raw_items, list) or not all(isinstance(item, dict) for item in raw_items):
            raise SearchExecutionError(f"{EXECUTION_HINT} (unexpected response format)")
        try:
            items = [_to_result_item(item) for item in raw_items]
        except ValidationError as exc:
            raise SearchExecutionError(f"{EXECUTION_HINT} (unexpected response format)") from exc
        logger.info(
            "search_page_fetched",
            query=term,
            start_offset=start_offset,
            item_count=len(items),
        )
        return items

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "GoogleCustomSearchProvider":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def _to_result_item(item: dict[str, Any]) -> ResultItem:
    return ResultItem(
        title=item.get("title") or "",
        formatted_url=item.get("formattedUrl") or item.get("link") or "",
        snippet=item.get("snippet") or "",
    )


__all__ = [
    "CONFIGURATION_HINT",
    "EXECUTION_HINT",
    "GoogleCustomSearchProvider",
    "PAGE_SIZE",
    "SearchProvider",
]
