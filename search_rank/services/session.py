"""Search session: paged queries plus the target-domain scan."""

from __future__ import annotations

from typing import Iterable, Sequence

from search_rank.config import DEFAULT_TARGET_URL, SearchSettings
from search_rank.domain.models import ResultItem, SessionState
from search_rank.logging import logger
from search_rank.services.exceptions import InvalidSearchRequest, NoResultsError, SearchError
from search_rank.services.provider import PAGE_SIZE, GoogleCustomSearchProvider, SearchProvider

MAX_PAGES = 10


def locate_target(state: SessionState, target_url: str) -> SessionState:
    """Return ``state`` with target fields recomputed from its results.

    The first result whose formatted URL contains ``target_url`` wins. When
    nothing matches, ``target`` becomes a placeholder titled after the query
    and ``target_index`` keeps its previous value.
    """

    results = state.results
    top_result = results[0] if results else None
    for index, item in enumerate(results):
        if target_url in item.formatted_url:
            return state.model_copy(
                update={
                    "found": True,
                    "target": item,
                    "target_index": index,
                    "top_result": top_result,
                }
            )
    return state.model_copy(
        update={
            "found": False,
            "target": ResultItem.not_found(state.query),
            "top_result": top_result,
        }
    )


def format_results(results: Sequence[ResultItem]) -> str:
    if not results:
        raise NoResultsError("A search must be completed first.")
    lines: list[str] = []
    for index, item in enumerate(results):
        lines.append(f"Title {index}: {item.title}\n")
        lines.append(f"URL: {item.formatted_url}\n")
    return "".join(lines)


class SearchSession:
    """Holds credentials and the latest :class:`SessionState`.

    Every operation builds a new immutable state and swaps it in; nothing is
    mutated in place. Provider failures propagate and leave the previous
    state untouched.
    """

    def __init__(
        self,
        provider: SearchProvider,
        *,
        api_key: str | None = None,
        engine_key: str | None = None,
        target_url: str = DEFAULT_TARGET_URL,
        accumulate_pages: bool = False,
    ) -> None:
        self._provider = provider
        self._api_key = api_key
        self._engine_key = engine_key
        self._target_url = target_url
        self._accumulate_pages = accumulate_pages
        self._state = SessionState()

    @classmethod
    def from_settings(
        cls,
        settings: SearchSettings | None = None,
        provider: SearchProvider | None = None,
    ) -> "SearchSession":
        settings = settings or SearchSettings()
        api_key = settings.api_key.get_secret_value() if settings.api_key else None
        return cls(
            provider or GoogleCustomSearchProvider(settings=settings),
            api_key=api_key,
            engine_key=settings.engine_id,
            target_url=settings.target_url,
            accumulate_pages=settings.accumulate_pages,
        )

    def configure(self, api_key: str | None, engine_key: str | None) -> None:
        self._api_key = api_key
        self._engine_key = engine_key

    @property
    def provider(self) -> SearchProvider:
        return self._provider

    @property
    def api_key(self) -> str | None:
        return self._api_key

    @property
    def engine_key(self) -> str | None:
        return self._engine_key

    @property
    def target_url(self) -> str:
        return self._target_url

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def query(self) -> str | None:
        return self._state.query

    @property
    def results(self) -> tuple[ResultItem, ...]:
        return self._state.results

    @property
    def target_index(self) -> int:
        return self._state.target_index

    @property
    def target(self) -> ResultItem:
        return self._state.target

    @property
    def top_result(self) -> ResultItem | None:
        return self._state.top_result

    def search(self, term: str, num_pages: int | None = None) -> SessionState:
        """Fetch ``num_pages`` pages (one when omitted) and scan for the target."""

        if term is None:
            raise InvalidSearchRequest("Cannot search for a null value.")
        pages = 1 if num_pages is None else num_pages
        if isinstance(pages, bool) or not isinstance(pages, int):
            raise InvalidSearchRequest("Page count must be an integer.")
        if pages < 0:
            raise InvalidSearchRequest("Cannot search a negative number of pages.")
        if pages > MAX_PAGES:
            raise InvalidSearchRequest(f"Cannot search more than {MAX_PAGES} pages.")

        try:
            fetched = self._fetch_pages(term, pages)
        except SearchError as exc:
            logger.warning("search_failed", query=term, pages=pages, error=str(exc))
            raise

        update: dict[str, object] = {"query": term}
        if fetched is not None:
            update["results"] = fetched
        self._state = self._state.model_copy(update=update)
        logger.info(
            "search_completed",
            query=term,
            pages=pages,
            result_count=len(self._state.results),
        )
        self.find_target()
        return self._state

    def search_many(self, terms: Iterable[str]) -> SessionState:
        """Search each term in turn; only the last term's outcome is kept."""

        for term in terms:
            self.search(term)
        return self._state

    def find_target(self) -> bool:
        self._state = locate_target(self._state, self._target_url)
        if self._state.found:
            logger.info(
                "target_found",
                query=self._state.query,
                target_url=self._target_url,
                rank=self._state.target_index,
            )
        else:
            logger.info(
                "target_not_found",
                query=self._state.query,
                target_url=self._target_url,
                result_count=len(self._state.results),
            )
        return self._state.found

    def result_string(self) -> str:
        return format_results(self._state.results)

    def clear_results(self) -> None:
        self._state = self._state.model_copy(update={"results": ()})
        logger.info("search_results_cleared", query=self._state.query)

    def _fetch_pages(self, term: str, num_pages: int) -> tuple[ResultItem, ...] | None:
        if num_pages == 0:
            return None
        collected: list[ResultItem] = []
        for page in range(num_pages):
            items = self._provider.execute_query(
                term,
                page * PAGE_SIZE,
                self._api_key,
                self._engine_key,
            )
            if self._accumulate_pages:
                collected.extend(items)
            else:
                # Each page replaces the previous one unless accumulation is enabled.
                collected = list(items)
        return tuple(collected)


__all__ = [
    "MAX_PAGES",
    "SearchSession",
    "format_results",
    "locate_target",
]
