"""Shared pytest fixtures for search session tests."""

from __future__ import annotations

import logging
from typing import Sequence

import pytest
import structlog

from search_rank.domain.models import ResultItem
from search_rank.logging import QUIET_LOGGERS
from search_rank.logging import logger as shared_logger
from search_rank.services.session import SearchSession


def make_items(*urls: str) -> list[ResultItem]:
    return [
        ResultItem(title=f"Result {index}", formatted_url=url, snippet=f"snippet {index}")
        for index, url in enumerate(urls)
    ]


class FakeProvider:
    """Returns canned pages keyed by start offset and records every call."""

    def __init__(self, pages: dict[int, Sequence[ResultItem]] | None = None, error: Exception | None = None) -> None:
        self.pages = dict(pages or {})
        self.error = error
        self.calls: list[dict[str, object]] = []
        self.closed = False

    def execute_query(self, term, start_offset, api_key, engine_key):
        self.calls.append(
            {
                "term": term,
                "start_offset": start_offset,
                "api_key": api_key,
                "engine_key": engine_key,
            }
        )
        if self.error is not None:
            raise self.error
        return list(self.pages.get(start_offset, []))

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def fake_provider() -> FakeProvider:
    return FakeProvider(
        pages={
            0: make_items(
                "www.nytimes.com/local",
                "www.washingtonpost.com/dc-md-va/",
                "wtop.com/dc",
            ),
            10: make_items("dcist.com", "www.washingtonpost.com/local/"),
        }
    )


@pytest.fixture
def session(fake_provider: FakeProvider) -> SearchSession:
    return SearchSession(fake_provider, api_key="key", engine_key="cx")


@pytest.fixture(autouse=True)
def _reset_logging():
    quiet_levels = {name: logging.getLogger(name).level for name in QUIET_LOGGERS}
    yield
    structlog.reset_defaults()
    # cache_logger_on_first_use pins the shared proxy to the stream of the test
    # that first logged through it; drop the pinned bind so the next test rebinds.
    vars(shared_logger).pop("bind", None)
    for name, level in quiet_levels.items():
        logging.getLogger(name).setLevel(level)
