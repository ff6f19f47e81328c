"""Application entrypoint."""

from __future__ import annotations

import argparse
import sys
from typing import Sequence

from pydantic import SecretStr

from search_rank.config import SearchSettings, get_settings
from search_rank.domain.models import SessionState
from search_rank.logging import configure_logging, logger
from search_rank.services.exceptions import InvalidSearchRequest, SearchError
from search_rank.services.provider import GoogleCustomSearchProvider
from search_rank.services.session import SearchSession

EXIT_OK = 0
EXIT_SEARCH_FAILED = 1
EXIT_INVALID_REQUEST = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="search-rank",
        description="Check where a target domain ranks in web search results.",
    )
    parser.add_argument("terms", nargs="+", help="Search terms, each searched separately")
    parser.add_argument("-p", "--pages", type=int, default=None, help="Result pages to fetch (0-10)")
    parser.add_argument("-r", "--report", action="store_true", help="Print every result after the summary")
    parser.add_argument("-t", "--target", help="Domain substring to look for in result URLs")
    parser.add_argument("--api-key", help="Search API key (overrides SEARCH_RANK_API_KEY)")
    parser.add_argument("--engine-id", help="Search engine id (overrides SEARCH_RANK_ENGINE_ID)")
    parser.add_argument(
        "--accumulate-pages",
        action="store_true",
        help="Keep results from every fetched page instead of only the last one",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level for structured logs",
    )
    return parser


def apply_overrides(settings: SearchSettings, args: argparse.Namespace) -> SearchSettings:
    """Layer command-line flags over environment-derived settings."""

    update: dict[str, object] = {}
    if args.api_key:
        update["api_key"] = SecretStr(args.api_key)
    if args.engine_id:
        update["engine_id"] = args.engine_id
    if args.target:
        update["target_url"] = args.target
    if args.accumulate_pages:
        update["accumulate_pages"] = True
    if not update:
        return settings
    return settings.model_copy(update=update)


def format_summary(state: SessionState) -> str:
    top = state.top_result.title if state.top_result else "no results"
    if state.found:
        return (
            f"{state.query}: found at rank {state.target_index} "
            f"({state.target.formatted_url}); top result: {top}"
        )
    return f"{state.query}: not found; top result: {top}"


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level, file=sys.stderr)
    settings = apply_overrides(get_settings(), args)

    provider = GoogleCustomSearchProvider(settings=settings)
    session = SearchSession.from_settings(settings, provider=provider)
    try:
        for term in args.terms:
            state = session.search(term, args.pages)
            print(format_summary(state))
            if args.report and state.results:
                print(session.result_string(), end="")
    except InvalidSearchRequest as exc:
        logger.error("invalid_search_request", error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID_REQUEST
    except SearchError as exc:
        logger.error("search_aborted", error=str(exc))
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_SEARCH_FAILED
    finally:
        provider.close()
    return EXIT_OK


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
