"""Pydantic models shared across the provider and session layers."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

NOT_FOUND = "Not Found"


class ResultItem(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str = ""
    formatted_url: str = ""
    snippet: str = ""

    @classmethod
    def not_found(cls, query: str | None) -> "ResultItem":
        """Placeholder standing in for a target that is absent from the results."""

        return cls(title=query or "", formatted_url=NOT_FOUND, snippet=NOT_FOUND)


class SessionState(BaseModel):
    """Snapshot of a search session after its most recent operation."""

    model_config = ConfigDict(frozen=True)

    query: str | None = None
    results: tuple[ResultItem, ...] = ()
    target_index: int = 0
    target: ResultItem = Field(default_factory=ResultItem)
    top_result: ResultItem | None = None
    found: bool = False


__all__ = [
    "NOT_FOUND",
    "ResultItem",
    "SessionState",
]
