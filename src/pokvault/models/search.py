"""Registry search parameters."""

from __future__ import annotations

from pydantic import BaseModel, Field


class MarketSearchParams(BaseModel):
    """Conjunctive market filters. Unset fields do not filter."""

    url: str | None = None
    provider: str | None = None
    status: str | None = Field(None, pattern="^(allowed|paused|removed)$")
    question: str | None = None
