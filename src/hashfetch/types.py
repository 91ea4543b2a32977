"""Shared Pydantic models for hashfetch."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hashfetch.context import RunContext

# ── Config models ──


class ProcessorConfig(BaseModel):
    parallel: int = Field(default=10, gt=0)
    algorithm: str = "md5"
    timeout: float = Field(default=5.0, gt=0)
    follow_redirects: bool = True
    user_agent: str = "hashfetch/0.1"

    @classmethod
    def from_mapping(cls, data: dict[str, Any]) -> ProcessorConfig:
        """Build from a merged config dict, ignoring keys that aren't fields."""
        known = {k: v for k, v in data.items() if k in cls.model_fields}
        return cls(**known)


# ── Runtime models ──


class FetchRequest(BaseModel):
    """A single request handed to the transport."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    method: str = "GET"
    url: str
    context: RunContext | None = None


class Result(BaseModel):
    """A normalized URL paired with the hex digest of its response body."""

    model_config = ConfigDict(frozen=True)

    url: str
    digest: str

    def line(self) -> str:
        return f"{self.url} {self.digest}\n"

    def __str__(self) -> str:
        return self.line()


class RunSummary(BaseModel):
    submitted: int = 0
    written: int = 0
    dropped: int = 0
    cancelled: bool = False
    errors: dict[str, int] = Field(default_factory=dict)
