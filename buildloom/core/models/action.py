"""
Action and Receipt models — the execution contract.

A leaf task carries an Action: a request for one adapter operation
(run a tool, copy files, build an archive). Executing it yields a Receipt.
Adapters return receipts for every outcome and never raise, so every leaf
shares one result contract.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class Action(BaseModel):
    """A requested adapter operation.

    ``id`` is stable for a given project and builder, e.g.
    ``package-npm:pack``, so receipts can be traced back to the step
    that produced them.
    """

    id: str
    adapter: str                    # "shell", "filesystem", ...
    params: dict[str, Any] = Field(default_factory=dict)


class Receipt(BaseModel):
    """Outcome of executing one Action."""

    adapter: str
    action_id: str
    status: Literal["ok", "skipped", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    output: str = ""
    error: str | None = None

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        return self.status == "failed"

    @classmethod
    def success(cls, adapter: str, action_id: str, output: str = "", **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="ok", output=output, **kwargs)

    @classmethod
    def failure(cls, adapter: str, action_id: str, error: str, **kwargs: Any) -> Receipt:
        return cls(adapter=adapter, action_id=action_id, status="failed", error=error, **kwargs)

    @classmethod
    def skip(cls, adapter: str, action_id: str, reason: str = "", **kwargs: Any) -> Receipt:
        """A step that did not run, or whose failure was tolerated."""
        return cls(adapter=adapter, action_id=action_id, status="skipped", output=reason, **kwargs)
