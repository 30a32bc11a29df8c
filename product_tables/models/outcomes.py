"""Explicit outcomes for best-effort resolution steps.

Optional enrichment never raises to the caller; instead each step records
whether it applied, was skipped (nothing to do / no match) or degraded
(upstream failure swallowed), plus a machine-readable reason.
"""

from typing import Literal, Optional

from pydantic import BaseModel

StageStatus = Literal["applied", "skipped", "degraded"]


class StageOutcome(BaseModel):
    """Result of one optional pricing enrichment stage."""

    stage: str
    status: StageStatus
    reason: Optional[str] = None

    @classmethod
    def applied(cls, stage: str, reason: Optional[str] = None) -> "StageOutcome":
        return cls(stage=stage, status="applied", reason=reason)

    @classmethod
    def skipped(cls, stage: str, reason: str) -> "StageOutcome":
        return cls(stage=stage, status="skipped", reason=reason)

    @classmethod
    def degraded(cls, stage: str, reason: str) -> "StageOutcome":
        return cls(stage=stage, status="degraded", reason=reason)


class ContextResolution(BaseModel):
    """Which branch produced a customer context, and why a default was used."""

    status: Literal["resolved", "guest_default", "degraded"]
    reason: Optional[str] = None
