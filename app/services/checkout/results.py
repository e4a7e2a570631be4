"""
Result types returned by the checkout services.

Best-effort steps never raise to the caller. Their outcome is recorded as a
``SoftStepResult`` so callers and tests can inspect soft failures directly.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional


@dataclass
class SoftStepResult:
    """
    Outcome of a best-effort step.

    Attributes:
        step: Step name, e.g. "send_email"
        attempted: Whether the step ran at all
        succeeded: Whether it completed
        error: Caller-safe error description when it failed
    """

    step: str
    attempted: bool = False
    succeeded: bool = False
    error: Optional[str] = None

    @classmethod
    def skipped(cls, step: str) -> "SoftStepResult":
        return cls(step=step, attempted=False, succeeded=False)

    @classmethod
    def ok(cls, step: str) -> "SoftStepResult":
        return cls(step=step, attempted=True, succeeded=True)

    @classmethod
    def failed(cls, step: str, error: str) -> "SoftStepResult":
        return cls(step=step, attempted=True, succeeded=False, error=error)

    def to_dict(self) -> dict[str, Any]:
        return {
            "step": self.step,
            "attempted": self.attempted,
            "succeeded": self.succeeded,
            "error": self.error,
        }


@dataclass
class InstantProcessingResult:
    """Result of the instant processing pipeline."""

    order_number: str
    invoice_generated: bool
    email_sent: bool
    processed_at: datetime
    email_step: SoftStepResult
    status_step: SoftStepResult

    @property
    def soft_steps(self) -> list[SoftStepResult]:
        return [self.email_step, self.status_step]

    def to_dict(self) -> dict[str, Any]:
        """Response payload."""
        return {
            "success": True,
            "order_number": self.order_number,
            "invoice_generated": self.invoice_generated,
            "email_sent": self.email_sent,
            "processed_at": self.processed_at.isoformat(),
            "soft_steps": [step.to_dict() for step in self.soft_steps],
        }


MANUAL_PROCESSING_MESSAGE = "Order received and confirmation sent. Manual processing required."


@dataclass
class ManualProcessingResult:
    """Result of the manual processing pipeline."""

    order_number: str
    temp_order_number: str
    email_sent: bool
    processed_at: datetime
    metadata_step: SoftStepResult
    email_step: SoftStepResult
    processing_mode: str = "manual"
    message: str = MANUAL_PROCESSING_MESSAGE

    @property
    def soft_steps(self) -> list[SoftStepResult]:
        return [self.metadata_step, self.email_step]

    def to_dict(self) -> dict[str, Any]:
        """Response payload."""
        return {
            "success": True,
            "order_number": self.order_number,
            "temp_order_number": self.temp_order_number,
            "processing_mode": self.processing_mode,
            "email_sent": self.email_sent,
            "processed_at": self.processed_at.isoformat(),
            "message": self.message,
            "soft_steps": [step.to_dict() for step in self.soft_steps],
        }
