"""Domain exceptions for the patent pipeline.

All domain-specific exceptions inherit from ``PatentPipelineError`` so
callers can catch the full family with a single ``except`` clause when needed.
"""

from __future__ import annotations

from typing import Any

from .values import PaymentReceipt


class PatentPipelineError(Exception):
    """Base exception for all patent pipeline errors."""

    def __init__(self, message: str = "", details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.details: dict[str, Any] = details or {}


class InvalidIdeaError(PatentPipelineError):
    """Raised when a submitted idea is missing required fields.

    ``field_errors`` maps each offending field to a human-readable message.
    """

    def __init__(
        self,
        message: str = "Invalid invention idea",
        field_errors: dict[str, str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field_errors: dict[str, str] = field_errors or {}


class SourceLookupFailure(PatentPipelineError):
    """Raised by a source lookup that cannot serve a query.

    The aggregator absorbs these (and any other exception) into a warning;
    they never abort a research stage on their own.
    """

    def __init__(
        self,
        message: str = "Source lookup failed",
        source: str = "",
        query: str = "",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.source = source
        self.query = query


class ResearchFailed(PatentPipelineError):
    """Raised when every configured source failed during research."""

    def __init__(
        self,
        message: str = "All prior-art sources failed",
        warnings: tuple[str, ...] = (),
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.warnings = warnings


class CollaboratorRejection(PatentPipelineError):
    """Raised when payment, signing or ledger recording is rejected.

    ``payment`` carries the receipt when the fee was already charged before
    a later step failed, so a retry does not charge twice.
    """

    def __init__(
        self,
        message: str = "Collaborator rejected the request",
        collaborator: str = "",
        payment: PaymentReceipt | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)
        self.collaborator = collaborator
        self.payment = payment
