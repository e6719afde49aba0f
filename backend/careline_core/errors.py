from __future__ import annotations

from typing import Any


class CarelineError(Exception):
    pass


class InvalidInputError(CarelineError):
    def __init__(self, message: str, details: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.details = details or []


class CapabilityUnavailableError(CarelineError):
    """The external model produced nothing usable and no rule gate applied."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Text generation capability unavailable: {reason}")
        self.reason = reason
