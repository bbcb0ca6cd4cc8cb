"""Engine error taxonomy."""

from __future__ import annotations

from collections.abc import Iterable


class EngineError(Exception):
    """Base class for recoverable engine errors."""


class InvalidInput(EngineError):
    """Input values that no calculation can proceed from (non-positive price, etc.)."""


class IncompleteProfile(EngineError):
    """Required profile fields are absent for the selected variant."""

    def __init__(self, variant: str, missing: Iterable[str]) -> None:
        self.variant = variant
        self.missing = frozenset(missing)
        super().__init__(f"{variant} profile missing fields: {', '.join(sorted(self.missing))}")


class RecoveryFailed(EngineError):
    """Generated text could not be repaired into a valid document."""

    def __init__(self, original: str, repaired: str, reason: str = "") -> None:
        self.original = original
        self.repaired = repaired
        self.reason = reason
        msg = "could not recover a structured document from generated text"
        if reason:
            msg = f"{msg}: {reason}"
        super().__init__(msg)


class GenerationFailed(EngineError):
    """The text generator returned an error status or an unusable response."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message)
