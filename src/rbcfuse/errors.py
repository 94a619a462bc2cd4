"""Errors raised by the rank fusion entry points."""

from __future__ import annotations


class RbcError(ValueError):
    """Base class for rejected fusion inputs."""


class InvalidPersistence(RbcError):
    """Persistence parameter outside ``0.0 <= p < 1.0`` (or not a real number)."""

    def __init__(self, persistence: object) -> None:
        self.persistence = persistence
        super().__init__(
            f"persistence parameter p must satisfy 0.0 <= p < 1.0 (got {persistence!r})"
        )


class InvalidRunWeights(RbcError):
    """Run weights that do not line up one-to-one with the input rankings."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(f"invalid run weights: {reason}")
