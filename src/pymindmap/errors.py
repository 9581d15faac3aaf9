"""
Error types raised by the mind map core.

Each failure condition has its own type so that a caller (usually the
editor layer) can map it to a user-visible message.
"""

from __future__ import annotations


class MindMapError(Exception):
    """Base class for all mind map core errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return self.message


class InvalidArgument(MindMapError, ValueError):
    """Raised for bad constraint values, self-loops and duplicate edges."""


class NotFound(MindMapError, KeyError):
    """Raised when a node or edge referenced by index does not exist."""


class InvalidState(MindMapError, RuntimeError):
    """Raised when operations are invoked out of their required order."""


class PerformanceWarning(UserWarning):
    """Warning about performance-related issues."""
    pass
