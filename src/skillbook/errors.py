"""
Error taxonomy for skillbook.

- MalformedDocument: a single document is missing a required field. Isolated,
  the rest of the store still loads.
- DuplicateName: two documents share a name. Aborts the whole load.
- NotFound: a requested document or reference target does not exist.
- InvalidState: a disclosure operation was called out of LoadLevel order.
"""

from typing import Any


class SkillbookError(Exception):
    """Base class for every error raised by skillbook."""

    pass


class MalformedDocument(SkillbookError):
    """Error raised when a document lacks a required field."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Malformed document '{path}': {reason}")


class DuplicateName(SkillbookError):
    """Error raised when two documents in one source share a name."""

    def __init__(self, name: str, paths: tuple[str, str]) -> None:
        self.name = name
        self.paths = paths
        super().__init__(
            f"Document name '{name}' is declared twice: {paths[0]} and {paths[1]}"
        )


class NotFound(SkillbookError, KeyError):
    """Error raised when a document or reference target does not exist."""

    def __init__(self, name: str, available: list[str] | None = None) -> None:
        self.name = name
        self.available = available or []
        super().__init__(name)

    def __str__(self) -> str:
        message = f"Document '{self.name}' not found"
        if self.available:
            message += f". Available documents: {', '.join(self.available)}"
        return message


class InvalidState(SkillbookError):
    """Error raised when an operation is requested out of LoadLevel order."""

    def __init__(
        self,
        name: str,
        current: Any,
        required: Any,
        message: str | None = None,
    ) -> None:
        self.name = name
        self.current = current
        self.required = required
        super().__init__(
            message or f"Document '{name}' is {getattr(current, 'name', current)}, "
            f"operation requires {getattr(required, 'name', required)}"
        )
