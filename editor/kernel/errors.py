"""
Pagecraft Kernel — Errors

Every failure the kernel raises derives from EditorError. The store never
partially applies an operation that raised one of these.
"""

from __future__ import annotations


class EditorError(Exception):
    """Base class for kernel errors."""


class NotFound(EditorError):
    """An id or path does not resolve."""

    def __init__(self, what: str, key: object) -> None:
        super().__init__(f"{what} not found: {key}")
        self.what = what
        self.key = key


class LockedNode(EditorError):
    """A mutation was attempted against a node's editability."""

    def __init__(self, path: object, editable: str, action: str) -> None:
        super().__init__(f"Cannot {action} '{path}': node is {editable}")
        self.path = path
        self.editable = editable
        self.action = action


class SchemaViolation(EditorError):
    """Node content fails type-specific validation."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__("; ".join(errors))
        self.errors = errors


class HydrationError(EditorError):
    """A serialized document violates tree invariants. Carries every violation found."""

    def __init__(self, errors: list[str]) -> None:
        super().__init__(f"{len(errors)} hydration error(s): " + "; ".join(errors))
        self.errors = errors
