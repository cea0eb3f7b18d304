"""
Pagecraft Kernel — Selection & Focus Tracker

Keeps the focused node path and its on-screen rectangle together. The
rendering layer measures geometry and feeds it in; the tracker drops the
rectangle whenever it could be stale (node moved or deleted, viewport
scrolled or resized).

Reads never return half a selection: if the path and rect disagree the pair
reads as cleared.
"""

from __future__ import annotations

import logging

from editor.kernel.types import NodePath, Rect

logger = logging.getLogger(__name__)


class SelectionTracker:
    def __init__(self) -> None:
        self._focused: NodePath | None = None
        self._rect: Rect | None = None
        # Path the rect was measured for; a rect measured for another node is stale.
        self._rect_for: NodePath | None = None

    # -- reads --

    @property
    def focused(self) -> NodePath | None:
        return self._focused

    @property
    def rect(self) -> Rect | None:
        if self._focused is None or self._rect_for != self._focused:
            return None
        return self._rect

    @property
    def is_active(self) -> bool:
        return self._focused is not None

    # -- writes --

    def focus(self, path: NodePath, rect: Rect | None = None) -> None:
        """Move focus to `path`. Any rect measured for the previous node is dropped."""
        self._focused = path
        self._rect = rect
        self._rect_for = path if rect is not None else None

    def set_focus_rect(self, path: NodePath, rect: Rect) -> None:
        """Record geometry for `path`. Ignored unless `path` is the focused node."""
        if self._focused != path:
            logger.debug("selection: ignoring rect for %s, focus is %s", path, self._focused)
            return
        self._rect = rect
        self._rect_for = path

    def clear_focus(self) -> None:
        self._focused = None
        self._rect = None
        self._rect_for = None

    def invalidate(self, path: NodePath) -> bool:
        """
        Called when the node at `path` is deleted.
        Clears focus if it points at that node or anything inside it.
        Returns True if focus was cleared.
        """
        if self._focused is not None and self._focused.is_within(path):
            self.clear_focus()
            return True
        return False

    def node_moved(self, path: NodePath) -> None:
        """The node at `path` changed position: focus survives, its geometry does not."""
        if self._focused is not None and self._focused.is_within(path):
            self._rect = None
            self._rect_for = None

    def viewport_changed(self) -> None:
        """Scroll or resize: keep focus, drop geometry until the renderer re-measures."""
        self._rect = None
        self._rect_for = None

    def snapshot(self) -> tuple[NodePath | None, Rect | None]:
        return self.focused, self.rect
