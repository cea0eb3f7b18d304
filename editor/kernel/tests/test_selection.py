"""SelectionTracker: focus and geometry must never disagree."""

from editor.kernel.selection import SelectionTracker
from editor.kernel.types import NodePath, Rect

HERO = NodePath("hero")
BANNER = NodePath("hero", "banner")
TITLE = NodePath("hero", "banner", "title")
FOOTER = NodePath("footer")
RECT = Rect(top=10, left=20, width=300, height=40)


class TestFocus:
    def test_starts_cleared(self):
        tracker = SelectionTracker()
        assert tracker.focused is None
        assert tracker.rect is None
        assert not tracker.is_active

    def test_focus_with_rect(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        assert tracker.snapshot() == (TITLE, RECT)

    def test_refocus_drops_previous_rect(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        tracker.focus(HERO)
        assert tracker.focused == HERO
        assert tracker.rect is None

    def test_rect_for_other_node_ignored(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE)
        tracker.set_focus_rect(FOOTER, RECT)
        assert tracker.rect is None

        tracker.set_focus_rect(TITLE, RECT)
        assert tracker.rect == RECT

    def test_clear(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        tracker.clear_focus()
        assert tracker.snapshot() == (None, None)


class TestInvalidation:
    def test_deleting_focused_node(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        assert tracker.invalidate(TITLE) is True
        assert tracker.snapshot() == (None, None)

    def test_deleting_an_ancestor(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        assert tracker.invalidate(HERO) is True
        assert tracker.focused is None

    def test_deleting_unrelated_node(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        assert tracker.invalidate(FOOTER) is False
        assert tracker.snapshot() == (TITLE, RECT)

    def test_sibling_prefix_is_not_an_ancestor(self):
        tracker = SelectionTracker()
        tracker.focus(NodePath("hero-2"))
        assert tracker.invalidate(HERO) is False

    def test_move_keeps_focus_drops_rect(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        tracker.node_moved(HERO)
        assert tracker.focused == TITLE
        assert tracker.rect is None

    def test_move_of_unrelated_node(self):
        tracker = SelectionTracker()
        tracker.focus(TITLE, RECT)
        tracker.node_moved(FOOTER)
        assert tracker.rect == RECT

    def test_viewport_change(self):
        tracker = SelectionTracker()
        tracker.focus(BANNER, RECT)
        tracker.viewport_changed()
        assert tracker.focused == BANNER
        assert tracker.rect is None

        remeasured = Rect(top=0, left=20, width=300, height=40)
        tracker.set_focus_rect(BANNER, remeasured)
        assert tracker.rect == remeasured
