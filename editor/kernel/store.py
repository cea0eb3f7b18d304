"""
Pagecraft Kernel — Document Store

The single owner of the live document and the editor session state.

States:
  unselected  — no template loaded
  editing     — template loaded, preview off
  previewing  — template loaded, preview on (read-only)

Every transition is atomic. Tree mutations run against a deep copy that is
committed only when the whole operation succeeded, so a raised error leaves
the store exactly as it was. While previewing, selection and mutation calls
are no-ops.

Lifecycle: construct at session start, reset() to drop the document,
teardown() at session end.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Literal

from editor.kernel import schema
from editor.kernel.catalog import TemplateCatalog, default_catalog
from editor.kernel.errors import LockedNode, NotFound, SchemaViolation
from editor.kernel.factory import create_component, create_element, create_section, new_id
from editor.kernel.hydration import deserialize, read_project, serialize
from editor.kernel.selection import SelectionTracker
from editor.kernel.types import (
    DEFAULT_DEVICE_MODE,
    DEFAULT_TOOL,
    DEVICE_MODES,
    SECTION_ATTRIBUTES,
    TEMPLATE_ATTRIBUTES,
    TOOL_IDS,
    Colors,
    Component,
    Element,
    NodePath,
    Rect,
    Section,
    Spacing,
    Template,
    Warning,
)

logger = logging.getLogger(__name__)

Node = Template | Section | Component | Element


@dataclass
class EditorState:
    template: Template | None = None
    template_selected: bool = False
    active_tool: str = DEFAULT_TOOL
    preview_mode: bool = False
    device_mode: str = DEFAULT_DEVICE_MODE


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------


def resolve(template: Template, path: NodePath) -> Node:
    """Follow a path down the tree. Raises NotFound at the first missing segment."""
    if path.section_id is None:
        return template
    section = template.find_section(path.section_id)
    if section is None:
        raise NotFound("Section", path.section_id)
    if path.component_id is None:
        return section
    component = section.find_component(path.component_id)
    if component is None:
        raise NotFound("Component", f"{path.section_id}/{path.component_id}")
    if path.element_id is None:
        return component
    element = component.find_element(path.element_id)
    if element is None:
        raise NotFound("Element", str(path))
    return element


def _ancestry(template: Template, path: NodePath) -> list[tuple[NodePath, Node]]:
    """Root-to-node chain of (path, node) pairs."""
    chain: list[tuple[NodePath, Node]] = []
    current: NodePath | None = path
    while current is not None:
        chain.append((current, resolve(template, current)))
        current = current.parent
    chain.reverse()
    return chain


def _editable(node: Node) -> str:
    # Absence of an override means editable. Templates and elements carry none.
    return getattr(node, "editable", None) or "editable"


def _content_lock(template: Template, path: NodePath) -> tuple[NodePath, str] | None:
    """First node from the root down to `path` that forbids content edits."""
    for node_path, node in _ancestry(template, path):
        if _editable(node) == "locked-edit":
            return node_path, "locked-edit"
    return None


def _structure_lock(template: Template, path: NodePath) -> tuple[NodePath, str] | None:
    """The node, or the container holding it, forbids swapping it out."""
    node = resolve(template, path)
    if _editable(node) == "locked-replacing":
        return path, "locked-replacing"
    parent = path.parent
    if parent is not None and _editable(resolve(template, parent)) == "locked-replacing":
        return parent, "locked-replacing"
    return None


def _children_of(node: Node) -> list[Any]:
    if isinstance(node, Template):
        return node.sections
    if isinstance(node, Section):
        return node.components
    if isinstance(node, Component):
        return node.elements
    raise TypeError(f"{type(node).__name__} has no children")


def _own_id(path: NodePath) -> str:
    return path.element_id or path.component_id or path.section_id or ""


# ---------------------------------------------------------------------------
# Store
# ---------------------------------------------------------------------------


class DocumentStore:
    def __init__(self, catalog: TemplateCatalog | None = None) -> None:
        self._catalog = catalog or default_catalog
        self._state = EditorState()
        self._selection = SelectionTracker()
        self._closed = False
        # Bumped whenever the document is replaced wholesale.
        self._generation = 0

    # -- lifecycle --

    def reset(self) -> None:
        """Drop the document and all session state."""
        self._check_open()
        self._state = EditorState()
        self._selection.clear_focus()
        self._generation += 1
        logger.debug("store: reset")

    def teardown(self) -> None:
        self._state = EditorState()
        self._selection.clear_focus()
        self._closed = True
        logger.debug("store: torn down")

    def _check_open(self) -> None:
        if self._closed:
            raise RuntimeError("DocumentStore has been torn down")

    # -- reads --

    @property
    def catalog(self) -> TemplateCatalog:
        return self._catalog

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def template(self) -> Template | None:
        return self._state.template

    @property
    def template_selected(self) -> bool:
        return self._state.template_selected

    @property
    def active_tool(self) -> str:
        return self._state.active_tool

    @property
    def preview_mode(self) -> bool:
        return self._state.preview_mode

    @property
    def device_mode(self) -> str:
        return self._state.device_mode

    @property
    def current_focused_element_id(self) -> NodePath | None:
        return self._selection.focused

    @property
    def selected_item_rect(self) -> Rect | None:
        return self._selection.rect

    @property
    def mode(self) -> Literal["unselected", "editing", "previewing"]:
        if self._state.template is None:
            return "unselected"
        return "previewing" if self._state.preview_mode else "editing"

    def node(self, path: NodePath | str) -> Node:
        return resolve(self._require_template(), _as_path(path))

    def is_selected(self, path: NodePath | str) -> bool:
        return self._selection.focused == _as_path(path)

    def can_edit(self, path: NodePath | str) -> bool:
        """True if update_property on `path` would not raise LockedNode."""
        return _content_lock(self._require_template(), _as_path(path)) is None

    def can_remove(self, path: NodePath | str) -> bool:
        """True if deleting `path` would not raise LockedNode."""
        path = _as_path(path)
        if path.level == "template":
            return False
        return _structure_lock(self._require_template(), path) is None

    def snapshot(self) -> dict[str, Any]:
        """Plain view of the whole session, for debugging and the rendering layer."""
        focused, rect = self._selection.snapshot()
        return {
            "template": serialize(self._state.template) if self._state.template else None,
            "templateSelected": self._state.template_selected,
            "activeTool": self._state.active_tool,
            "previewMode": self._state.preview_mode,
            "deviceMode": self._state.device_mode,
            "currentFocusedElementId": str(focused) if focused is not None else None,
            "selectedItemRect": rect.to_dict() if rect is not None else None,
        }

    def to_project(self) -> dict[str, Any]:
        """The payload saved through the persistence API. Inverse of hydrate_state()."""
        return {
            "template": serialize(self._require_template()),
            "activeTool": self._state.active_tool,
            "templateSelected": self._state.template_selected,
            "deviceMode": self._state.device_mode,
        }

    # -- template lifecycle --

    def select_template(self, template_id: str) -> bool:
        """Seed the document from the catalog. No-op while previewing."""
        self._check_open()
        if self._state.preview_mode:
            logger.debug("store: select_template(%s) ignored in preview", template_id)
            return False
        template = self._catalog.get(template_id)
        self._replace_document(template)
        logger.info("store: selected template %s", template_id)
        return True

    def load_template(self, payload: Any) -> bool:
        """
        Replace the document with an externally sourced tree.
        Raises HydrationError (listing every problem) and keeps the old document
        if the payload is invalid. No-op while previewing.
        """
        self._check_open()
        if self._state.preview_mode:
            logger.debug("store: load_template ignored in preview")
            return False
        template = deserialize(payload)
        self._replace_document(template)
        logger.info("store: loaded template %s", template.id)
        return True

    def hydrate_state(self, project: Any) -> None:
        """
        Restore a saved project on startup. Like load_template, but also
        restores activeTool/templateSelected/deviceMode when present, and
        always leaves preview.
        """
        self._check_open()
        restored = read_project(project)
        self._replace_document(restored.template)
        if restored.active_tool is not None:
            self._state.active_tool = restored.active_tool
        if restored.template_selected is not None:
            self._state.template_selected = restored.template_selected
        if restored.device_mode is not None:
            self._state.device_mode = restored.device_mode
        logger.info("store: hydrated project with template %s", restored.template.id)

    def _replace_document(self, template: Template) -> None:
        self._state.template = template
        self._generation += 1
        self._state.template_selected = True
        self._state.preview_mode = False
        self._selection.clear_focus()

    # -- session state --

    def set_active_tool(self, tool_id: str) -> None:
        self._check_open()
        if tool_id not in TOOL_IDS:
            raise ValueError(f"Unknown tool: {tool_id!r}")
        if self._state.preview_mode:
            return
        self._state.active_tool = tool_id

    def set_device_mode(self, device_mode: str) -> None:
        """Viewport width the canvas renders at. Allowed while previewing."""
        self._check_open()
        if device_mode not in DEVICE_MODES:
            raise ValueError(f"Unknown device mode: {device_mode!r}")
        self._state.device_mode = device_mode

    def toggle_preview_mode(self) -> bool:
        """Flip preview. Entering preview drops the selection. Returns the new flag."""
        self._check_open()
        if self._state.template is None:
            logger.debug("store: nothing to preview")
            return False
        self._state.preview_mode = not self._state.preview_mode
        if self._state.preview_mode:
            self._selection.clear_focus()
        logger.debug("store: preview_mode=%s", self._state.preview_mode)
        return self._state.preview_mode

    # -- selection --

    def select_section(self, section_id: str | None, rect: Rect | None = None) -> bool:
        if section_id is None:
            return self._select(None, rect)
        return self._select(lambda t: _unique([NodePath(section_id)], t), rect)

    def select_component(
        self,
        component_id: str | None,
        *,
        section_id: str | None = None,
        rect: Rect | None = None,
    ) -> bool:
        """
        Focus a component. Without `section_id` the search is limited to the
        currently focused section, or the whole document when nothing is
        focused; an id that matches more than one component does not resolve.
        """
        if component_id is None:
            return self._select(None, rect)

        def find(template: Template) -> NodePath:
            candidates = [NodePath(s.id, component_id) for s in self._scope_sections(template, section_id)]
            return _unique(candidates, template)

        return self._select(find, rect)

    def select_element(
        self,
        element_id: str | None,
        *,
        section_id: str | None = None,
        component_id: str | None = None,
        rect: Rect | None = None,
    ) -> bool:
        """
        Focus an element. Without hints the search covers every component of
        the focused section, even when a component or element is focused.
        """
        if element_id is None:
            return self._select(None, rect)

        def find(template: Template) -> NodePath:
            candidates = [
                NodePath(s.id, c.id, element_id)
                for s in self._scope_sections(template, section_id)
                for c in s.components
                if component_id is None or c.id == component_id
            ]
            return _unique(candidates, template)

        return self._select(find, rect)

    def clear_selection(self) -> None:
        self._check_open()
        self._selection.clear_focus()

    def set_focus_rect(self, rect: Rect, path: NodePath | str | None = None) -> None:
        """Geometry callback from the renderer for the focused node."""
        self._check_open()
        target = _as_path(path) if path is not None else self._selection.focused
        if target is None or self._state.preview_mode:
            return
        self._selection.set_focus_rect(target, rect)

    def viewport_changed(self) -> None:
        self._check_open()
        self._selection.viewport_changed()

    def _scope_sections(self, template: Template, section_id: str | None) -> list[Section]:
        if section_id is None:
            focused = self._selection.focused
            section_id = focused.section_id if focused is not None else None
        if section_id is None:
            return list(template.sections)
        section = template.find_section(section_id)
        return [section] if section is not None else []

    def _select(self, find: Callable[[Template], NodePath] | None, rect: Rect | None) -> bool:
        """
        Shared selection transition. A path that does not resolve clears the
        selection instead of raising.
        """
        self._check_open()
        if self._state.preview_mode:
            return False
        if find is None or self._state.template is None:
            self._selection.clear_focus()
            return False
        try:
            path = find(self._state.template)
        except NotFound as e:
            logger.warning("store: selection cleared, %s", e)
            self._selection.clear_focus()
            return False
        self._selection.focus(path, rect)
        logger.debug("store: focused %s", path)
        return True

    # -- mutation --

    def update_property(self, path: NodePath | str, key: str, value: Any) -> list[Warning]:
        """
        Set one property on the node at `path`.

        Raises NotFound if the path does not resolve, LockedNode if the node or
        an ancestor is locked-edit, SchemaViolation if a typed attribute
        (template name/title/colors, section name/background/spacing) would
        become invalid. Open property maps accept any value; values that fail
        the element's property record come back as warnings.
        No-op while previewing.
        """
        self._check_open()
        path = _as_path(path)
        if self._state.preview_mode:
            return []
        template = self._require_template()
        lock = _content_lock(template, path)
        if lock is not None:
            raise LockedNode(lock[0], lock[1], f"edit '{key}' on")

        draft = copy.deepcopy(template)
        warnings = _set_property(resolve(draft, path), key, copy.deepcopy(value))
        self._state.template = draft

        for w in warnings:
            logger.warning("store: %s at %s: %s", w.code, path, w.message)
        return warnings

    def delete_selected_item(self, confirm: Callable[[NodePath], bool] | None = None) -> bool:
        """
        Remove the focused node and clear the selection in the same step.
        `confirm` is the UI's chance to ask the user; returning False cancels.
        Returns True if something was deleted.
        """
        self._check_open()
        focused = self._selection.focused
        if self._state.preview_mode or focused is None:
            return False
        if confirm is not None and not confirm(focused):
            return False
        self._delete(focused)
        return True

    def delete_node(self, path: NodePath | str) -> None:
        """
        Remove any node by path. Clears the selection if it pointed at or inside it.
        Raises SchemaViolation, committing nothing, if the parent component would become invalid.
        """
        self._check_open()
        if self._state.preview_mode:
            return
        self._delete(_as_path(path))

    def _delete(self, path: NodePath) -> None:
        if path.level == "template":
            raise ValueError("The template root cannot be deleted")
        template = self._require_template()
        lock = _structure_lock(template, path)
        if lock is not None:
            raise LockedNode(lock[0], lock[1], "delete")

        draft = copy.deepcopy(template)
        parent = resolve(draft, path.parent)
        siblings = _children_of(parent)
        siblings[:] = [n for n in siblings if n.id != _own_id(path)]
        # Removing an element can break the component's own rules (ProductCard needs a Price).
        if isinstance(parent, Component):
            problems = schema.check_component(parent)
            if problems:
                raise SchemaViolation(problems)

        self._state.template = draft
        self._selection.invalidate(path)
        logger.info("store: deleted %s", path)

    def add_section(self, section_type: str, *, name: str | None = None, index: int | None = None) -> NodePath | None:
        self._check_open()
        if self._state.preview_mode:
            return None
        template = self._require_template()
        draft = copy.deepcopy(template)
        section = create_section(section_type, new_id(section_type, {s.id for s in draft.sections}), name=name)
        _insert(draft.sections, section, index)
        self._state.template = draft
        return NodePath(section.id)

    def add_component(self, section_id: str, component_type: str, *, index: int | None = None) -> NodePath | None:
        self._check_open()
        if self._state.preview_mode:
            return None
        return self._add_child(NodePath(section_id), component_type, index, None)

    def add_element(
        self,
        section_id: str,
        component_id: str,
        element_type: str,
        *,
        properties: dict[str, Any] | None = None,
        index: int | None = None,
    ) -> NodePath | None:
        self._check_open()
        if self._state.preview_mode:
            return None
        return self._add_child(NodePath(section_id, component_id), element_type, index, properties)

    def _add_child(
        self,
        parent: NodePath,
        node_type: str,
        index: int | None,
        properties: dict[str, Any] | None,
    ) -> NodePath:
        template = self._require_template()
        container = resolve(template, parent)
        if _editable(container) == "locked-replacing":
            raise LockedNode(parent, "locked-replacing", f"add {node_type} to")
        lock = _content_lock(template, parent)
        if lock is not None:
            raise LockedNode(lock[0], lock[1], f"add {node_type} to")

        draft = copy.deepcopy(template)
        target = resolve(draft, parent)
        children = _children_of(target)
        taken = {c.id for c in children}
        if isinstance(target, Section):
            child: Component | Element = create_component(node_type, new_id(node_type, taken))
            path = NodePath(parent.section_id, child.id)
        else:
            child = create_element(node_type, new_id(node_type, taken), properties)
            problems = schema.check_element(child)
            if problems:
                raise SchemaViolation(problems)
            path = NodePath(parent.section_id, parent.component_id, child.id)
        _insert(children, child, index)

        self._state.template = draft
        logger.debug("store: added %s", path)
        return path

    def move_section(self, section_id: str, direction: Literal["up", "down"]) -> bool:
        """Swap a section with its neighbour. Returns False at either end."""
        self._check_open()
        if direction not in ("up", "down"):
            raise ValueError(f"Unknown direction: {direction!r}")
        if self._state.preview_mode:
            return False
        template = self._require_template()
        path = NodePath(section_id)
        resolve(template, path)
        lock = _structure_lock(template, path)
        if lock is not None:
            raise LockedNode(lock[0], lock[1], "move")

        index = next(i for i, s in enumerate(template.sections) if s.id == section_id)
        other = index - 1 if direction == "up" else index + 1
        if not 0 <= other < len(template.sections):
            return False
        neighbour = NodePath(template.sections[other].id)
        if _structure_lock(template, neighbour) is not None:
            raise LockedNode(neighbour, "locked-replacing", "move")

        draft = copy.deepcopy(template)
        draft.sections[index], draft.sections[other] = draft.sections[other], draft.sections[index]
        self._state.template = draft
        self._selection.node_moved(path)
        self._selection.node_moved(neighbour)
        return True

    # -- internals --

    def _require_template(self) -> Template:
        if self._state.template is None:
            raise NotFound("Template", "no template loaded")
        return self._state.template


# ---------------------------------------------------------------------------
# Property assignment — one branch per node level
# ---------------------------------------------------------------------------


def _set_property(node: Node, key: str, value: Any) -> list[Warning]:
    if isinstance(node, Template):
        return _set_template_property(node, key, value)
    if isinstance(node, Section):
        return _set_section_property(node, key, value)
    if isinstance(node, Component):
        if node.parameters is None:
            node.parameters = {}
        node.parameters[key] = value
        return []
    if isinstance(node, Element):
        node.properties[key] = value
        return [
            Warning(code="SCHEMA_VIOLATION", message=m, details={"key": key})
            for m in schema.check_property(node.type, key, value, node.properties)
        ]
    raise TypeError(f"Unknown node kind: {type(node).__name__}")


def _set_template_property(template: Template, key: str, value: Any) -> list[Warning]:
    if key not in TEMPLATE_ATTRIBUTES:
        if template.metadata is None:
            template.metadata = {}
        template.metadata[key] = value
        return []
    problems = schema.check_template_attribute(key, value)
    if problems:
        raise SchemaViolation(problems)
    if key == "colors":
        value = Colors.from_dict(value) if isinstance(value, dict) else value
    setattr(template, "logo_url" if key == "logoUrl" else key, value)
    return []


def _set_section_property(section: Section, key: str, value: Any) -> list[Warning]:
    if key not in SECTION_ATTRIBUTES:
        if section.properties is None:
            section.properties = {}
        section.properties[key] = value
        return []
    problems = schema.check_section_attribute(key, value)
    if problems:
        raise SchemaViolation(problems)
    if key == "spacing" and isinstance(value, dict):
        value = Spacing.from_dict(value)
    setattr(section, key, value)
    return []


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _as_path(path: NodePath | str) -> NodePath:
    return path if isinstance(path, NodePath) else NodePath.parse(path)


def _unique(candidates: list[NodePath], template: Template) -> NodePath:
    found = []
    for candidate in candidates:
        try:
            resolve(template, candidate)
        except NotFound:
            continue
        found.append(candidate)
    if len(found) != 1:
        key = _own_id(candidates[0]) if candidates else "?"
        reason = "ambiguous" if found else "missing"
        raise NotFound(f"Node ({reason} in scope)", key)
    return found[0]


def _insert(children: list[Any], child: Any, index: int | None) -> None:
    if index is None:
        children.append(child)
    else:
        children.insert(index, child)
