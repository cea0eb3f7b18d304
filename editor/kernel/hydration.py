"""
Pagecraft Kernel — Hydration / Persistence Adapter

Two-way, loss-free conversion between the live tree and the plain structure
the persistence API stores.

  serialize(template)   → dict   (camelCase keys, child order preserved)
  dumps(template)       → bytes  (deterministic JSON, sorted keys)
  deserialize(payload)  → Template, or HydrationError listing every violation
  read_project(payload) → ProjectState for hydrate_state()

Round-trip law: deserialize(serialize(t)) == t for any valid Template t.
Unknown keys ride along in each node's `extra`.
"""

from __future__ import annotations

import copy
import hashlib
import json
from dataclasses import dataclass
from typing import Any

from editor.kernel import schema
from editor.kernel.errors import HydrationError
from editor.kernel.types import (
    DEVICE_MODES,
    TOOL_IDS,
    Colors,
    Component,
    Element,
    Section,
    Spacing,
    Template,
)

# ---------------------------------------------------------------------------
# Serialize
# ---------------------------------------------------------------------------


def serialize(template: Template) -> dict[str, Any]:
    """Plain, independent copy of the tree. Mutating the result never touches the live tree."""
    return copy.deepcopy(template.to_dict())


def dumps(template: Template) -> bytes:
    """Canonical JSON bytes. Same tree → same bytes."""
    return json.dumps(
        serialize(template),
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
    ).encode("utf-8")


def hash_template(template: Template) -> str:
    """First 16 hex chars of the SHA-256 of dumps(); used to check client/server agreement."""
    return hashlib.sha256(dumps(template)).hexdigest()[:16]


# ---------------------------------------------------------------------------
# Deserialize
# ---------------------------------------------------------------------------


def deserialize(payload: Any) -> Template:
    """
    Build a Template from a serialized payload.

    Walks the entire payload before deciding, so the HydrationError carries
    every violation rather than the first one.
    """
    errors: list[str] = []
    template = _read_template(copy.deepcopy(payload), "template", errors)
    if errors or template is None:
        raise HydrationError(errors or ["template could not be read"])
    return template


@dataclass
class ProjectState:
    """A saved project: the tree plus whatever session state was stored with it."""

    template: Template
    active_tool: str | None = None
    template_selected: bool | None = None
    device_mode: str | None = None


def read_project(payload: Any) -> ProjectState:
    """
    Accept either a saved page ({"template": {...}, "activeTool": ...}) or a
    bare template payload.
    """
    if not isinstance(payload, dict):
        raise HydrationError(["project must be an object"])
    if "template" not in payload:
        return ProjectState(template=deserialize(payload))

    errors: list[str] = []
    active_tool = payload.get("activeTool")
    if active_tool is not None and active_tool not in TOOL_IDS:
        errors.append(f"project: unknown activeTool {active_tool!r}")
    template_selected = payload.get("templateSelected")
    if template_selected is not None and not isinstance(template_selected, bool):
        errors.append("project: templateSelected must be a boolean")
    device_mode = payload.get("deviceMode")
    if device_mode is not None and device_mode not in DEVICE_MODES:
        errors.append(f"project: unknown deviceMode {device_mode!r}")

    template: Template | None = None
    try:
        template = deserialize(payload["template"])
    except HydrationError as e:
        errors.extend(e.errors)

    if errors or template is None:
        raise HydrationError(errors)
    return ProjectState(
        template=template,
        active_tool=active_tool,
        template_selected=template_selected,
        device_mode=device_mode,
    )


# ---------------------------------------------------------------------------
# Readers: each appends to `errors` and returns None when the shape is unusable
# ---------------------------------------------------------------------------


def _read_template(raw: Any, where: str, errors: list[str]) -> Template | None:
    if not _require_object(raw, where, errors, ("id", "name", "title")):
        return None

    sections = [
        s
        for i, r in enumerate(_children(raw, "sections", where, errors))
        if (s := _read_section(r, f"{where}.sections[{i}]", errors)) is not None
    ]

    colors = raw.get("colors")
    if colors is not None:
        problems = schema.check_template_attribute("colors", colors)
        if problems:
            errors.extend(_at(where, problems))
            return None
        colors = Colors.from_dict(colors)

    template = Template(
        id=raw["id"],
        name=raw["name"],
        title=raw["title"],
        description=raw.get("description"),
        category=raw.get("category"),
        thumbnail=raw.get("thumbnail"),
        logo_url=raw.get("logoUrl"),
        colors=colors,
        metadata=raw.get("metadata"),
        sections=sections,
        extra=Template.from_dict({**raw, "sections": [], "colors": None}).extra,
    )
    errors.extend(_at(where, schema.check_template(template)))
    return template


def _read_section(raw: Any, where: str, errors: list[str]) -> Section | None:
    if not _require_object(raw, where, errors, ("id", "type", "name")):
        return None

    components = [
        c
        for i, r in enumerate(_children(raw, "components", where, errors))
        if (c := _read_component(r, f"{where}.components[{i}]", errors)) is not None
    ]

    spacing = raw.get("spacing")
    if spacing is not None:
        if not isinstance(spacing, dict):
            errors.append(f"{where}: spacing must be an object")
            return None
        spacing = Spacing.from_dict(spacing)

    section = Section(
        id=raw["id"],
        type=raw["type"],
        name=raw["name"],
        editable=raw.get("editable"),
        background=raw.get("background"),
        spacing=spacing,
        properties=raw.get("properties"),
        components=components,
        extra=Section.from_dict({**raw, "components": [], "spacing": None}).extra,
    )
    errors.extend(_at(where, schema.check_section(section)))
    return section


def _read_component(raw: Any, where: str, errors: list[str]) -> Component | None:
    if not _require_object(raw, where, errors, ("id", "type")):
        return None

    elements = [
        e
        for i, r in enumerate(_children(raw, "elements", where, errors))
        if (e := _read_element(r, f"{where}.elements[{i}]", errors)) is not None
    ]

    component = Component(
        id=raw["id"],
        type=raw["type"],
        editable=raw.get("editable"),
        elements=elements,
        parameters=raw.get("parameters"),
        extra=Component.from_dict({**raw, "elements": []}).extra,
    )
    errors.extend(_at(where, schema.check_component(component)))
    return component


def _read_element(raw: Any, where: str, errors: list[str]) -> Element | None:
    if not _require_object(raw, where, errors, ("id", "type")):
        return None
    if "properties" in raw and not isinstance(raw["properties"], dict):
        errors.append(f"{where}: 'properties' must be an object")
        return None

    element = Element.from_dict(raw)
    errors.extend(_at(where, schema.check_element(element)))
    return element


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _require_object(raw: Any, where: str, errors: list[str], required: tuple[str, ...]) -> bool:
    if not isinstance(raw, dict):
        errors.append(f"{where}: must be an object")
        return False
    missing = [k for k in required if k not in raw]
    for key in missing:
        errors.append(f"{where}: missing required field '{key}'")
    return not missing


def _children(raw: dict[str, Any], key: str, where: str, errors: list[str]) -> list[Any]:
    value = raw.get(key, [])
    if not isinstance(value, list):
        errors.append(f"{where}: '{key}' must be a list")
        return []
    return value


def _at(where: str, problems: list[str]) -> list[str]:
    return [f"{where}: {p}" for p in problems]
