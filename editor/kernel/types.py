"""
Pagecraft Kernel — Shared Types

Data classes used across schema, hydration, catalog, and store.
These are the contracts that bind the kernel together.

Tree shape:
- Template is the document root and owns an ordered list of Sections
- Section owns an ordered list of Components
- Component owns an ordered list of Elements (leaves)

Ids are unique among siblings only. Every lookup goes through a NodePath
(section_id/component_id/element_id), never a flat id index.

Unknown serialized keys are kept in `extra` on every node so they survive
a hydration round trip.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Literal, get_args

# ---------------------------------------------------------------------------
# Closed vocabularies
# ---------------------------------------------------------------------------

ElementType = Literal[
    "Heading",
    "Paragraph",
    "Image",
    "Button",
    "Logo",
    "Badge",
    "Navigation",
    "Links",
    "SocialLinks",
    "Copyright",
    "Text",
    "Price",
    "Rating",
]

ComponentType = Literal[
    "Header",
    "HeroImage",
    "HeroSlider",
    "VideoSlider",
    "ProductCard",
    "Testimonial",
    "Footer",
]

SectionType = Literal[
    "HeaderSection",
    "HeroSection",
    "FeaturedProductsSection",
    "TestimonialsSection",
    "FooterSection",
]

# editable          — freely editable and replaceable
# locked-replacing  — cannot be swapped out or removed; contents stay editable
# locked-edit       — contents cannot be edited
EditableType = Literal["editable", "locked-replacing", "locked-edit"]

ToolId = Literal["sections", "styles", "media", "text", "components"]

DeviceMode = Literal["desktop", "tablet", "mobile"]

ELEMENT_TYPES: tuple[str, ...] = get_args(ElementType)
COMPONENT_TYPES: tuple[str, ...] = get_args(ComponentType)
SECTION_TYPES: tuple[str, ...] = get_args(SectionType)
EDITABLE_TYPES: tuple[str, ...] = get_args(EditableType)
TOOL_IDS: tuple[str, ...] = get_args(ToolId)
DEVICE_MODES: tuple[str, ...] = get_args(DeviceMode)

DEFAULT_TOOL: str = "sections"
DEFAULT_DEVICE_MODE: str = "desktop"

HEADING_LEVELS: set[str] = {"h1", "h2", "h3", "h4", "h5", "h6"}

# Template attributes addressable through an update on the root path.
# Anything else lands in `metadata`.
TEMPLATE_ATTRIBUTES: set[str] = {
    "name",
    "title",
    "description",
    "category",
    "thumbnail",
    "logoUrl",
    "colors",
}

# Section attributes addressable directly. Anything else lands in `properties`.
SECTION_ATTRIBUTES: set[str] = {"name", "background", "spacing"}


# ---------------------------------------------------------------------------
# Tree nodes
# ---------------------------------------------------------------------------


@dataclass
class Element:
    """Leaf content unit (heading, image, button...)."""

    id: str
    type: str
    properties: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "properties": self.properties,
        }
        return {**self.extra, **d}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Element:
        return cls(
            id=d["id"],
            type=d["type"],
            properties=d.get("properties", {}),
            extra=_extra(d, {"id", "type", "properties"}),
        )


@dataclass
class Component:
    """A semantically named block (navbar, product card) made of Elements."""

    id: str
    type: str
    editable: str | None = None
    elements: list[Element] = field(default_factory=list)
    parameters: dict[str, Any] | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "type": self.type}
        if self.editable is not None:
            d["editable"] = self.editable
        d["elements"] = [e.to_dict() for e in self.elements]
        if self.parameters is not None:
            d["parameters"] = self.parameters
        return {**self.extra, **d}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Component:
        return cls(
            id=d["id"],
            type=d["type"],
            editable=d.get("editable"),
            elements=[Element.from_dict(e) for e in d.get("elements", [])],
            parameters=d.get("parameters"),
            extra=_extra(d, {"id", "type", "editable", "elements", "parameters"}),
        )

    def find_element(self, element_id: str) -> Element | None:
        for element in self.elements:
            if element.id == element_id:
                return element
        return None


@dataclass
class Spacing:
    top: int | float | None = None
    bottom: int | float | None = None
    between: int | float | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {}
        for key in ("top", "bottom", "between"):
            value = getattr(self, key)
            if value is not None:
                d[key] = value
        return {**self.extra, **d}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Spacing:
        return cls(
            top=d.get("top"),
            bottom=d.get("bottom"),
            between=d.get("between"),
            extra=_extra(d, {"top", "bottom", "between"}),
        )


@dataclass
class Colors:
    primary: str
    secondary: str
    accent: str | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"primary": self.primary, "secondary": self.secondary}
        if self.accent is not None:
            d["accent"] = self.accent
        return {**self.extra, **d}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Colors:
        return cls(
            primary=d["primary"],
            secondary=d["secondary"],
            accent=d.get("accent"),
            extra=_extra(d, {"primary", "secondary", "accent"}),
        )


@dataclass
class Section:
    """A horizontal page region (header, hero, footer...)."""

    id: str
    type: str
    name: str
    editable: str | None = None
    background: str | None = None
    spacing: Spacing | None = None
    properties: dict[str, Any] | None = None
    components: list[Component] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "type": self.type, "name": self.name}
        if self.editable is not None:
            d["editable"] = self.editable
        if self.background is not None:
            d["background"] = self.background
        if self.spacing is not None:
            d["spacing"] = self.spacing.to_dict()
        if self.properties is not None:
            d["properties"] = self.properties
        d["components"] = [c.to_dict() for c in self.components]
        return {**self.extra, **d}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Section:
        spacing = d.get("spacing")
        return cls(
            id=d["id"],
            type=d["type"],
            name=d["name"],
            editable=d.get("editable"),
            background=d.get("background"),
            spacing=Spacing.from_dict(spacing) if spacing is not None else None,
            properties=d.get("properties"),
            components=[Component.from_dict(c) for c in d.get("components", [])],
            extra=_extra(
                d,
                {"id", "type", "name", "editable", "background", "spacing", "properties", "components"},
            ),
        )

    def find_component(self, component_id: str) -> Component | None:
        for component in self.components:
            if component.id == component_id:
                return component
        return None


@dataclass
class Template:
    """The document root."""

    id: str | int
    name: str
    title: str
    description: str | None = None
    category: str | None = None
    thumbnail: str | None = None
    logo_url: str | None = None
    colors: Colors | None = None
    metadata: dict[str, Any] | None = None
    sections: list[Section] = field(default_factory=list)
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"id": self.id, "name": self.name, "title": self.title}
        for key, value in (
            ("description", self.description),
            ("category", self.category),
            ("thumbnail", self.thumbnail),
            ("logoUrl", self.logo_url),
        ):
            if value is not None:
                d[key] = value
        if self.colors is not None:
            d["colors"] = self.colors.to_dict()
        if self.metadata is not None:
            d["metadata"] = self.metadata
        d["sections"] = [s.to_dict() for s in self.sections]
        return {**self.extra, **d}

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> Template:
        colors = d.get("colors")
        return cls(
            id=d["id"],
            name=d["name"],
            title=d["title"],
            description=d.get("description"),
            category=d.get("category"),
            thumbnail=d.get("thumbnail"),
            logo_url=d.get("logoUrl"),
            colors=Colors.from_dict(colors) if colors is not None else None,
            metadata=d.get("metadata"),
            sections=[Section.from_dict(s) for s in d.get("sections", [])],
            extra=_extra(
                d,
                {
                    "id",
                    "name",
                    "title",
                    "description",
                    "category",
                    "thumbnail",
                    "logoUrl",
                    "colors",
                    "metadata",
                    "sections",
                },
            ),
        )

    def find_section(self, section_id: str) -> Section | None:
        for section in self.sections:
            if section.id == section_id:
                return section
        return None


@dataclass(frozen=True)
class TemplateSummary:
    """Gallery entry, without the subtree."""

    id: str
    name: str
    description: str | None = None
    thumbnail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "thumbnail": self.thumbnail,
        }


# ---------------------------------------------------------------------------
# Addressing and geometry
# ---------------------------------------------------------------------------

# Path segments may not contain the separator.
PATH_SEGMENT_PATTERN = re.compile(r"^[^/]+$")


@dataclass(frozen=True)
class NodePath:
    """
    Scoped address of a node in the tree.

    NodePath()                          → the template root
    NodePath("hero")                    → section
    NodePath("hero", "banner")          → component
    NodePath("hero", "banner", "title") → element
    """

    section_id: str | None = None
    component_id: str | None = None
    element_id: str | None = None

    def __post_init__(self) -> None:
        if self.component_id is not None and self.section_id is None:
            raise ValueError("component_id requires section_id")
        if self.element_id is not None and self.component_id is None:
            raise ValueError("element_id requires component_id")

    @classmethod
    def parse(cls, path: str) -> NodePath:
        """
        Parse a slash-separated path.

        Examples:
          ""                   → NodePath()
          "header/navbar"      → NodePath("header", "navbar")
          "header/navbar/logo" → NodePath("header", "navbar", "logo")
        """
        if not path:
            return cls()
        segments = path.split("/")
        if len(segments) > 3 or not all(PATH_SEGMENT_PATTERN.match(s) for s in segments):
            raise ValueError(f"Invalid node path: {path!r}")
        return cls(*segments)

    @property
    def level(self) -> Literal["template", "section", "component", "element"]:
        if self.element_id is not None:
            return "element"
        if self.component_id is not None:
            return "component"
        if self.section_id is not None:
            return "section"
        return "template"

    @property
    def parent(self) -> NodePath | None:
        if self.element_id is not None:
            return NodePath(self.section_id, self.component_id)
        if self.component_id is not None:
            return NodePath(self.section_id)
        if self.section_id is not None:
            return NodePath()
        return None

    def is_within(self, other: NodePath) -> bool:
        """True if self is other or one of its descendants."""
        mine = self.segments()
        theirs = other.segments()
        return mine[: len(theirs)] == theirs

    def segments(self) -> tuple[str, ...]:
        return tuple(s for s in (self.section_id, self.component_id, self.element_id) if s is not None)

    def __str__(self) -> str:
        return "/".join(self.segments())


@dataclass(frozen=True)
class Rect:
    """On-screen bounding box measured by the rendering layer."""

    top: float
    left: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.left + self.width

    @property
    def bottom(self) -> float:
        return self.top + self.height

    def to_dict(self) -> dict[str, float]:
        return {"top": self.top, "left": self.left, "width": self.width, "height": self.height}


@dataclass
class Warning:
    """A non-fatal issue encountered while applying an edit."""

    code: str
    message: str
    details: dict[str, Any] | None = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _extra(d: dict[str, Any], known: set[str]) -> dict[str, Any]:
    return {k: v for k, v in d.items() if k not in known}
