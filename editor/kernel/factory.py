"""
Pagecraft Kernel — Node Factory

Builds new Sections, Components and Elements pre-filled with placeholder
content, for the store's add operations and for the catalog.

Ids are generated per parent: the first heading in a component is
"heading", the second "heading-2", and so on. Sibling scope is all that
uniqueness requires.
"""

from __future__ import annotations

import copy
import re
from typing import Any

from editor.kernel.errors import SchemaViolation
from editor.kernel.types import (
    COMPONENT_TYPES,
    ELEMENT_TYPES,
    SECTION_TYPES,
    Component,
    Element,
    Section,
    Spacing,
)

_PLACEHOLDER_IMAGE = "https://images.unsplash.com/photo-1523275335684-37898b6baf30"

_DEFAULT_LINKS = [
    {"text": "Home", "url": "#"},
    {"text": "About", "url": "#"},
    {"text": "Contact", "url": "#"},
]

ELEMENT_DEFAULTS: dict[str, dict[str, Any]] = {
    "Heading": {"text": "New Heading", "level": "h2"},
    "Paragraph": {"text": "New paragraph text. Click to edit."},
    "Image": {"src": _PLACEHOLDER_IMAGE, "alt": "Image", "caption": ""},
    "Button": {"text": "Click me", "url": "#", "variant": "primary"},
    "Logo": {"text": "Brand Name"},
    "Badge": {"text": "New"},
    "Navigation": {"links": _DEFAULT_LINKS},
    "Links": {"title": "Links", "links": _DEFAULT_LINKS},
    "SocialLinks": {"links": [{"text": "Facebook", "url": "#"}, {"text": "X", "url": "#"}]},
    "Copyright": {"text": "© Brand Name. All rights reserved."},
    "Text": {"text": "Text"},
    "Price": {"amount": 99.99, "currency": "USD"},
    "Rating": {"value": 5, "max": 5},
}

COMPONENT_LAYOUTS: dict[str, list[str]] = {
    "Header": ["Logo", "Navigation", "Button"],
    "HeroImage": ["Heading", "Paragraph", "Button", "Image"],
    "HeroSlider": ["Heading", "Paragraph", "Image"],
    "VideoSlider": ["Heading", "Paragraph", "Image"],
    "ProductCard": ["Image", "Heading", "Paragraph", "Price", "Button"],
    "Testimonial": ["Image", "Paragraph", "Text", "Rating"],
    "Footer": ["Logo", "Paragraph", "Links", "SocialLinks", "Copyright"],
}

SECTION_LAYOUTS: dict[str, dict[str, Any]] = {
    "HeaderSection": {
        "name": "Header",
        "components": ["Header"],
        "background": "#3B82F6",
    },
    "HeroSection": {
        "name": "Hero Section",
        "components": ["HeroImage"],
    },
    "FeaturedProductsSection": {
        "name": "Featured Products",
        "components": ["ProductCard"],
        "background": "#ffffff",
        "spacing": {"top": 12, "bottom": 12},
        "properties": {"heading": "Featured Products", "buttonText": "View All", "buttonUrl": "#"},
    },
    "TestimonialsSection": {
        "name": "Testimonials",
        "components": ["Testimonial"],
        "background": "#F9FAFB",
        "properties": {"heading": "What Our Customers Say"},
    },
    "FooterSection": {
        "name": "Footer",
        "components": ["Footer"],
        "background": "#1F2937",
    },
}


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def new_id(node_type: str, taken: set[str] | list[str]) -> str:
    """First free sibling id derived from the node type: ProductCard → product-card, product-card-2..."""
    base = re.sub(r"(?<!^)(?=[A-Z])", "-", node_type).lower()
    if base not in taken:
        return base
    n = 2
    while f"{base}-{n}" in taken:
        n += 1
    return f"{base}-{n}"


def create_element(
    element_type: str,
    element_id: str | None = None,
    properties: dict[str, Any] | None = None,
) -> Element:
    if element_type not in ELEMENT_TYPES:
        raise SchemaViolation([f"Unknown element type: {element_type!r}"])
    props = copy.deepcopy(ELEMENT_DEFAULTS[element_type])
    if properties:
        props.update(copy.deepcopy(properties))
    return Element(id=element_id or new_id(element_type, set()), type=element_type, properties=props)


def create_component(
    component_type: str,
    component_id: str | None = None,
    editable: str | None = None,
) -> Component:
    if component_type not in COMPONENT_TYPES:
        raise SchemaViolation([f"Unknown component type: {component_type!r}"])
    elements: list[Element] = []
    for element_type in COMPONENT_LAYOUTS[component_type]:
        taken = {e.id for e in elements}
        elements.append(create_element(element_type, new_id(element_type, taken)))
    return Component(
        id=component_id or new_id(component_type, set()),
        type=component_type,
        editable=editable,
        elements=elements,
    )


def create_section(
    section_type: str,
    section_id: str | None = None,
    name: str | None = None,
    editable: str | None = None,
) -> Section:
    if section_type not in SECTION_TYPES:
        raise SchemaViolation([f"Unknown section type: {section_type!r}"])
    layout = SECTION_LAYOUTS[section_type]
    components: list[Component] = []
    for component_type in layout["components"]:
        taken = {c.id for c in components}
        components.append(create_component(component_type, new_id(component_type, taken)))
    spacing = layout.get("spacing")
    properties = layout.get("properties")
    return Section(
        id=section_id or new_id(section_type, set()),
        type=section_type,
        name=name or layout["name"],
        editable=editable,
        background=layout.get("background"),
        spacing=Spacing.from_dict(spacing) if spacing else None,
        properties=copy.deepcopy(properties) if properties else None,
        components=components,
    )
