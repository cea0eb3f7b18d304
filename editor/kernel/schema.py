"""
Pagecraft Kernel — Entity Schema Validation

Pure predicates over the typed tree. Every check returns a list of error
strings (empty list = valid); validate() wraps them and raises.

Element properties are checked against the property record registered for
the element's type in ELEMENT_PROPERTY_RECORDS. That mapping is the only
place element behavior is keyed by type.
"""

from __future__ import annotations

from typing import Any, Union, get_args, get_origin, get_type_hints, is_typeddict

from editor.kernel.errors import SchemaViolation
from editor.kernel.properties import ELEMENT_PROPERTY_RECORDS
from editor.kernel.types import (
    COMPONENT_TYPES,
    EDITABLE_TYPES,
    ELEMENT_TYPES,
    HEADING_LEVELS,
    SECTION_TYPES,
    Colors,
    Component,
    Element,
    Section,
    Spacing,
    Template,
)

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def validate(node: Template | Section | Component | Element) -> None:
    """
    Validate a node and its whole subtree.
    Raises SchemaViolation carrying every problem found.
    """
    errors = collect_errors(node)
    if errors:
        raise SchemaViolation(errors)


def collect_errors(node: Template | Section | Component | Element, where: str = "") -> list[str]:
    """Recursive form of the check_* predicates. Errors are prefixed with their location."""
    errors: list[str] = []
    if isinstance(node, Template):
        errors.extend(_at(where or "template", check_template(node)))
        for section in node.sections:
            errors.extend(collect_errors(section, f"{where or 'template'}/{section.id}"))
    elif isinstance(node, Section):
        errors.extend(_at(where or node.id, check_section(node)))
        for component in node.components:
            errors.extend(collect_errors(component, f"{where or node.id}/{component.id}"))
    elif isinstance(node, Component):
        errors.extend(_at(where or node.id, check_component(node)))
        for element in node.elements:
            errors.extend(collect_errors(element, f"{where or node.id}/{element.id}"))
    elif isinstance(node, Element):
        errors.extend(_at(where or node.id, check_element(node)))
    else:
        errors.append(f"Unknown node kind: {type(node).__name__}")
    return errors


def is_valid_node_id(value: Any) -> bool:
    """Sibling-scoped ids: any non-empty string without the path separator."""
    return isinstance(value, str) and bool(value) and "/" not in value


# ---------------------------------------------------------------------------
# Per-level checks (non-recursive)
# ---------------------------------------------------------------------------


def check_element(element: Element) -> list[str]:
    errors: list[str] = []
    if not is_valid_node_id(element.id):
        errors.append(f"Invalid element id: {element.id!r}")
    if element.type not in ELEMENT_TYPES:
        errors.append(f"Unknown element type: {element.type!r}")
        return errors  # can't check properties for unknown type
    if not isinstance(element.properties, dict):
        errors.append("'properties' must be an object")
        return errors

    record = ELEMENT_PROPERTY_RECORDS[element.type]
    for key in sorted(record.__required_keys__):
        if key not in element.properties:
            errors.append(f"{element.type} requires property '{key}'")
    for key, value in element.properties.items():
        errors.extend(check_property(element.type, key, value, element.properties))
    return errors


def check_property(
    element_type: str,
    key: str,
    value: Any,
    properties: dict[str, Any] | None = None,
) -> list[str]:
    """
    Check one property value against the element type's record.
    Keys the record does not declare are accepted (properties are open).

    `properties` is the element's full property map, for rules that compare
    one value against a sibling (Rating.value against Rating.max).
    """
    record = ELEMENT_PROPERTY_RECORDS.get(element_type)
    if record is None:
        return [f"Unknown element type: {element_type!r}"]

    hints = get_type_hints(record)
    if key in hints and not _matches(value, hints[key]):
        return [f"{element_type}.{key} must be {_describe(hints[key])}, got {type(value).__name__}"]

    rule = _ELEMENT_RULES.get(element_type)
    if rule:
        return rule(key, value, properties or {})
    return []


def check_component(component: Component) -> list[str]:
    errors: list[str] = []
    if not is_valid_node_id(component.id):
        errors.append(f"Invalid component id: {component.id!r}")
    if component.type not in COMPONENT_TYPES:
        errors.append(f"Unknown component type: {component.type!r}")
    errors.extend(_check_editable(component.editable))
    if component.parameters is not None and not isinstance(component.parameters, dict):
        errors.append("'parameters' must be an object")
    errors.extend(_check_unique("element", [e.id for e in component.elements]))

    rule = _COMPONENT_RULES.get(component.type)
    if rule:
        errors.extend(rule(component))
    return errors


def check_section(section: Section) -> list[str]:
    errors: list[str] = []
    if not is_valid_node_id(section.id):
        errors.append(f"Invalid section id: {section.id!r}")
    if section.type not in SECTION_TYPES:
        errors.append(f"Unknown section type: {section.type!r}")
    errors.extend(_check_editable(section.editable))
    for key in ("name", "background", "spacing"):
        value = getattr(section, key)
        if key == "name" or value is not None:
            errors.extend(check_section_attribute(key, value))
    if section.properties is not None and not isinstance(section.properties, dict):
        errors.append("'properties' must be an object")
    errors.extend(_check_unique("component", [c.id for c in section.components]))
    return errors


def check_section_attribute(key: str, value: Any) -> list[str]:
    if key == "name":
        if not isinstance(value, str) or not value:
            return ["Section name must be a non-empty string"]
    elif key == "background":
        if value is not None and not isinstance(value, str):
            return ["Section background must be a string"]
    elif key == "spacing":
        if isinstance(value, dict):
            value = Spacing.from_dict(value)
        if value is not None and not isinstance(value, Spacing):
            return ["Section spacing must be an object"]
        if value is not None:
            return [
                f"spacing.{k} must be a number"
                for k in ("top", "bottom", "between")
                if getattr(value, k) is not None and not _is_number(getattr(value, k))
            ]
    return []


def check_template(template: Template) -> list[str]:
    errors: list[str] = []
    if isinstance(template.id, bool) or not isinstance(template.id, str | int) or template.id == "":
        errors.append(f"Invalid template id: {template.id!r}")
    for key in ("name", "title"):
        errors.extend(check_template_attribute(key, getattr(template, key)))
    for key, value in (
        ("description", template.description),
        ("category", template.category),
        ("thumbnail", template.thumbnail),
        ("logoUrl", template.logo_url),
        ("colors", template.colors),
    ):
        if value is not None:
            errors.extend(check_template_attribute(key, value))
    if template.metadata is not None and not isinstance(template.metadata, dict):
        errors.append("'metadata' must be an object")
    errors.extend(_check_unique("section", [s.id for s in template.sections]))
    return errors


def check_template_attribute(key: str, value: Any) -> list[str]:
    if key in ("name", "title"):
        if not isinstance(value, str) or not value:
            return [f"Template {key} must be a non-empty string"]
    elif key == "colors":
        if isinstance(value, dict):
            if not {"primary", "secondary"} <= value.keys():
                return ["colors requires 'primary' and 'secondary'"]
            value = Colors.from_dict(value)
        if not isinstance(value, Colors):
            return ["colors must be an object"]
        return [
            f"colors.{k} must be a string"
            for k in ("primary", "secondary", "accent")
            if (k != "accent" or value.accent is not None) and not isinstance(getattr(value, k), str)
        ]
    elif value is not None and not isinstance(value, str):
        return [f"Template {key} must be a string"]
    return []


# ---------------------------------------------------------------------------
# Type-specific rules
# ---------------------------------------------------------------------------


def _heading_rule(key: str, value: Any, properties: dict[str, Any]) -> list[str]:
    if key == "level" and value not in HEADING_LEVELS:
        return [f"Heading.level must be one of h1..h6, got {value!r}"]
    return []


def _price_rule(key: str, value: Any, properties: dict[str, Any]) -> list[str]:
    if key == "amount" and _is_number(value) and value < 0:
        return ["Price.amount must not be negative"]
    return []


def _rating_rule(key: str, value: Any, properties: dict[str, Any]) -> list[str]:
    if key == "value" and _is_number(value):
        top = properties.get("max", 5)
        if not _is_number(top):
            top = 5
        if not 0 <= value <= top:
            return [f"Rating.value must be between 0 and {top}, got {value}"]
    if key == "max" and isinstance(value, int) and not isinstance(value, bool) and value < 1:
        return ["Rating.max must be at least 1"]
    return []


_ELEMENT_RULES = {
    "Heading": _heading_rule,
    "Price": _price_rule,
    "Rating": _rating_rule,
}


def _product_card_rule(component: Component) -> list[str]:
    if not any(e.type == "Price" for e in component.elements):
        return ["ProductCard requires a Price element"]
    return []


def _testimonial_rule(component: Component) -> list[str]:
    if not any(e.type in ("Paragraph", "Text") for e in component.elements):
        return ["Testimonial requires a Paragraph or Text element"]
    return []


_COMPONENT_RULES = {
    "ProductCard": _product_card_rule,
    "Testimonial": _testimonial_rule,
}


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _at(where: str, errors: list[str]) -> list[str]:
    return [f"{where}: {e}" for e in errors]


def _check_editable(value: Any) -> list[str]:
    if value is not None and value not in EDITABLE_TYPES:
        return [f"Unknown editable value: {value!r}"]
    return []


def _check_unique(kind: str, ids: list[str]) -> list[str]:
    seen: set[str] = set()
    errors: list[str] = []
    for node_id in ids:
        if node_id in seen:
            errors.append(f"Duplicate {kind} id: {node_id!r}")
        seen.add(node_id)
    return errors


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _matches(value: Any, annotation: Any) -> bool:
    if annotation is Any:
        return True
    if annotation is float:
        return _is_number(value)
    if annotation is int:
        return isinstance(value, int) and not isinstance(value, bool)
    if annotation is str:
        return isinstance(value, str)
    if annotation is bool:
        return isinstance(value, bool)
    if is_typeddict(annotation):
        if not isinstance(value, dict):
            return False
        hints = get_type_hints(annotation)
        if not annotation.__required_keys__ <= value.keys():
            return False
        return all(_matches(value[k], hints[k]) for k in value if k in hints)
    origin = get_origin(annotation)
    if origin is list:
        (item,) = get_args(annotation)
        return isinstance(value, list) and all(_matches(v, item) for v in value)
    if origin is dict:
        return isinstance(value, dict)
    if origin is Union:
        return any(_matches(value, a) for a in get_args(annotation))
    return isinstance(value, annotation)


def _describe(annotation: Any) -> str:
    if annotation is float:
        return "a number"
    if is_typeddict(annotation):
        return f"an object with {', '.join(sorted(annotation.__required_keys__))}"
    if get_origin(annotation) is list:
        return f"a list of {_describe(get_args(annotation)[0])}"
    return f"a {getattr(annotation, '__name__', str(annotation))}"
