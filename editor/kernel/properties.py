"""
Pagecraft Kernel — Element Property Records

One TypedDict per ElementType. Required keys must be present on every
element of that type; other declared keys are type-checked when present;
undeclared keys are allowed.

No postponed annotations in this module: TypedDict only sees
Required/NotRequired when they are evaluated.
"""

from typing import NotRequired, Required, TypedDict

from editor.kernel.types import ELEMENT_TYPES


class HeadingProps(TypedDict, total=False):
    text: Required[str]
    level: str


class ParagraphProps(TypedDict, total=False):
    text: Required[str]


class TextProps(TypedDict, total=False):
    text: Required[str]


class ImageProps(TypedDict, total=False):
    src: Required[str]
    alt: str
    caption: str


class ButtonProps(TypedDict, total=False):
    text: Required[str]
    url: str
    variant: str


class LogoProps(TypedDict, total=False):
    text: Required[str]
    imageUrl: str


class BadgeProps(TypedDict, total=False):
    text: Required[str]


class LinkItem(TypedDict):
    text: str
    url: str
    id: NotRequired[str]


class NavigationProps(TypedDict, total=False):
    links: Required[list[LinkItem]]


class LinksProps(TypedDict, total=False):
    links: Required[list[LinkItem]]
    title: str


class SocialLinksProps(TypedDict, total=False):
    links: Required[list[LinkItem]]


class CopyrightProps(TypedDict, total=False):
    text: Required[str]


class PriceProps(TypedDict, total=False):
    amount: Required[float]
    currency: str


class RatingProps(TypedDict, total=False):
    value: Required[float]
    max: int


ELEMENT_PROPERTY_RECORDS: dict[str, type] = {
    "Heading": HeadingProps,
    "Paragraph": ParagraphProps,
    "Image": ImageProps,
    "Button": ButtonProps,
    "Logo": LogoProps,
    "Badge": BadgeProps,
    "Navigation": NavigationProps,
    "Links": LinksProps,
    "SocialLinks": SocialLinksProps,
    "Copyright": CopyrightProps,
    "Text": TextProps,
    "Price": PriceProps,
    "Rating": RatingProps,
}

_unmatched = set(ELEMENT_PROPERTY_RECORDS) ^ set(ELEMENT_TYPES)
if _unmatched:
    raise RuntimeError(f"Element types and property records disagree: {sorted(_unmatched)}")
