"""
Pagecraft Kernel — Template Catalog

Read-only set of starter templates used to seed new projects.

Entries are held in serialized form and deserialized on every get(), so
each caller receives its own tree and editing can never reach back into the
catalog.
"""

from __future__ import annotations

import copy
from typing import Any

from editor.kernel.errors import NotFound
from editor.kernel.hydration import deserialize
from editor.kernel.types import Template, TemplateSummary

_UNSPLASH = "https://images.unsplash.com"


def _link(text: str, url: str = "#") -> dict[str, str]:
    return {"text": text, "url": url}


def _product(n: int, name: str, price: float, image: str) -> dict[str, Any]:
    return {
        "id": f"product-{n}",
        "type": "ProductCard",
        "editable": "editable",
        "elements": [
            {"id": "image", "type": "Image", "properties": {"src": image, "alt": name}},
            {"id": "name", "type": "Heading", "properties": {"text": name, "level": "h3"}},
            {
                "id": "description",
                "type": "Paragraph",
                "properties": {"text": "Product description goes here"},
            },
            {"id": "price", "type": "Price", "properties": {"amount": price, "currency": "USD"}},
            {"id": "cta", "type": "Button", "properties": {"text": "Add to Cart", "url": "#"}},
        ],
    }


def _testimonial(n: int, name: str, quote: str, rating: int) -> dict[str, Any]:
    return {
        "id": f"testimonial-{n}",
        "type": "Testimonial",
        "editable": "editable",
        "elements": [
            {
                "id": "avatar",
                "type": "Image",
                "properties": {"src": f"{_UNSPLASH}/photo-1580489944761-15a19d654956", "alt": name},
            },
            {"id": "quote", "type": "Paragraph", "properties": {"text": quote}},
            {"id": "author", "type": "Text", "properties": {"text": name}},
            {"id": "rating", "type": "Rating", "properties": {"value": rating, "max": 5}},
        ],
    }


def _header(brand: str, links: list[str]) -> dict[str, Any]:
    return {
        "id": "header",
        "type": "HeaderSection",
        "name": "Header",
        "editable": "locked-replacing",
        "background": "#ffffff",
        "components": [
            {
                "id": "navbar",
                "type": "Header",
                "editable": "locked-replacing",
                "elements": [
                    {"id": "logo", "type": "Logo", "properties": {"text": brand}},
                    {
                        "id": "nav",
                        "type": "Navigation",
                        "properties": {"links": [_link(text) for text in links]},
                    },
                    {"id": "cta", "type": "Button", "properties": {"text": "Contact Us", "url": "#contact"}},
                ],
            }
        ],
    }


def _footer(brand: str) -> dict[str, Any]:
    return {
        "id": "footer",
        "type": "FooterSection",
        "name": "Footer",
        "editable": "locked-replacing",
        "background": "#1F2937",
        "properties": {"textColor": "#ffffff", "mutedTextColor": "#9CA3AF"},
        "components": [
            {
                "id": "footer-content",
                "type": "Footer",
                "editable": "editable",
                "elements": [
                    {"id": "logo", "type": "Logo", "properties": {"text": brand}},
                    {
                        "id": "about",
                        "type": "Paragraph",
                        "properties": {"text": "Brief description of your company."},
                    },
                    {
                        "id": "links",
                        "type": "Links",
                        "properties": {"title": "Links", "links": [_link("Home"), _link("About"), _link("Contact")]},
                    },
                    {
                        "id": "social",
                        "type": "SocialLinks",
                        "properties": {"links": [_link("Facebook"), _link("X")]},
                    },
                    {
                        "id": "copyright",
                        "type": "Copyright",
                        "properties": {"text": f"© {brand}. All rights reserved."},
                    },
                ],
            }
        ],
    }


_BUSINESS: dict[str, Any] = {
    "id": "business",
    "name": "Business Template",
    "title": "Professional Business Website",
    "description": "A clean, professional template perfect for businesses and corporate websites.",
    "category": "business",
    "thumbnail": f"{_UNSPLASH}/photo-1542744173-8e7e53415bb0?auto=format&fit=crop&w=400&h=225&q=80",
    "logoUrl": "https://via.placeholder.com/120x40/4361ee/ffffff?text=LOGO",
    "colors": {"primary": "#4361ee", "secondary": "#3f37c9", "accent": "#4cc9f0"},
    "metadata": {
        "title": "My Business",
        "subtitle": "Welcome to our business website",
        "metaDescription": "Professional business website template with modern design",
    },
    "sections": [
        _header("Business Name", ["Home", "Products", "About", "Contact"]),
        {
            "id": "hero",
            "type": "HeroSection",
            "name": "Hero Section",
            "editable": "editable",
            "spacing": {"top": 48, "bottom": 48},
            "components": [
                {
                    "id": "hero-banner",
                    "type": "HeroImage",
                    "editable": "editable",
                    "elements": [
                        {
                            "id": "title",
                            "type": "Heading",
                            "properties": {"text": "Transform Your Business Online", "level": "h1"},
                        },
                        {
                            "id": "subtitle",
                            "type": "Paragraph",
                            "properties": {
                                "text": "Create a professional website that converts visitors into customers."
                            },
                        },
                        {"id": "cta", "type": "Button", "properties": {"text": "Get Started", "url": "#products"}},
                        {
                            "id": "background",
                            "type": "Image",
                            "properties": {"src": f"{_UNSPLASH}/photo-1607082348824-0a96f2a4b9da", "alt": "Office"},
                        },
                    ],
                }
            ],
        },
        {
            "id": "products",
            "type": "FeaturedProductsSection",
            "name": "Featured Products",
            "editable": "editable",
            "background": "#ffffff",
            "spacing": {"top": 12, "bottom": 12, "between": 24},
            "properties": {"heading": "Featured Products", "buttonText": "View All", "buttonUrl": "#"},
            "components": [
                _product(1, "Premium Watch", 199.0, f"{_UNSPLASH}/photo-1523275335684-37898b6baf30"),
                _product(2, "Leather Bag", 149.5, f"{_UNSPLASH}/photo-1548036328-c9fa89d128fa"),
                _product(3, "Sunglasses", 89.99, f"{_UNSPLASH}/photo-1572635196237-14b3f281503f"),
            ],
        },
        {
            "id": "testimonials",
            "type": "TestimonialsSection",
            "name": "Testimonials",
            "editable": "editable",
            "background": "#F9FAFB",
            "properties": {"heading": "What Our Customers Say"},
            "components": [
                _testimonial(1, "Jordan Lee", "Setting up our site took an afternoon.", 5),
                _testimonial(2, "Sam Rivera", "Our customers find what they need faster.", 4),
            ],
        },
        _footer("Business Name"),
    ],
}

_PORTFOLIO: dict[str, Any] = {
    "id": "portfolio",
    "name": "Portfolio Template",
    "title": "Creative Portfolio",
    "description": "Perfect for showcasing your work, portfolio, or creative projects.",
    "category": "portfolio",
    "thumbnail": f"{_UNSPLASH}/photo-1558655146-d09347e92766?auto=format&fit=crop&w=400&h=225&q=80",
    "colors": {"primary": "#059669", "secondary": "#0d9488", "accent": "#14b8a6"},
    "sections": [
        _header("Studio", ["Work", "About", "Contact"]),
        {
            "id": "hero",
            "type": "HeroSection",
            "name": "Portfolio Hero",
            "components": [
                {
                    "id": "slider",
                    "type": "HeroSlider",
                    "elements": [
                        {"id": "title", "type": "Heading", "properties": {"text": "Creative Portfolio", "level": "h1"}},
                        {
                            "id": "subtitle",
                            "type": "Paragraph",
                            "properties": {"text": "Showcasing exceptional work and creative solutions."},
                        },
                        {
                            "id": "slide-1",
                            "type": "Image",
                            "properties": {"src": f"{_UNSPLASH}/photo-1558655146-d09347e92766", "alt": "Project 1"},
                        },
                        {
                            "id": "slide-2",
                            "type": "Image",
                            "properties": {"src": f"{_UNSPLASH}/photo-1561070791-2526d30994b5", "alt": "Project 2"},
                        },
                    ],
                    "parameters": {"autoplay": True, "interval": 5000},
                }
            ],
        },
        {
            "id": "testimonials",
            "type": "TestimonialsSection",
            "name": "Client Words",
            "components": [
                _testimonial(1, "Alex Morgan", "Delivered beyond the brief, on time.", 5),
            ],
        },
        _footer("Studio"),
    ],
}

_SHOWCASE: dict[str, Any] = {
    "id": "showcase",
    "name": "Showcase Template",
    "title": "Product Showcase",
    "description": "Launch a product with a video hero and a focused feature list.",
    "category": "showcase",
    "thumbnail": f"{_UNSPLASH}/photo-1586281380349-632531db7ed4?auto=format&fit=crop&w=400&h=225&q=80",
    "colors": {"primary": "#7c3aed", "secondary": "#a855f7"},
    "sections": [
        {
            "id": "hero",
            "type": "HeroSection",
            "name": "Launch",
            "editable": "locked-edit",
            "components": [
                {
                    "id": "video",
                    "type": "VideoSlider",
                    "elements": [
                        {"id": "badge", "type": "Badge", "properties": {"text": "New"}},
                        {"id": "title", "type": "Heading", "properties": {"text": "Meet Nova", "level": "h1"}},
                        {
                            "id": "subtitle",
                            "type": "Paragraph",
                            "properties": {"text": "The smartest way to organize your day."},
                        },
                        {
                            "id": "poster",
                            "type": "Image",
                            "properties": {"src": f"{_UNSPLASH}/photo-1586281380349-632531db7ed4", "alt": "Nova"},
                        },
                    ],
                    "parameters": {"videoUrl": "https://example.com/nova.mp4"},
                }
            ],
        },
        {
            "id": "products",
            "type": "FeaturedProductsSection",
            "name": "Editions",
            "components": [
                _product(1, "Nova Standard", 49.0, f"{_UNSPLASH}/photo-1586281380349-632531db7ed4"),
                _product(2, "Nova Pro", 99.0, f"{_UNSPLASH}/photo-1586281380349-632531db7ed4"),
            ],
        },
        _footer("Nova"),
    ],
}

STARTER_TEMPLATES: list[dict[str, Any]] = [_BUSINESS, _PORTFOLIO, _SHOWCASE]


class TemplateCatalog:
    """Ordered, read-only catalog keyed by template id."""

    def __init__(self, entries: list[dict[str, Any]] | None = None) -> None:
        self._entries: dict[str, dict[str, Any]] = {}
        for entry in copy.deepcopy(entries if entries is not None else STARTER_TEMPLATES):
            # Fail fast on a broken entry rather than at first selection.
            deserialize(entry)
            self._entries[str(entry["id"])] = entry

    def list(self) -> list[TemplateSummary]:
        return [
            TemplateSummary(
                id=template_id,
                name=entry["name"],
                description=entry.get("description"),
                thumbnail=entry.get("thumbnail"),
            )
            for template_id, entry in self._entries.items()
        ]

    def get(self, template_id: str) -> Template:
        return deserialize(self.payload(template_id))

    def payload(self, template_id: str) -> dict[str, Any]:
        """Serialized entry; a fresh copy on every call."""
        entry = self._entries.get(str(template_id))
        if entry is None:
            raise NotFound("Template", template_id)
        return copy.deepcopy(entry)

    def __contains__(self, template_id: object) -> bool:
        return str(template_id) in self._entries

    def __len__(self) -> int:
        return len(self._entries)


default_catalog = TemplateCatalog()
