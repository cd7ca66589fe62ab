"""Closed set of archive categories and their editorial metadata."""

from __future__ import annotations

from enum import StrEnum

from moments_archive.core.errors import ValidationFailed


class Category(StrEnum):
    """Top-level grouping every moment belongs to."""

    BRANDING = "Branding"
    IMAGES = "Images"
    INTERFACES = "Interfaces"
    OBJECTS = "Objects"
    SPACES = "Spaces"
    TYPOGRAPHY = "Typography"

    @classmethod
    def parse(cls, value: object) -> Category:
        """Return the category named by `value` or raise `ValidationFailed`."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        valid = ", ".join(member.value for member in cls)
        raise ValidationFailed(f"Invalid category. Must be one of: {valid}")


def category_description(category: Category) -> str:
    """Return the short curator-facing description of a category."""
    match category:
        case Category.BRANDING:
            return "logos, identity systems, brand guidelines"
        case Category.IMAGES:
            return "photography, illustration, posters, visual art"
        case Category.INTERFACES:
            return "web design, apps, product UI, dashboards"
        case Category.OBJECTS:
            return "physical products, hardware, packaging"
        case Category.SPACES:
            return "architecture, interiors, retail environments"
        case Category.TYPOGRAPHY:
            return "typefaces, lettering, type systems"


def tag_suggestions(category: Category) -> list[str]:
    """Return starter tags offered to curators for a category."""
    match category:
        case Category.BRANDING:
            return ["logo", "identity", "guidelines", "rebrand", "wordmark", "visual-identity"]
        case Category.IMAGES:
            return ["photography", "illustration", "poster", "print", "editorial", "visual"]
        case Category.INTERFACES:
            return ["web", "app", "ui", "dashboard", "saas", "mobile", "product"]
        case Category.OBJECTS:
            return ["hardware", "packaging", "product", "industrial", "physical"]
        case Category.SPACES:
            return ["architecture", "interior", "retail", "exhibition", "environment"]
        case Category.TYPOGRAPHY:
            return ["typeface", "lettering", "variable", "specimen", "font", "type"]
