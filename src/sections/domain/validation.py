import re
from typing import Any

from src.config import SectionsConfig

HEX_COLOR = re.compile(r"^#[0-9A-Fa-f]{6}$")
COLOR_KEYS = ("primary", "secondary", "background", "text", "accent")


def validate_section_config(config: Any) -> list[str]:
    """
    Checks a host-supplied widget configuration before anything is mounted.
    Returns human-readable problems; an empty list means the config is usable.
    """
    if not isinstance(config, dict):
        return ["config must be an object"]

    errors: list[str] = []

    site_slug = config.get("siteSlug", config.get("site_slug"))
    if not isinstance(site_slug, str) or not site_slug.strip():
        errors.append("siteSlug is required")

    max_items = config.get("maxItems", config.get("max_items"))
    if max_items is not None:
        limit = SectionsConfig.MAX_ITEMS_LIMIT
        # bool is an int subclass, but not a count
        if (
            isinstance(max_items, bool)
            or not isinstance(max_items, int)
            or not 1 <= max_items <= limit
        ):
            errors.append(f"maxItems must be an integer between 1 and {limit}")

    theme = config.get("theme", config.get("customTheme"))
    colors = theme.get("colors") if isinstance(theme, dict) else None
    if isinstance(colors, dict):
        for key in COLOR_KEYS:
            color = colors.get(key)
            if color and not (isinstance(color, str) and HEX_COLOR.match(color)):
                errors.append(f"{key} color must be a HEX color code (#rrggbb)")

    return errors
