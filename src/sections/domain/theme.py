from typing import Any

from pydantic import BaseModel

from src.sections.domain.models import (
    SiteSettings,
    ThemeColors,
    ThemeConfig,
    ThemeTypography,
)

DEFAULT_THEME: dict[str, dict[str, Any]] = {
    "colors": ThemeConfig().colors.model_dump(by_alias=True),
    "typography": ThemeConfig().typography.model_dump(by_alias=True),
}

DEFAULT_ANIMATION_MS = 560

# snake_case field name -> camelCase key used in merged theme dicts
_FIELD_ALIASES: dict[str, str] = {
    name: info.alias
    for model in (ThemeColors, ThemeTypography)
    for name, info in model.model_fields.items()
    if info.alias and info.alias != name
}


def _as_dict(partial: Any) -> dict[str, Any]:
    if partial is None:
        return {}
    if isinstance(partial, BaseModel):
        return partial.model_dump(by_alias=True, exclude_none=True)
    return dict(partial)


def normalize_theme(partial: dict[str, Any] | ThemeConfig | None = None) -> ThemeConfig:
    """
    Deep-merges a caller supplied (possibly partial) theme over the defaults.

    `colors` and `typography` are merged key by key; every other key is
    passed through untouched. No color validation happens here.
    """
    source = _as_dict(partial)

    merged: dict[str, Any] = dict(source)
    for section, defaults in DEFAULT_THEME.items():
        override = {
            _FIELD_ALIASES.get(key, key): value
            for key, value in _as_dict(source.get(section)).items()
        }
        merged[section] = {**defaults, **override}

    return ThemeConfig.model_validate(merged)


def theme_from_site_settings(
    settings: SiteSettings | None, partial: dict[str, Any] | None = None
) -> ThemeConfig:
    """Builds the tenant theme, carrying the configured animation timing."""
    theme = _as_dict(partial)
    duration = (
        settings.animation_duration
        if settings and settings.animation_duration
        else DEFAULT_ANIMATION_MS
    )
    theme.setdefault("animation", {"duration": duration, "easing": "ease-out"})
    return normalize_theme(theme)


def theme_css_variables(theme: ThemeConfig) -> str:
    """Renders the theme as CSS custom properties for a section root."""
    colors = theme.colors
    animation = getattr(theme, "animation", None) or {}
    duration = animation.get("duration", DEFAULT_ANIMATION_MS)
    easing = animation.get("easing", "ease-out")
    return (
        f"--primary-color: {colors.primary}; "
        f"--secondary-color: {colors.secondary}; "
        f"--background-color: {colors.background}; "
        f"--text-color: {colors.text}; "
        f"--accent-color: {colors.accent}; "
        f"--animation-duration: {duration}ms; "
        f"--animation-easing: {easing}; "
        f"font-family: {theme.typography.font_family};"
    )
