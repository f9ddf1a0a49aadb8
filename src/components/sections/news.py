from html import escape

from src.components.sections.shared import expandable_text, external_link
from src.sections.domain.models import NewsItem, ThemeConfig

NEWS_CSS = """
.remila-news .remila-news-meta {
    display: flex;
    align-items: center;
    gap: 0.75rem;
    margin-bottom: 0.5rem;
    font-size: 14px;
    opacity: 0.8;
}
.remila-news .remila-news-link { margin-top: 0.75rem; font-weight: 600; font-size: 14px; }
"""

# Legacy free-text categories, used when the row has no category record
FALLBACK_CATEGORIES: dict[str, tuple[str, str]] = {
    "news": ("News", "#3b82f6"),
    "press": ("Press Release", "#8b5cf6"),
    "update": ("Update", "#10b981"),
    "event": ("Event", "#f59e0b"),
}


def category_display(item: NewsItem, theme: ThemeConfig) -> tuple[str, str]:
    """Returns the (label, color) pair for the item's category badge."""
    if item.news_category and item.news_category.name:
        return item.news_category.name, item.news_category.color or theme.colors.primary
    label, color = FALLBACK_CATEGORIES.get(item.category, ("Notice", theme.colors.primary))
    return label, color


def format_date(value: str | None) -> str:
    # Supabase returns ISO timestamps; the date part is enough here
    if not value:
        return ""
    return value[:10].replace("-", ".")


def render_news(items: list[NewsItem], theme: ThemeConfig) -> str:
    cards = []
    for item in items:
        label, color = category_display(item, theme)
        link = ""
        if item.link_url and item.link_text:
            link = (
                '<div class="remila-news-link">'
                f"{external_link(item.link_url, item.link_text)}</div>"
            )
        cards.append(
            '<article class="remila-card">'
            '<div class="remila-news-meta">'
            f'<span class="remila-badge" style="background: {escape(color, quote=True)}">'
            f"{escape(label)}</span>"
            f"<time>{escape(format_date(item.publish_date))}</time>"
            "</div>"
            f"<h3>{escape(item.title)}</h3>"
            f"{expandable_text(item.content, rich=True)}"
            f"{link}"
            "</article>"
        )
    return f'<div class="remila-list">{"".join(cards)}</div>'
