from html import escape
from urllib.parse import urlencode

from src.components.sections.shared import expandable_text
from src.sections.domain.sanitizer import is_safe_href
from src.sections.domain.models import Resource

RESOURCES_CSS = """
.remila-resourceDownload .remila-resource-meta {
    display: flex;
    gap: 0.75rem;
    align-items: center;
    font-size: 13px;
    opacity: 0.75;
    margin-bottom: 0.5rem;
}
.remila-resourceDownload .remila-download {
    display: inline-block;
    margin-top: 1rem;
    padding: 0.5rem 1.25rem;
    border-radius: 6px;
    background: var(--primary-color);
    color: #ffffff;
    font-weight: 600;
    text-decoration: none;
}
"""


def format_file_size(size: int) -> str:
    if size <= 0:
        return ""
    units = ["B", "KB", "MB", "GB"]
    value = float(size)
    for unit in units:
        if value < 1024 or unit == units[-1]:
            return f"{value:.0f} {unit}" if unit == "B" else f"{value:.1f} {unit}"
        value /= 1024
    return ""


def download_href(resource: Resource, download_route: str | None, site_slug: str) -> str:
    """Direct file link, or the tracking route that records the download first."""
    if not download_route:
        return resource.file_url
    query = urlencode({"download": resource.id, "siteSlug": site_slug})
    return f"{download_route}?{query}"


def download_button(
    resource: Resource, download_route: str | None = None, site_slug: str = ""
) -> str:
    if not resource.file_url or not is_safe_href(resource.file_url):
        return ""
    href = download_href(resource, download_route, site_slug)
    # The route is a page, not the file
    download_attr = "" if download_route else "download "
    return (
        f'<a class="remila-download" href="{escape(href, quote=True)}" '
        f'{download_attr}target="_blank" rel="noopener noreferrer">Download</a>'
    )


def render_resources(
    items: list[Resource], download_route: str | None = None, site_slug: str = ""
) -> str:
    cards = []
    for resource in items:
        badge = ""
        if resource.category and resource.category.name:
            color = resource.category.color or "var(--primary-color)"
            badge = (
                f'<span class="remila-badge" style="background: {escape(color, quote=True)}">'
                f"{escape(resource.category.name)}</span>"
            )
        meta = " ".join(
            part
            for part in (
                badge,
                escape(resource.file_type.upper()),
                escape(format_file_size(resource.file_size)),
            )
            if part
        )
        download = download_button(resource, download_route, site_slug)
        cards.append(
            '<article class="remila-card">'
            f'<div class="remila-resource-meta">{meta}</div>'
            f"<h3>{escape(resource.title)}</h3>"
            f"{expandable_text(resource.description)}"
            f"{download}"
            "</article>"
        )
    return f'<div class="remila-grid">{"".join(cards)}</div>'
