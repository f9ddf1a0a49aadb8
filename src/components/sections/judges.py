from html import escape

from src.components.sections.shared import expandable_text, external_link, image_tag
from src.sections.domain.models import Judge

JUDGES_CSS = """
.remila-judges .remila-judge-photo img {
    width: 100%;
    aspect-ratio: 1 / 1;
    object-fit: cover;
    margin-bottom: 1rem;
}
.remila-judges .remila-judge-salon { font-size: 14px; opacity: 0.75; margin-bottom: 0.5rem; }
.remila-judges .remila-judge-instagram { font-size: 14px; margin-bottom: 0.75rem; }
"""


def instagram_url(handle: str) -> str:
    if handle.startswith(("http://", "https://")):
        return handle
    return f"https://www.instagram.com/{handle.lstrip('@')}/"


def render_judges(items: list[Judge]) -> str:
    cards = []
    for judge in items:
        instagram = ""
        if judge.instagram:
            handle = judge.instagram.rstrip("/").rsplit("/", 1)[-1].lstrip("@")
            instagram = (
                '<div class="remila-judge-instagram">'
                f"{external_link(instagram_url(judge.instagram), '@' + handle)}</div>"
            )
        salon = (
            f'<div class="remila-judge-salon">{escape(judge.salon)}</div>'
            if judge.salon
            else ""
        )
        cards.append(
            '<article class="remila-card">'
            f'<div class="remila-judge-photo">{image_tag(judge.image, judge.name)}</div>'
            f"<h3>{escape(judge.name)}</h3>"
            f"{salon}"
            f"{instagram}"
            f"{expandable_text(judge.profile, rich=True)}"
            "</article>"
        )
    return f'<div class="remila-grid">{"".join(cards)}</div>'
