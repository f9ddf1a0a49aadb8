from html import escape

from src.components.sections.shared import expandable_text, image_tag
from src.sections.domain.models import AdditionalPrize, MainPrize

PRIZES_CSS = """
.remila-prizes .remila-prize-rank {
    font-size: 14px;
    font-weight: 700;
    color: var(--primary-color);
    letter-spacing: 0.05em;
}
.remila-prizes .remila-prize-amount {
    font-size: 1.75rem;
    font-weight: 700;
    color: var(--secondary-color);
    margin: 0.25rem 0 0.75rem;
}
.remila-prizes h4 { margin: 2.5rem 0 1rem; font-size: 1.25rem; text-align: center; }
"""


def render_main_prizes(items: list[MainPrize]) -> str:
    cards = []
    for prize in items:
        icon = f"{escape(prize.icon)} " if prize.icon else ""
        cards.append(
            '<article class="remila-card">'
            f'<div class="remila-prize-rank">{icon}{escape(prize.rank)}</div>'
            f"<h3>{escape(prize.title)}</h3>"
            f'<div class="remila-prize-amount">{escape(prize.amount)}</div>'
            f"{expandable_text(prize.description)}"
            "</article>"
        )
    return f'<div class="remila-grid">{"".join(cards)}</div>'


def render_additional_prizes(items: list[AdditionalPrize]) -> str:
    cards = []
    for prize in items:
        cards.append(
            '<article class="remila-card">'
            f"{image_tag(prize.image, prize.name)}"
            f"<h3>{escape(prize.name)}</h3>"
            f'<div class="remila-prize-amount">{escape(prize.value)}</div>'
            f"{expandable_text(prize.description)}"
            "</article>"
        )
    return f'<div class="remila-grid">{"".join(cards)}</div>'


def render_prizes(main: list[MainPrize], additional: list[AdditionalPrize]) -> str:
    body = render_main_prizes(main) if main else ""
    if additional:
        body += "<h4>Additional Prizes</h4>" + render_additional_prizes(additional)
    return body
