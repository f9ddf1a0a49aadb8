from html import escape

from src.components.sections.shared import expandable_text, external_link, image_tag
from src.sections.domain.models import Sponsor

SPONSORS_CSS = """
.remila-sponsors .remila-sponsor-rank { margin-bottom: 0.75rem; }
.remila-sponsors .remila-sponsor-logo {
    height: 6rem;
    display: flex;
    align-items: center;
    justify-content: center;
    margin-bottom: 1rem;
}
.remila-sponsors .remila-sponsor-logo img { max-height: 100%; object-fit: contain; }
.remila-sponsors .remila-sponsor-award {
    font-size: 14px;
    font-weight: 600;
    color: var(--secondary-color);
    margin-bottom: 0.5rem;
}
"""

# Ranks as entered in the back-office (Japanese) and their English aliases
RANK_COLORS: dict[str, str] = {
    "スペシャル": "#9333ea",
    "special": "#9333ea",
    "ダイヤモンド": "#06b6d4",
    "diamond": "#06b6d4",
    "ゴールド": "#eab308",
    "gold": "#eab308",
    "シルバー": "#94a3b8",
    "silver": "#94a3b8",
    "ブロンズ": "#ea580c",
    "bronze": "#ea580c",
    "チタン": "#64748b",
    "titanium": "#64748b",
}
DEFAULT_RANK_COLOR = "#6b7280"


def rank_color(rank: str) -> str:
    return RANK_COLORS.get(rank, RANK_COLORS.get(rank.lower(), DEFAULT_RANK_COLOR))


def render_sponsors(items: list[Sponsor]) -> str:
    cards = []
    for sponsor in items:
        rank = ""
        if sponsor.rank:
            rank = (
                '<div class="remila-sponsor-rank">'
                f'<span class="remila-badge" style="background: {rank_color(sponsor.rank)}">'
                f"{escape(sponsor.rank)}</span></div>"
            )
        award = (
            f'<div class="remila-sponsor-award">{escape(sponsor.award)}</div>'
            if sponsor.award
            else ""
        )
        cards.append(
            '<article class="remila-card">'
            f"{rank}"
            f'<div class="remila-sponsor-logo">{image_tag(sponsor.image, sponsor.name)}</div>'
            f"<h3>{external_link(sponsor.url, sponsor.name)}</h3>"
            f"{award}"
            f"{expandable_text(sponsor.description)}"
            "</article>"
        )
    return f'<div class="remila-grid">{"".join(cards)}</div>'
