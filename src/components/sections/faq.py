from html import escape

from src.sections.domain.models import Faq
from src.sections.domain.sanitizer import sanitize_html

FAQ_CSS = """
.remila-faq details.remila-faq-item summary {
    cursor: pointer;
    font-weight: 600;
    font-size: 1.05rem;
}
.remila-faq details.remila-faq-item summary::before {
    content: "Q. ";
    color: var(--primary-color);
}
.remila-faq .remila-faq-answer { margin-top: 0.75rem; }
"""


def render_faqs(items: list[Faq]) -> str:
    # Answers are usually long, so every item is collapsed behind its question
    cards = [
        '<article class="remila-card">'
        '<details class="remila-faq-item">'
        f"<summary>{escape(faq.question)}</summary>"
        f'<div class="remila-faq-answer">{sanitize_html(faq.answer)}</div>'
        "</details>"
        "</article>"
        for faq in items
    ]
    return f'<div class="remila-list">{"".join(cards)}</div>'
