from html import escape

from src.components.sections.shared import expandable_text, image_tag
from src.sections.domain.models import WorkExample

WORK_EXAMPLES_CSS = """
.remila-workExamples .remila-work-image img {
    width: 100%;
    aspect-ratio: 4 / 3;
    object-fit: cover;
    margin-bottom: 1rem;
}
"""

DEPARTMENT_LABELS = {"creative": "Creative", "reality": "Reality"}


def render_work_examples(items: list[WorkExample]) -> str:
    cards = []
    for example in items:
        department = ""
        if example.department:
            label = DEPARTMENT_LABELS.get(example.department, example.department)
            department = f'<span class="remila-badge">{escape(label)}</span>'
        cards.append(
            '<article class="remila-card">'
            f'<div class="remila-work-image">{image_tag(example.image, example.title)}</div>'
            f"{department}"
            f"<h3>{escape(example.title)}</h3>"
            f"{expandable_text(example.description)}"
            "</article>"
        )
    return f'<div class="remila-grid">{"".join(cards)}</div>'
