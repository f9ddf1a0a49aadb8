# --- Component Facade ---
# Section renderers are exposed here so widgets import from
# `src.components.sections` without knowing the file layout.
# ---------------------------------

from .faq import FAQ_CSS, render_faqs
from .judges import JUDGES_CSS, render_judges
from .news import NEWS_CSS, render_news
from .prizes import PRIZES_CSS, render_prizes
from .resources import RESOURCES_CSS, render_resources
from .shared import empty_panel, error_panel, loading_panel, section_shell
from .sponsors import SPONSORS_CSS, render_sponsors
from .work_examples import WORK_EXAMPLES_CSS, render_work_examples

__all__ = [
    "FAQ_CSS",
    "JUDGES_CSS",
    "NEWS_CSS",
    "PRIZES_CSS",
    "RESOURCES_CSS",
    "SPONSORS_CSS",
    "WORK_EXAMPLES_CSS",
    "empty_panel",
    "error_panel",
    "loading_panel",
    "render_faqs",
    "render_judges",
    "render_news",
    "render_prizes",
    "render_resources",
    "render_sponsors",
    "render_work_examples",
    "section_shell",
]
