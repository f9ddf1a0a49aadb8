# --- Inline CSS/HTML in Python Components ---
# Each section is a self-contained HTML fragment: markup, a scoped <style>
# block and theme CSS variables travel together, so the fragment can be
# dropped into any host element (iframe body, st.html, foreign <div>).
# ---------------------------------------------------

from html import escape

from src.config import SectionsConfig
from src.sections.domain.models import SectionOptions, ThemeConfig
from src.sections.domain.sanitizer import is_safe_href, sanitize_html, strip_tags
from src.sections.domain.theme import theme_css_variables

SHARED_CSS = """
.remila-section {
    display: block;
    width: 100%;
    box-sizing: border-box;
    padding: 3rem 1rem;
    background: var(--background-color);
    color: var(--text-color);
    font-size: 16px;
    line-height: 1.6;
    -webkit-font-smoothing: antialiased;
}
.remila-section * { box-sizing: border-box; }
.remila-section .remila-inner { max-width: 64rem; margin: 0 auto; }

.remila-section .remila-heading { text-align: center; margin-bottom: 3rem; }
.remila-section .remila-heading h2 {
    font-size: 2.25rem;
    font-weight: 700;
    margin: 0 0 0.5rem;
    color: var(--text-color);
}
.remila-section .remila-heading p { margin: 0; opacity: 0.7; }

.remila-section .remila-list { display: flex; flex-direction: column; gap: 1.5rem; }
.remila-section .remila-grid {
    display: grid;
    gap: 1.5rem;
    grid-template-columns: repeat(auto-fill, minmax(16rem, 1fr));
}
.remila-section .remila-card {
    background: #ffffff;
    border: 1px solid #e5e7eb;
    box-shadow: 0 4px 6px rgba(0, 0, 0, 0.08);
    padding: 1.25rem;
    overflow: hidden;
}
.remila-section .remila-card h3 { margin: 0 0 0.5rem; font-size: 1.125rem; }
.remila-section .remila-card img { max-width: 100%; display: block; }

.remila-section .remila-badge {
    display: inline-block;
    padding: 2px 8px;
    font-size: 12px;
    font-weight: 600;
    color: #ffffff;
    border-radius: 4px;
    background: var(--primary-color);
}
.remila-section a { color: var(--primary-color); }

/* --- STATES --- */
.remila-section .remila-loading { text-align: center; padding: 2rem 0; }
.remila-section .remila-spinner {
    width: 2rem;
    height: 2rem;
    margin: 0 auto 1rem;
    border-radius: 50%;
    border: 2px solid transparent;
    border-bottom-color: var(--primary-color);
    animation: remila-spin 1s linear infinite;
}
@keyframes remila-spin { to { transform: rotate(360deg); } }

.remila-section .remila-error {
    background: #fef2f2;
    border: 1px solid #fecaca;
    color: #991b1b;
    border-radius: 8px;
    padding: 1rem;
    margin-bottom: 1.5rem;
}
.remila-section .remila-empty { text-align: center; padding: 3rem 0; }
.remila-section .remila-empty h3 { margin: 0 0 0.5rem; }

/* --- EXPAND / COLLAPSE --- */
.remila-section details.remila-more summary { cursor: pointer; list-style: none; }
.remila-section details.remila-more summary::after {
    content: " ▾";
    color: var(--primary-color);
}
.remila-section details.remila-more[open] summary { display: none; }

/* --- ANIMATION --- */
.remila-section.remila-animated .remila-card {
    animation: remila-slide-up var(--animation-duration) var(--animation-easing) both;
}
@keyframes remila-slide-up {
    from { opacity: 0; transform: translateY(12px); }
    to { opacity: 1; transform: none; }
}
"""


def section_shell(
    section_key: str,
    body: str,
    options: SectionOptions,
    theme: ThemeConfig,
    title: str,
    subtitle: str = "",
    extra_css: str = "",
    busy: bool = False,
) -> str:
    """Wraps a section body with the themed root element and header."""
    classes = ["remila-section", f"remila-{section_key}"]
    if options.enable_animation:
        classes.append("remila-animated")
    if options.class_name:
        classes.append(options.class_name)

    heading = ""
    if options.show_title:
        sub = f"<p>{escape(subtitle)}</p>" if subtitle else ""
        heading = f'<div class="remila-heading"><h2>{escape(title)}</h2>{sub}</div>'

    busy_attr = ' aria-busy="true"' if busy else ""

    return (
        f'<section class="{escape(" ".join(classes))}" '
        f'style="{escape(theme_css_variables(theme))}"{busy_attr}>'
        f"<style>{SHARED_CSS}{extra_css}</style>"
        f'<div class="remila-inner">{heading}{body}</div>'
        "</section>"
    )


def loading_panel(status_text: str) -> str:
    return (
        '<div class="remila-loading" role="status">'
        '<div class="remila-spinner"></div>'
        f"<p>{escape(status_text)}</p>"
        "</div>"
    )


def error_panel(message: str) -> str:
    return f'<div class="remila-error" role="alert"><p>{escape(message)}</p></div>'


def empty_panel(title: str, message: str) -> str:
    return (
        '<div class="remila-empty">'
        f"<h3>{escape(title)}</h3>"
        f"<p>{escape(message)}</p>"
        "</div>"
    )


def expandable_text(
    text: str | None, limit: int = SectionsConfig.TRUNCATE_AT, rich: bool = False
) -> str:
    """
    Shows `text` in full when it fits the budget, otherwise a truncated
    preview with a toggle revealing the rest. Rich text is sanitized.
    """
    plain = strip_tags(text) if rich else (text or "")
    full = sanitize_html(text) if rich else escape(plain)

    if len(plain) <= limit:
        return f'<div class="remila-text">{full}</div>'

    preview = escape(plain[:limit].rstrip())
    return (
        '<details class="remila-more">'
        f"<summary>{preview}…</summary>"
        f'<div class="remila-text">{full}</div>'
        "</details>"
    )


def external_link(url: str | None, label: str) -> str:
    if not url or not is_safe_href(url):
        return escape(label)
    attrs = ""
    if url.startswith(("http://", "https://")):
        attrs = ' target="_blank" rel="noopener noreferrer"'
    return f'<a href="{escape(url, quote=True)}"{attrs}>{escape(label)}</a>'


def image_tag(src: str | None, alt: str) -> str:
    if not src or not is_safe_href(src):
        return ""
    return f'<img src="{escape(src, quote=True)}" alt="{escape(alt, quote=True)}" loading="lazy" />'
