from typing import Any

import streamlit as st

from src.config import EmbedMode, SectionsConfig, SectionType
from src.sections.application.embed_generator import EmbedCodeGenerator
from src.sections.domain.theme import DEFAULT_THEME
from src.sections.domain.validation import validate_section_config

MODE_LABELS = {
    EmbedMode.REACT: "React component",
    EmbedMode.HTML: "HTML + JavaScript",
    EmbedMode.IFRAME: "iframe",
    EmbedMode.WORDPRESS: "WordPress shortcode",
}

MODE_LANGUAGES = {
    EmbedMode.REACT: "jsx",
    EmbedMode.HTML: "html",
    EmbedMode.IFRAME: "html",
    EmbedMode.WORDPRESS: "text",
}

MODE_HINTS = {
    EmbedMode.REACT: f"Install `{SectionsConfig.PACKAGE_NAME}` and paste the component into your app.",
    EmbedMode.HTML: "Paste where the section should appear. The script tag loads the bundle once per page.",
    EmbedMode.IFRAME: "Works on any site. The frame height follows its content.",
    EmbedMode.WORDPRESS: "Requires the REMILA sections plugin on the WordPress site.",
}


def _section_settings() -> dict[str, Any]:
    st.subheader("Section")
    section = st.selectbox(
        "Section type",
        list(SectionType),
        format_func=lambda s: s.label,
    )
    site_slug = st.text_input("Site identifier", value="remila-bhc", placeholder="remila-bhc")
    api_base_url = st.text_input("API base URL (optional)", value="")
    max_items = st.number_input(
        "Max items", min_value=1, max_value=SectionsConfig.MAX_ITEMS_LIMIT, value=5, step=1
    )

    col1, col2 = st.columns(2)
    show_title = col1.checkbox("Show title", value=True)
    enable_animation = col2.checkbox("Animation", value=True)

    return {
        "sectionType": section.value,
        "siteSlug": site_slug.strip(),
        "apiBaseUrl": api_base_url.strip() or None,
        "options": {
            "maxItems": int(max_items),
            "showTitle": show_title,
            "enableAnimation": enable_animation,
        },
    }


def _theme_settings() -> dict[str, Any] | None:
    with st.expander("Theme colors"):
        if not st.checkbox("Customize colors", value=False):
            return None
        colors = {}
        defaults = DEFAULT_THEME["colors"]
        cols = st.columns(len(defaults))
        for col, (key, default) in zip(cols, defaults.items()):
            colors[key] = col.color_picker(key.capitalize(), value=default)
        return {"colors": colors}


def render_generator_page(generator: EmbedCodeGenerator | None = None) -> None:
    generator = generator or EmbedCodeGenerator()

    st.title("Embed code generator")
    st.caption("Generate the snippet that puts a REMILA section on another site.")

    settings_col, code_col = st.columns(2)

    with settings_col:
        config = _section_settings()
        config["theme"] = _theme_settings()

        st.subheader("Embed method")
        mode = st.radio(
            "Embed method",
            list(EmbedMode),
            format_func=lambda m: MODE_LABELS[m],
            label_visibility="collapsed",
        )

    with code_col:
        errors = validate_section_config(
            {"siteSlug": config["siteSlug"], "theme": config["theme"], **config["options"]}
        )
        if errors:
            for error in errors:
                st.error(error)
            return

        st.subheader("Generated code")
        st.code(generator.generate(config, mode).strip(), language=MODE_LANGUAGES[mode])
        st.info(MODE_HINTS[mode])
