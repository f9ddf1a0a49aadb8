import json
from html import escape
from typing import Any
from urllib.parse import urlencode, urlsplit

from pydantic.alias_generators import to_camel

from src.config import EmbedMode, SectionsConfig, SectionType
from src.sections.domain.models import EmbedConfig


def _to_json(value: Any, indent: int | None = None) -> str:
    # "</" would close the surrounding <script> tag early
    return json.dumps(value, indent=indent, ensure_ascii=False).replace("</", "<\\/")


def _js_string(value: str) -> str:
    return "'" + value.replace("\\", "\\\\").replace("'", "\\'") + "'"


def _camel_options(options: dict[str, Any] | None) -> dict[str, Any]:
    return {to_camel(key): value for key, value in (options or {}).items()}


def _shortcode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value).replace('"', "&quot;")


class EmbedCodeGenerator:
    """
    Produces copy-paste integration snippets for a section.
    Pure string templating: no network, no filesystem.
    """

    def __init__(self, base_url: str = SectionsConfig.CDN_BASE_URL) -> None:
        self.base_url = base_url.rstrip("/")

    @property
    def origin(self) -> str:
        parts = urlsplit(self.base_url)
        if parts.scheme and parts.netloc:
            return f"{parts.scheme}://{parts.netloc}"
        return self.base_url

    def generate(self, config: EmbedConfig | dict[str, Any], mode: EmbedMode | str) -> str:
        config = self._coerce(config)
        match EmbedMode(mode):
            case EmbedMode.REACT:
                return self.generate_react_embed(config)
            case EmbedMode.HTML:
                return self.generate_html_embed(config)
            case EmbedMode.IFRAME:
                return self.generate_iframe_embed(config)
            case EmbedMode.WORDPRESS:
                return self.generate_wordpress_shortcode(config)

    # --- Framework import ---
    def generate_react_embed(self, config: EmbedConfig | dict[str, Any]) -> str:
        config = self._coerce(config)
        component = SectionType.get_component_name(config.section_type.value)
        props = self._props_string(
            {
                "siteSlug": config.site_slug,
                "apiBaseUrl": config.api_base_url,
                **_camel_options(config.options),
            }
        )
        theme = _to_json(config.theme, indent=2) if config.theme else "undefined"

        return f"""
import React from 'react';
import {{ {component}, SharedThemeProvider }} from '{SectionsConfig.PACKAGE_NAME}';

const MyComponent = () => {{
  const customTheme = {theme};

  return (
    <SharedThemeProvider initialTheme={{customTheme}}>
      <{component} {props} />
    </SharedThemeProvider>
  );
}};

export default MyComponent;
"""

    # --- Script tag + global registry ---
    def generate_html_embed(self, config: EmbedConfig | dict[str, Any]) -> str:
        config = self._coerce(config)
        section = config.section_type.value
        container_id = self.container_id(config)
        payload = {
            key: value
            for key, value in {
                "siteSlug": config.site_slug,
                "apiBaseUrl": config.api_base_url,
                "theme": config.theme,
                **_camel_options(config.options),
            }.items()
            if value is not None
        }

        return f"""
<!-- REMILA shared section: {escape(section)} -->
<div id="{escape(container_id)}"></div>

<script src="{escape(self.base_url)}/{SectionsConfig.BUNDLE_NAME}"></script>
<script>
  window.{SectionsConfig.GLOBAL_NAME}.render({_js_string(section)}, {_js_string(container_id)}, {_to_json(payload, indent=2)});
</script>
"""

    # --- Iframe ---
    def generate_iframe_embed(self, config: EmbedConfig | dict[str, Any]) -> str:
        config = self._coerce(config)
        section = config.section_type.value
        params: dict[str, str] = {"section": section, "siteSlug": config.site_slug}
        if config.api_base_url:
            params["apiBaseUrl"] = config.api_base_url
        if config.theme:
            params["theme"] = json.dumps(config.theme, ensure_ascii=False)
        if config.options:
            params["options"] = json.dumps(_camel_options(config.options), ensure_ascii=False)

        frame_id = f"{self.container_id(config)}-frame"
        src = f"{self.base_url}/embed?{urlencode(params)}"

        return f"""
<!-- REMILA shared section: {escape(section)} -->
<iframe
  id="{escape(frame_id)}"
  src="{escape(src)}"
  width="100%"
  height="600"
  frameborder="0"
  scrolling="auto"
  style="border: none; border-radius: 8px; box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);"
  title="REMILA {escape(section)} Section"
></iframe>

<script>
  // Resize the frame to the height its content reports
  window.addEventListener('message', function(event) {{
    if (event.origin !== {_js_string(self.origin)}) return;
    if (!event.data || event.data.type !== 'resize') return;
    var iframe = document.getElementById({_js_string(frame_id)});
    if (iframe) {{
      iframe.style.height = event.data.height + 'px';
    }}
  }});
</script>
"""

    # --- WordPress ---
    def generate_wordpress_shortcode(self, config: EmbedConfig | dict[str, Any]) -> str:
        config = self._coerce(config)
        options = _camel_options(config.options)

        attributes = [f'site_slug="{_shortcode_value(config.site_slug)}"']
        if config.api_base_url:
            attributes.append(f'api_base_url="{_shortcode_value(config.api_base_url)}"')
        if options.get("maxItems"):
            attributes.append(f'max_items="{_shortcode_value(options["maxItems"])}"')
        if options.get("showTitle") is not None:
            attributes.append(f'show_title="{_shortcode_value(options["showTitle"])}"')
        if options.get("enableAnimation") is not None:
            attributes.append(
                f'enable_animation="{_shortcode_value(options["enableAnimation"])}"'
            )

        return f"[{SectionsConfig.SHORTCODE_PREFIX}{config.section_type.value} {' '.join(attributes)}]"

    # --- Helpers ---
    @staticmethod
    def container_id(config: EmbedConfig) -> str:
        return f"remila-{config.section_type.value}-{config.site_slug}"

    @staticmethod
    def _coerce(config: EmbedConfig | dict[str, Any]) -> EmbedConfig:
        if isinstance(config, EmbedConfig):
            return config
        return EmbedConfig.model_validate(config)

    @staticmethod
    def _props_string(props: dict[str, Any]) -> str:
        rendered = []
        for key, value in props.items():
            if value is None:
                continue
            if isinstance(value, str):
                if '"' in value:
                    rendered.append(f"{key}={{{json.dumps(value, ensure_ascii=False)}}}")
                else:
                    rendered.append(f'{key}="{value}"')
            elif isinstance(value, bool):
                rendered.append(key if value else f"{key}={{false}}")
            elif isinstance(value, int | float):
                rendered.append(f"{key}={{{value}}}")
            else:
                rendered.append(f"{key}={{{json.dumps(value, ensure_ascii=False)}}}")
        return " ".join(rendered)
