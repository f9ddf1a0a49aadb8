import json
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

import streamlit as st
import streamlit.components.v1 as st_components

from src.config import SectionType
from src.sections.application.registry import MountHandle, SectionRegistry
from src.sections.domain.sanitizer import is_safe_href
from src.sections.domain.theme import theme_from_site_settings
from src.sections.presentation.containers import StreamlitContainer

HANDLE_KEY = "embed_mount_handle"
# The registry holds containers weakly; the page keeps its own alive
CONTAINER_KEY = "embed_container"
# Relative to the embed page, so it resolves on whatever host serves it
DOWNLOAD_ROUTE = "embed"

# Reports the rendered height to the page that hosts the embed iframe.
# The component frame sits inside the app frame, hence parent.parent.
RESIZE_SCRIPT = """
<script>
  (function() {
    function report() {
      var doc = window.parent.document;
      var height = doc.body.scrollHeight;
      window.parent.parent.postMessage({type: 'resize', height: height}, '*');
    }
    report();
    new ResizeObserver(report).observe(window.parent.document.body);
  })();
</script>
"""

HIDE_CHROME_CSS = """
<style>
    header[data-testid="stHeader"], footer, [data-testid="stSidebar"] { display: none !important; }
    .block-container { padding: 0 !important; max-width: 100% !important; }
</style>
"""


@dataclass
class EmbedRequest:
    section: str | None = None
    config: dict[str, Any] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


def parse_embed_query(params: Mapping[str, str]) -> EmbedRequest:
    """Turns the iframe query string back into a section key and its config."""
    request = EmbedRequest(section=params.get("section"))

    if request.section not in SectionType.all_keys():
        request.errors.append(f'Unknown section "{request.section}"')

    config: dict[str, Any] = {"siteSlug": params.get("siteSlug", "")}
    if params.get("apiBaseUrl"):
        config["apiBaseUrl"] = params["apiBaseUrl"]

    for name in ("theme", "options"):
        raw = params.get(name)
        if not raw:
            continue
        try:
            value = json.loads(raw)
        except json.JSONDecodeError:
            request.errors.append(f"{name} is not valid JSON")
            continue
        if not isinstance(value, dict):
            request.errors.append(f"{name} must be an object")
            continue
        if name == "theme":
            config["theme"] = value
        else:
            config.update(value)

    request.config = config
    return request


def _release_previous() -> None:
    previous: MountHandle | None = st.session_state.get(HANDLE_KEY)
    if previous is not None:
        previous.unmount()
        st.session_state[HANDLE_KEY] = None
    st.session_state[CONTAINER_KEY] = None


def _with_site_theme(registry: SectionRegistry, config: dict[str, Any]) -> dict[str, Any] | None:
    """Applies the tenant's settings row. Returns None while the site is in maintenance."""
    settings, _error = registry.repo.get_site_settings(config["siteSlug"])
    if settings is None:
        return config
    if settings.maintenance_mode:
        return None
    theme = theme_from_site_settings(settings, config.get("theme"))
    return {**config, "theme": theme.model_dump(by_alias=True)}


def _mount(registry: SectionRegistry, request: EmbedRequest) -> None:
    _release_previous()
    config = _with_site_theme(registry, request.config)
    if config is None:
        st.info("This section is temporarily unavailable.")
        return
    # Reruns drive refreshes here; widget timers cannot paint outside a script run.
    config = {**config, "autoRefresh": False, "downloadRoute": DOWNLOAD_ROUTE}
    container = StreamlitContainer(st.empty())
    handle = registry.mount(request.section, container, config)
    if handle is None:
        st.error("This section could not be displayed.")
        return
    st.session_state[HANDLE_KEY] = handle
    st.session_state[CONTAINER_KEY] = container
    st_components.html(RESIZE_SCRIPT, height=0)


def _redirect_script(url: str) -> str:
    target = json.dumps(url).replace("</", "<\\/")
    return f"<script>window.parent.location.replace({target});</script>"


def serve_download(registry: SectionRegistry, params: Mapping[str, str]) -> None:
    """Records a resource download, then sends the browser on to the file."""
    resource_id = params.get("download", "")
    result = registry.repo.get_resources(params.get("siteSlug", ""))
    resource = next((item for item in result.data if item.id == resource_id), None)
    if resource is None or not resource.file_url or not is_safe_href(resource.file_url):
        st.error("This download is not available.")
        return

    user_agent = st.context.headers.get("User-Agent") or "unknown"
    # A failed insert is logged by the repository and never blocks the file
    registry.repo.record_download(resource.id, user_agent)

    st_components.html(_redirect_script(resource.file_url), height=0)
    st.link_button(f"Download {resource.title}", resource.file_url)


def render_embed_page(registry: SectionRegistry) -> None:
    st.markdown(HIDE_CHROME_CSS, unsafe_allow_html=True)

    if st.query_params.get("download"):
        serve_download(registry, st.query_params)
        return

    request = parse_embed_query(st.query_params)
    if request.errors:
        for error in request.errors:
            st.error(error)
        return

    if request.config.get("autoRefresh"):
        interval = float(request.config.get("refreshInterval") or 300)

        @st.fragment(run_every=interval)
        def _live_section() -> None:
            _mount(registry, request)

        _live_section()
    else:
        _mount(registry, request)
