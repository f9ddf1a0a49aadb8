import os
import logging
import streamlit as st

# --- OTel & Observability Imports ---
from opentelemetry import trace
from opentelemetry._logs import set_logger_provider
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor
from opentelemetry.exporter.otlp.proto.grpc.trace_exporter import OTLPSpanExporter
from opentelemetry.sdk.resources import Resource

# --- OTel Logging Imports ---
from opentelemetry.sdk._logs import LoggerProvider, LoggingHandler
from opentelemetry.sdk._logs.export import BatchLogRecordProcessor
from opentelemetry.exporter.otlp.proto.grpc._log_exporter import OTLPLogExporter

# --- Prometheus Import ---
from prometheus_client import start_http_server

# --- Application Imports ---
from src.config import SectionsConfig
from src.sections.application.embed_generator import EmbedCodeGenerator
from src.sections.application.registry import SectionRegistry, build_registry
from src.sections.presentation.views.embed_view import render_embed_page
from src.sections.presentation.views.generator_view import render_generator_page

METRICS_PORT = int(os.getenv("SECTIONS_METRICS_PORT", "8000"))


# --- 1. Configure Observability ---
def configure_observability():
    """
    Sends traces and logs over OTLP when an endpoint is configured,
    and exposes Prometheus metrics from a background server.
    """
    endpoint = os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT")
    headers = os.getenv("OTEL_EXPORTER_OTLP_HEADERS")

    if endpoint and headers:
        resource = Resource.create({"service.name": "remila-sections"})

        # --- A. TRACING SETUP ---
        trace_provider = TracerProvider(resource=resource)
        otlp_trace_exporter = OTLPSpanExporter(endpoint=endpoint, headers=headers)
        trace_provider.add_span_processor(BatchSpanProcessor(otlp_trace_exporter))
        trace.set_tracer_provider(trace_provider)

        # --- B. LOGGING SETUP ---
        logger_provider = LoggerProvider(resource=resource)
        otlp_log_exporter = OTLPLogExporter(endpoint=endpoint, headers=headers)
        logger_provider.add_log_record_processor(BatchLogRecordProcessor(otlp_log_exporter))
        set_logger_provider(logger_provider)

        handler = LoggingHandler(level=logging.INFO, logger_provider=logger_provider)
        logging.getLogger().addHandler(handler)
    else:
        logging.getLogger(__name__).warning(
            "OTEL env vars not set. Traces and logs stay local."
        )

    # --- C. METRICS SETUP (Prometheus) ---
    try:
        start_http_server(METRICS_PORT)
        logging.getLogger(__name__).info("Prometheus metrics on port %s", METRICS_PORT)
    except OSError:
        # Streamlit reloads re-run this module
        logging.getLogger(__name__).warning(
            "Prometheus port %s already in use. Skipping.", METRICS_PORT
        )


# --- 2. Bootstrap Application ---
if "observability_configured" not in st.session_state:
    logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(levelname)s] %(message)s")
    configure_observability()
    st.session_state.observability_configured = True


# --- 3. Dependency Injection (Composition Root) ---
@st.cache_resource
def get_registry() -> SectionRegistry:
    # Widgets here repaint only inside script runs, so no background change feed.
    return build_registry(realtime=False)


@st.cache_resource
def get_generator() -> EmbedCodeGenerator:
    return EmbedCodeGenerator(SectionsConfig.CDN_BASE_URL)


def embed_page():
    render_embed_page(get_registry())


def generator_page():
    render_generator_page(get_generator())


def main():
    st.set_page_config(page_title="REMILA Sections", layout="wide")

    embedded = "section" in st.query_params or "download" in st.query_params
    page = st.navigation(
        [
            st.Page(generator_page, title="Embed code", url_path="generator", default=True),
            st.Page(embed_page, title="Embed", url_path="embed"),
        ],
        position="hidden" if embedded else "sidebar",
    )
    page.run()


if __name__ == "__main__":
    main()
