import os
from enum import Enum
from typing import Final


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


class SectionType(str, Enum):
    # Enum Member = ("embed key", "Component name", "Label")
    NEWS = ("news", "SharedNewsSection", "News")
    JUDGES = ("judges", "SharedJudgesSection", "Judges")
    PRIZES = ("prizes", "SharedPrizesSection", "Prizes")
    FAQ = ("faq", "SharedFAQSection", "FAQ")
    WORK_EXAMPLES = ("workExamples", "SharedWorkExamplesSection", "Work Examples")
    SPONSORS = ("sponsors", "SharedSponsorCompanies", "Sponsors")
    RESOURCE_DOWNLOAD = (
        "resourceDownload",
        "SharedResourceDownloadSection",
        "Resource Download",
    )

    def __new__(cls, key: str, component: str, label: str) -> "SectionType":
        obj = str.__new__(cls, key)
        obj._value_ = key
        obj.component = component
        obj.label = label
        return obj

    @classmethod
    def get_component_name(cls, key: str) -> str:
        """Returns the framework component for an embed key, or a generic fallback."""
        for section in cls:
            if section.value == key:
                return section.component
        return "SharedSection"

    @classmethod
    def all_keys(cls) -> list[str]:
        return [s.value for s in cls]


class EmbedMode(str, Enum):
    REACT = "react"
    HTML = "html"
    IFRAME = "iframe"
    WORDPRESS = "wordpress"


class SectionsConfig:
    # --- Infrastructure ---
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")

    # Single-tenant deployments share content tables; only site_settings
    # is filtered by the tenant column then.
    SINGLE_TENANT: bool = _env_flag("SECTIONS_SINGLE_TENANT")
    TENANT_COLUMN: Final[str] = "site_slug"

    REALTIME_ENABLED: bool = _env_flag("SECTIONS_REALTIME")

    # --- Distribution ---
    CDN_BASE_URL: str = os.getenv("SECTIONS_CDN_BASE_URL", "https://cdn.remilabhc.com")
    BUNDLE_NAME: Final[str] = "remila-shared-components.js"
    GLOBAL_NAME: Final[str] = "RemilaSections"
    PACKAGE_NAME: Final[str] = "@remila/shared-components"
    SHORTCODE_PREFIX: Final[str] = "remila_"
    COMPONENTS_VERSION: Final[str] = "1.0.0"

    # --- Widget Rules ---
    MAX_ITEMS_LIMIT: Final[int] = 50
    TRUNCATE_AT: Final[int] = 80
    DEFAULT_REFRESH_INTERVAL: Final[float] = 300.0
    FETCH_TIMEOUT_SECONDS: Final[float] = 10.0

    # --- Sections ---
    SECTION_KEYS = SectionType.all_keys()
