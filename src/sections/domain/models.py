from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from src.config import SectionsConfig, SectionType


# --- Enums ---
class Collection(str, Enum):
    """The fixed set of remote tables the sections read from."""

    NEWS = "news"
    JUDGES = "judges"
    MAIN_PRIZES = "main_prizes"
    ADDITIONAL_PRIZES = "additional_prizes"
    FAQS = "faqs"
    WORK_EXAMPLES = "work_examples"
    SPONSORS = "sponsors"
    RESOURCES = "resources"
    SITE_SETTINGS = "site_settings"


# --- Entities ---
class _Row(BaseModel):
    model_config = ConfigDict(extra="allow")

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # NULL columns fall back to the field default
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class DisplayItem(_Row):
    """Common shape of every row a section renders."""

    id: str
    display_order: int = 0
    is_published: bool = True

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: Any) -> str:
        return str(value)


class NewsCategory(_Row):
    id: str | None = None
    name: str = ""
    slug: str = ""
    color: str = ""
    is_active: bool = True


class NewsItem(DisplayItem):
    title: str
    content: str = ""
    category: str = ""
    category_id: str | None = None
    link_url: str | None = None
    link_text: str | None = None
    publish_date: str | None = None
    updated_at: str | None = None
    news_category: NewsCategory | None = None


class Sponsor(DisplayItem):
    name: str
    description: str = ""
    award: str = ""
    image: str = ""
    rank: str = ""
    url: str = ""


class ResourceCategory(_Row):
    id: str | None = None
    name: str = ""
    slug: str = ""
    color: str = ""


class Resource(DisplayItem):
    title: str
    description: str = ""
    file_name: str = ""
    file_size: int = 0
    file_url: str = ""
    file_type: str = ""
    download_count: int = 0
    category: ResourceCategory | None = None


class Judge(DisplayItem):
    name: str
    salon: str = ""
    instagram: str = ""
    image: str = ""
    profile: str = ""


class MainPrize(DisplayItem):
    rank: str = ""
    title: str
    amount: str = ""
    description: str = ""
    icon: str = ""
    amount_value: float = 0


class AdditionalPrize(DisplayItem):
    name: str
    description: str = ""
    value: str = ""
    amount: float = 0
    image: str | None = None


class Faq(DisplayItem):
    question: str
    answer: str = ""


class WorkExample(DisplayItem):
    title: str
    description: str = ""
    image: str = ""
    department: str = ""


class SiteSettings(_Row):
    site_slug: str
    site_title: str = ""
    site_description: str = ""
    animation_duration: int | None = None
    maintenance_mode: bool = False


# --- Theme ---
class _CamelModel(BaseModel):
    model_config = ConfigDict(
        extra="allow", alias_generator=to_camel, populate_by_name=True
    )


class ThemeColors(_CamelModel):
    primary: str = "#8b5cf6"
    secondary: str = "#ec4899"
    background: str = "#ffffff"
    text: str = "#1f2937"
    accent: str = "#f1f5f9"


class ThemeTypography(_CamelModel):
    font_family: str = "Noto Sans JP, sans-serif"


class ThemeConfig(_CamelModel):
    colors: ThemeColors = Field(default_factory=ThemeColors)
    typography: ThemeTypography = Field(default_factory=ThemeTypography)


# --- Configuration Objects ---
class SectionOptions(_CamelModel):
    """
    The configuration object a host page hands to a widget.
    Accepts both camelCase keys (embed boundary) and snake_case names.
    """

    site_slug: str = Field(min_length=1)
    api_base_url: str | None = None
    max_items: int | None = Field(
        default=None, ge=1, le=SectionsConfig.MAX_ITEMS_LIMIT
    )
    show_title: bool = True
    enable_animation: bool = True
    theme: dict[str, Any] | None = None
    category_filter: str | None = None
    auto_refresh: bool = False
    refresh_interval: float = Field(
        default=SectionsConfig.DEFAULT_REFRESH_INTERVAL, gt=0
    )
    class_name: str = ""
    # Page that records a resource download before redirecting to the file
    download_route: str | None = None

    @model_validator(mode="before")
    @classmethod
    def _accept_legacy_theme_key(cls, data: Any) -> Any:
        # Older embeds pass the theme as `customTheme`.
        if isinstance(data, dict) and "customTheme" in data and "theme" not in data:
            data = dict(data)
            data["theme"] = data.pop("customTheme")
        return data

    @field_validator("theme", mode="before")
    @classmethod
    def _accept_custom_theme(cls, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump(by_alias=True, exclude_none=True)
        return value


class EmbedConfig(_CamelModel):
    section_type: SectionType
    site_slug: str = Field(min_length=1)
    api_base_url: str | None = None
    theme: dict[str, Any] | None = None
    options: dict[str, Any] | None = None


# --- Result Objects (Data Transfer Objects) ---
T = TypeVar("T")


@dataclass
class FetchResult(Generic[T]):
    """
    Outcome of one remote read. `data` is always a list; a failure is
    signalled only through `error`.
    """

    data: list[T] = field(default_factory=list)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def failure(cls, error: str) -> "FetchResult[T]":
        return cls(data=[], error=error)


@dataclass
class PrizesResult:
    main: list[MainPrize] = field(default_factory=list)
    additional: list[AdditionalPrize] = field(default_factory=list)
    error: str | None = None
