from concurrent.futures import ThreadPoolExecutor
from typing import Any, TypeVar, cast

from postgrest.exceptions import APIError
from pydantic import BaseModel, ValidationError

from src.config import SectionsConfig
from src.sections.domain.models import (
    AdditionalPrize,
    Collection,
    Faq,
    FetchResult,
    Judge,
    MainPrize,
    NewsItem,
    PrizesResult,
    Resource,
    SiteSettings,
    Sponsor,
    WorkExample,
)
from src.sections.domain.ports import ISectionsRepository
from src.shared.telemetry import Telemetry, measure_time
from supabase import Client, create_client

ModelT = TypeVar("ModelT", bound=BaseModel)

NEWS_COLUMNS = """
    id,
    title,
    content,
    category,
    category_id,
    link_url,
    link_text,
    publish_date,
    display_order,
    is_published,
    updated_at,
    news_category:news_categories!category_id(id, name, slug, color, is_active)
"""
RESOURCE_COLUMNS = "*, category:resource_categories(*)"
# An inner join lets the category slug filter drop parent rows
RESOURCE_FILTERED_COLUMNS = "*, category:resource_categories!inner(*)"

DOWNLOADS_TABLE = "resource_downloads"
MISSING_TENANT_ERROR = "site_slug is required"


def describe_error(error: Exception) -> str:
    """Human-readable message for anything the client library raises."""
    if isinstance(error, APIError):
        return error.message or str(error)
    return str(error) or error.__class__.__name__


class SupabaseSectionsRepository(ISectionsRepository):
    def __init__(
        self,
        url: str,
        key: str,
        single_tenant: bool = SectionsConfig.SINGLE_TENANT,
    ) -> None:
        self.telemetry = Telemetry("SupabaseSectionsRepository")
        self.single_tenant = single_tenant
        try:
            self.client: Client = create_client(url, key)
        except Exception as e:
            self.telemetry.log_error("Failed to initialize Supabase client", e)
            raise

    def _scoped(self, query: Any, collection: Collection, site_slug: str) -> Any:
        if collection is Collection.SITE_SETTINGS or not self.single_tenant:
            query = query.eq(SectionsConfig.TENANT_COLUMN, site_slug)
        return query

    @measure_time("sb_fetch")
    def fetch(
        self,
        collection: Collection,
        site_slug: str,
        limit: int | None = None,
        category_filter: str | None = None,
    ) -> FetchResult[dict[str, Any]]:
        """
        select * where <tenant> and is_published order by display_order [limit N]
        """
        if not site_slug:
            return FetchResult.failure(MISSING_TENANT_ERROR)

        try:
            if collection is Collection.NEWS:
                columns = NEWS_COLUMNS
            elif collection is Collection.RESOURCES:
                columns = (
                    RESOURCE_FILTERED_COLUMNS if category_filter else RESOURCE_COLUMNS
                )
            else:
                columns = "*"

            query = self.client.table(collection.value).select(columns)
            query = self._scoped(query, collection, site_slug)
            # site_settings has neither a published flag nor an ordering column
            if collection is not Collection.SITE_SETTINGS:
                query = query.eq("is_published", True).order("display_order", desc=False)

            if collection is Collection.RESOURCES and category_filter:
                query = query.eq("category.slug", category_filter)
            if limit:
                query = query.limit(limit)

            response = query.execute()
            rows = cast(list[dict[str, Any]], response.data or [])
            self.telemetry.log_info(
                "Fetched rows",
                collection=collection.value,
                site_slug=site_slug,
                count=len(rows),
            )
            return FetchResult(data=rows)
        except Exception as e:
            self.telemetry.log_error(
                f"fetch failed for {collection.value}", e, site_slug=site_slug
            )
            return FetchResult.failure(describe_error(e))

    def _fetch_models(
        self,
        model: type[ModelT],
        collection: Collection,
        site_slug: str,
        limit: int | None = None,
        category_filter: str | None = None,
    ) -> FetchResult[ModelT]:
        raw = self.fetch(collection, site_slug, limit, category_filter)
        if raw.error is not None:
            return FetchResult.failure(raw.error)
        try:
            return FetchResult(data=[model.model_validate(row) for row in raw.data])
        except ValidationError as e:
            self.telemetry.log_error(f"Malformed {collection.value} row", e)
            return FetchResult.failure(f"Malformed {collection.value} data")

    def get_news(self, site_slug: str, limit: int | None = None) -> FetchResult[NewsItem]:
        return self._fetch_models(NewsItem, Collection.NEWS, site_slug, limit)

    def get_judges(self, site_slug: str, limit: int | None = None) -> FetchResult[Judge]:
        return self._fetch_models(Judge, Collection.JUDGES, site_slug, limit)

    def get_faqs(self, site_slug: str, limit: int | None = None) -> FetchResult[Faq]:
        return self._fetch_models(Faq, Collection.FAQS, site_slug, limit)

    def get_work_examples(
        self, site_slug: str, limit: int | None = None
    ) -> FetchResult[WorkExample]:
        return self._fetch_models(WorkExample, Collection.WORK_EXAMPLES, site_slug, limit)

    def get_sponsors(self, site_slug: str, limit: int | None = None) -> FetchResult[Sponsor]:
        return self._fetch_models(Sponsor, Collection.SPONSORS, site_slug, limit)

    def get_resources(
        self,
        site_slug: str,
        limit: int | None = None,
        category_filter: str | None = None,
    ) -> FetchResult[Resource]:
        return self._fetch_models(
            Resource, Collection.RESOURCES, site_slug, limit, category_filter
        )

    @measure_time("sb_get_prizes")
    def get_prizes(self, site_slug: str) -> PrizesResult:
        with ThreadPoolExecutor(max_workers=2, thread_name_prefix="prizes") as pool:
            main_future = pool.submit(
                self._fetch_models, MainPrize, Collection.MAIN_PRIZES, site_slug
            )
            additional_future = pool.submit(
                self._fetch_models, AdditionalPrize, Collection.ADDITIONAL_PRIZES, site_slug
            )
            main = main_future.result()
            additional = additional_future.result()

        # Fail closed: a half-loaded prize table is never shown
        for part in (main, additional):
            if part.error is not None:
                return PrizesResult(error=part.error)

        return PrizesResult(main=main.data, additional=additional.data)

    @measure_time("sb_get_site_settings")
    def get_site_settings(self, site_slug: str) -> tuple[SiteSettings | None, str | None]:
        if not site_slug:
            return None, MISSING_TENANT_ERROR
        try:
            response = (
                self.client.table(Collection.SITE_SETTINGS.value)
                .select("*")
                .eq(SectionsConfig.TENANT_COLUMN, site_slug)
                .limit(1)
                .execute()
            )
            rows = cast(list[dict[str, Any]], response.data or [])
            if not rows:
                return None, f"No site settings for '{site_slug}'"
            return SiteSettings.model_validate(rows[0]), None
        except Exception as e:
            self.telemetry.log_error("get_site_settings failed", e, site_slug=site_slug)
            return None, describe_error(e)

    def record_download(
        self, resource_id: str, user_agent: str = "unknown"
    ) -> tuple[bool, str | None]:
        try:
            self.client.table(DOWNLOADS_TABLE).insert(
                {
                    "resource_id": resource_id,
                    "ip_address": "unknown",
                    "user_agent": user_agent,
                }
            ).execute()
            self.telemetry.log_info("Download recorded", resource_id=resource_id)
            return True, None
        except Exception as e:
            self.telemetry.log_error(
                "record_download failed", e, resource_id=resource_id
            )
            return False, describe_error(e)
