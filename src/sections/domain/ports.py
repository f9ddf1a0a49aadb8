import threading
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from src.sections.domain.models import (
    Collection,
    Faq,
    FetchResult,
    Judge,
    NewsItem,
    PrizesResult,
    Resource,
    SiteSettings,
    Sponsor,
    WorkExample,
)


class ISectionsRepository(ABC):
    """
    Read side of the hosted tables. Implementations never raise:
    failures come back through `FetchResult.error`.
    """

    @abstractmethod
    def fetch(
        self,
        collection: Collection,
        site_slug: str,
        limit: int | None = None,
        category_filter: str | None = None,
    ) -> FetchResult[dict[str, Any]]:
        pass

    @abstractmethod
    def get_news(self, site_slug: str, limit: int | None = None) -> FetchResult[NewsItem]:
        pass

    @abstractmethod
    def get_judges(self, site_slug: str, limit: int | None = None) -> FetchResult[Judge]:
        pass

    @abstractmethod
    def get_prizes(self, site_slug: str) -> PrizesResult:
        """Main and additional prizes, failing closed as a unit."""
        pass

    @abstractmethod
    def get_faqs(self, site_slug: str, limit: int | None = None) -> FetchResult[Faq]:
        pass

    @abstractmethod
    def get_work_examples(
        self, site_slug: str, limit: int | None = None
    ) -> FetchResult[WorkExample]:
        pass

    @abstractmethod
    def get_sponsors(self, site_slug: str, limit: int | None = None) -> FetchResult[Sponsor]:
        pass

    @abstractmethod
    def get_resources(
        self,
        site_slug: str,
        limit: int | None = None,
        category_filter: str | None = None,
    ) -> FetchResult[Resource]:
        pass

    @abstractmethod
    def get_site_settings(self, site_slug: str) -> tuple[SiteSettings | None, str | None]:
        pass

    @abstractmethod
    def record_download(
        self, resource_id: str, user_agent: str = "unknown"
    ) -> tuple[bool, str | None]:
        pass


class Subscription:
    """
    Handle for one change-feed registration. `close()` is idempotent.
    """

    def __init__(self, release: Callable[[], None] | None = None) -> None:
        self._release = release
        self._lock = threading.Lock()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
            release, self._release = self._release, None
        if release:
            release()


class IChangeFeed(ABC):
    """Push notifications for inserts, updates and deletes on a table."""

    @abstractmethod
    def subscribe(self, table: str, on_change: Callable[[], None]) -> Subscription:
        pass
