from typing import Any

from src.components.sections import (
    FAQ_CSS,
    JUDGES_CSS,
    NEWS_CSS,
    PRIZES_CSS,
    RESOURCES_CSS,
    SPONSORS_CSS,
    WORK_EXAMPLES_CSS,
    render_faqs,
    render_judges,
    render_news,
    render_prizes,
    render_resources,
    render_sponsors,
    render_work_examples,
)
from src.config import SectionType
from src.sections.domain.models import (
    AdditionalPrize,
    Collection,
    FetchResult,
    MainPrize,
    SectionOptions,
)
from src.sections.presentation.widget import SectionWidget


class NewsWidget(SectionWidget):
    section_type = SectionType.NEWS
    title = "NEWS"
    subtitle = "Latest updates"
    loading_text = "Loading news…"
    empty_title = "No news yet"
    empty_message = "New announcements will appear here."
    extra_css = NEWS_CSS
    live_table = Collection.NEWS
    refetch_on = ("site_slug", "max_items")

    def load(self, options: SectionOptions) -> FetchResult[Any]:
        return self.repo.get_news(options.site_slug, options.max_items)

    def render_items(self, items: list[Any]) -> str:
        return render_news(items, self.theme)


class SponsorsWidget(SectionWidget):
    section_type = SectionType.SPONSORS
    title = "SPONSORS"
    subtitle = "Supporting companies"
    loading_text = "Loading sponsors…"
    empty_title = "No sponsors yet"
    empty_message = "Sponsoring companies will be announced soon."
    extra_css = SPONSORS_CSS
    live_table = Collection.SPONSORS
    refetch_on = ("site_slug", "max_items")

    def load(self, options: SectionOptions) -> FetchResult[Any]:
        return self.repo.get_sponsors(options.site_slug, options.max_items)

    def render_items(self, items: list[Any]) -> str:
        return render_sponsors(items)


class ResourceDownloadWidget(SectionWidget):
    section_type = SectionType.RESOURCE_DOWNLOAD
    title = "DOWNLOADS"
    subtitle = "Contest materials"
    loading_text = "Loading resources…"
    empty_title = "No resources yet"
    empty_message = "Downloadable materials will be published here."
    extra_css = RESOURCES_CSS
    live_table = Collection.RESOURCES
    refetch_on = ("site_slug", "max_items", "category_filter")

    def load(self, options: SectionOptions) -> FetchResult[Any]:
        return self.repo.get_resources(
            options.site_slug, options.max_items, options.category_filter
        )

    def render_items(self, items: list[Any]) -> str:
        return render_resources(items, self.options.download_route, self.options.site_slug)


class JudgesWidget(SectionWidget):
    section_type = SectionType.JUDGES
    title = "JUDGES"
    subtitle = "Meet the judging panel"
    loading_text = "Loading judges…"
    empty_title = "No judges yet"
    empty_message = "The judging panel will be announced soon."
    extra_css = JUDGES_CSS

    def load(self, options: SectionOptions) -> FetchResult[Any]:
        return self.repo.get_judges(options.site_slug, options.max_items)

    def render_items(self, items: list[Any]) -> str:
        return render_judges(items)


class PrizesWidget(SectionWidget):
    section_type = SectionType.PRIZES
    title = "PRIZES"
    subtitle = "Awards and prizes"
    loading_text = "Loading prizes…"
    empty_title = "No prizes yet"
    empty_message = "Prize details will be announced soon."
    extra_css = PRIZES_CSS

    def load(self, options: SectionOptions) -> FetchResult[Any]:
        result = self.repo.get_prizes(options.site_slug)
        if result.error is not None:
            return FetchResult.failure(result.error)
        return FetchResult(data=[*result.main, *result.additional])

    def visible_items(self) -> list[Any]:
        # Capped per group in render_items
        return sorted(self.items, key=lambda item: item.display_order)

    def render_items(self, items: list[Any]) -> str:
        limit = self.options.max_items
        main = [i for i in items if isinstance(i, MainPrize)][:limit]
        additional = [i for i in items if isinstance(i, AdditionalPrize)][:limit]
        return render_prizes(main, additional)


class FaqWidget(SectionWidget):
    section_type = SectionType.FAQ
    title = "FAQ"
    subtitle = "Frequently asked questions"
    loading_text = "Loading questions…"
    empty_title = "No questions yet"
    empty_message = "Answers to common questions will appear here."
    extra_css = FAQ_CSS

    def load(self, options: SectionOptions) -> FetchResult[Any]:
        return self.repo.get_faqs(options.site_slug, options.max_items)

    def render_items(self, items: list[Any]) -> str:
        return render_faqs(items)


class WorkExamplesWidget(SectionWidget):
    section_type = SectionType.WORK_EXAMPLES
    title = "WORKS"
    subtitle = "Example entries"
    loading_text = "Loading work examples…"
    empty_title = "No work examples yet"
    empty_message = "Example entries will be shown here."
    extra_css = WORK_EXAMPLES_CSS

    def load(self, options: SectionOptions) -> FetchResult[Any]:
        return self.repo.get_work_examples(options.site_slug, options.max_items)

    def render_items(self, items: list[Any]) -> str:
        return render_work_examples(items)


WIDGET_TYPES: dict[str, type[SectionWidget]] = {
    widget.section_type.value: widget
    for widget in (
        NewsWidget,
        SponsorsWidget,
        ResourceDownloadWidget,
        JudgesWidget,
        PrizesWidget,
        FaqWidget,
        WorkExamplesWidget,
    )
}
