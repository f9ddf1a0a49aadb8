import threading
from unittest.mock import MagicMock, patch

import pytest

from src.fsm import WidgetState
from src.sections.domain.models import Collection, SectionOptions
from src.sections.presentation.widgets import (
    WIDGET_TYPES,
    NewsWidget,
    PrizesWidget,
    ResourceDownloadWidget,
)
from tests.drivers.fake_sections import news_rows


@pytest.fixture
def news_widget(news_repo, container):
    def _build(**config):
        options = SectionOptions.model_validate({"siteSlug": "acme", **config})
        return NewsWidget(news_repo, options, container)

    return _build


class TestLifecycle:
    def test_mount_loads_and_paints(self, news_widget, container):
        widget = news_widget()

        widget.mount()

        assert widget.state == WidgetState.LOADED
        assert widget.is_mounted
        assert "News 0" in container.inner_html
        assert "News 9" in container.inner_html

    def test_max_items_caps_rendered_list(self, news_widget, container):
        widget = news_widget(maxItems=3)

        widget.mount()

        assert container.inner_html.count('<article class="remila-card">') == 3
        assert "News 3" not in container.inner_html

    def test_items_are_ordered_by_display_order(self, fake_repo, container):
        fake_repo.seed(
            Collection.NEWS,
            [
                {"id": "b", "title": "Second", "display_order": 2},
                {"id": "a", "title": "First", "display_order": 1},
            ],
        )
        widget = NewsWidget(fake_repo, SectionOptions(siteSlug="acme"), container)

        widget.mount()

        html = container.inner_html
        assert html.index("First") < html.index("Second")

    def test_loading_panel_is_painted_while_fetching(self, news_repo, news_widget, container):
        seen = []
        news_repo.before_fetch = lambda *_: seen.append(container.inner_html)

        news_widget().mount()

        assert "remila-loading" in seen[0]

    def test_refetch_keeps_previous_items_visible(self, news_repo, news_widget, container):
        widget = news_widget()
        widget.mount()
        seen = []
        news_repo.before_fetch = lambda *_: seen.append((widget.state, container.inner_html))

        widget.refresh()

        state, html = seen[0]
        assert state == WidgetState.REFETCHING
        assert "News 0" in html
        assert widget.state == WidgetState.LOADED

    def test_empty_result_shows_empty_panel(self, fake_repo, container):
        widget = NewsWidget(fake_repo, SectionOptions(siteSlug="acme"), container)

        widget.mount()

        assert widget.state == WidgetState.LOADED
        assert "remila-empty" in container.inner_html

    def test_fetch_error_shows_error_panel(self, fake_repo, container):
        fake_repo.fail(Collection.NEWS, "relation does not exist")
        widget = NewsWidget(fake_repo, SectionOptions(siteSlug="acme"), container)

        widget.mount()

        assert widget.state == WidgetState.ERRORED
        assert widget.error == "relation does not exist"
        assert 'role="alert"' in container.inner_html
        assert "relation does not exist" in container.inner_html

    def test_load_exception_becomes_error_state(self, fake_repo, container):
        fake_repo.get_news = MagicMock(side_effect=RuntimeError("network down"))
        widget = NewsWidget(fake_repo, SectionOptions(siteSlug="acme"), container)

        widget.mount()

        assert widget.state == WidgetState.ERRORED
        assert widget.error == "network down"

    def test_retry_after_error(self, fake_repo, container):
        fake_repo.fail(Collection.NEWS, "boom")
        widget = NewsWidget(fake_repo, SectionOptions(siteSlug="acme"), container)
        widget.mount()

        fake_repo.errors.clear()
        fake_repo.seed(Collection.NEWS, news_rows(1))
        widget.refresh()

        assert widget.state == WidgetState.LOADED
        assert widget.error is None

    def test_unmount_clears_container(self, news_widget, container):
        widget = news_widget()
        widget.mount()

        widget.unmount()

        assert widget.state == WidgetState.UNMOUNTED
        assert container.inner_html == ""

    def test_unmount_twice_is_harmless(self, news_widget):
        widget = news_widget()
        widget.mount()

        widget.unmount()
        widget.unmount()

        assert widget.state == WidgetState.UNMOUNTED

    def test_refresh_after_unmount_does_nothing(self, news_repo, news_widget, container):
        widget = news_widget()
        widget.mount()
        widget.unmount()
        calls = len(news_repo.calls)

        widget.refresh()

        assert len(news_repo.calls) == calls
        assert container.inner_html == ""


class TestInFlightResponses:
    def test_stale_response_is_dropped(self, news_repo, container):
        news_repo.seed(Collection.NEWS, news_rows(2, site_slug="old") + news_rows(3))
        entered, release = threading.Event(), threading.Event()

        def block_old_tenant(collection, site_slug):
            if site_slug == "old":
                entered.set()
                release.wait(timeout=5)

        news_repo.before_fetch = block_old_tenant
        widget = NewsWidget(news_repo, SectionOptions(siteSlug="old"), container)

        slow = threading.Thread(target=widget.mount)
        slow.start()
        assert entered.wait(timeout=5)

        # A newer request completes first
        widget.update_options(SectionOptions(siteSlug="acme"))
        release.set()
        slow.join(timeout=5)

        assert widget.state == WidgetState.LOADED
        assert len(widget.items) == 3
        assert all(item.model_extra["site_slug"] == "acme" for item in widget.items)

    def test_response_after_unmount_is_not_painted(self, news_repo, container):
        entered, release = threading.Event(), threading.Event()

        def block(collection, site_slug):
            entered.set()
            release.wait(timeout=5)

        news_repo.before_fetch = block
        widget = NewsWidget(news_repo, SectionOptions(siteSlug="acme"), container)

        slow = threading.Thread(target=widget.mount)
        slow.start()
        assert entered.wait(timeout=5)

        widget.unmount()
        release.set()
        slow.join(timeout=5)

        assert widget.state == WidgetState.UNMOUNTED
        assert container.inner_html == ""
        assert widget.items == []


class TestOptionUpdates:
    def test_display_only_change_does_not_refetch(self, news_repo, news_widget, container):
        widget = news_widget()
        widget.mount()
        calls = len(news_repo.calls)

        widget.update_options(SectionOptions(siteSlug="acme", showTitle=False))

        assert len(news_repo.calls) == calls
        assert "<h2>" not in container.inner_html

    def test_tenant_change_refetches(self, news_repo, news_widget):
        widget = news_widget()
        widget.mount()

        widget.update_options(SectionOptions(siteSlug="other"))

        assert news_repo.calls[-1][1] == "other"

    def test_theme_change_repaints(self, news_widget, container):
        widget = news_widget()
        widget.mount()

        widget.update_options(
            SectionOptions(siteSlug="acme", theme={"colors": {"primary": "#000000"}})
        )

        assert "--primary-color: #000000" in container.inner_html

    def test_resource_category_filter_refetches(self, fake_repo, container):
        fake_repo.seed(
            Collection.RESOURCES,
            [
                {"id": "r1", "title": "Rules", "category": {"name": "Rules", "slug": "rules"}},
                {"id": "r2", "title": "Logo", "category": {"name": "Assets", "slug": "assets"}},
            ],
        )
        widget = ResourceDownloadWidget(fake_repo, SectionOptions(siteSlug="acme"), container)
        widget.mount()
        assert len(widget.items) == 2

        widget.update_options(SectionOptions(siteSlug="acme", categoryFilter="rules"))

        assert [item.id for item in widget.items] == ["r1"]


class TestLiveUpdates:
    def test_remote_change_triggers_refetch(self, news_repo, change_feed, container):
        widget = NewsWidget(news_repo, SectionOptions(siteSlug="acme"), container, change_feed)
        widget.mount()
        assert change_feed.active("news") == 1

        news_repo.seed(Collection.NEWS, news_rows(1))
        change_feed.emit("news")

        assert len(widget.items) == 1

    def test_unmount_releases_subscription(self, news_repo, change_feed, container):
        widget = NewsWidget(news_repo, SectionOptions(siteSlug="acme"), container, change_feed)
        widget.mount()

        widget.unmount()

        assert change_feed.active("news") == 0

    def test_sections_without_live_table_do_not_subscribe(self, fake_repo, change_feed, container):
        widget = PrizesWidget(fake_repo, SectionOptions(siteSlug="acme"), container, change_feed)
        widget.mount()

        assert change_feed.listeners == {}


class TestAutoRefresh:
    def test_timer_is_scheduled_and_cancelled(self, news_repo, container):
        options = SectionOptions(siteSlug="acme", autoRefresh=True, refreshInterval=30)

        with patch("src.sections.presentation.widget.threading.Timer") as mock_timer:
            widget = NewsWidget(news_repo, options, container)
            widget.mount()

            mock_timer.assert_called_once_with(30.0, widget._on_timer, args=(1,))
            mock_timer.return_value.start.assert_called_once()

            widget.unmount()
            mock_timer.return_value.cancel.assert_called_once()

    def test_timer_tick_refetches_and_reschedules(self, news_repo, container):
        options = SectionOptions(siteSlug="acme", autoRefresh=True, refreshInterval=30)

        with patch("src.sections.presentation.widget.threading.Timer") as mock_timer:
            widget = NewsWidget(news_repo, options, container)
            widget.mount()
            calls = len(news_repo.calls)

            widget._on_timer(1)

            assert len(news_repo.calls) == calls + 1
            assert mock_timer.call_count == 2

    def test_no_timer_without_auto_refresh(self, news_widget):
        with patch("src.sections.presentation.widget.threading.Timer") as mock_timer:
            news_widget().mount()
            mock_timer.assert_not_called()

    def test_interval_change_during_tick_keeps_one_timer_chain(self, news_repo, container):
        options = SectionOptions(siteSlug="acme", autoRefresh=True, refreshInterval=30)

        with patch("src.sections.presentation.widget.threading.Timer") as mock_timer:
            widget = NewsWidget(news_repo, options, container)
            widget.mount()
            fired = mock_timer.call_args.kwargs["args"][0]

            def change_interval(collection, site_slug):
                news_repo.before_fetch = None
                widget.update_options(options.model_copy(update={"refresh_interval": 60.0}))

            news_repo.before_fetch = change_interval
            widget._on_timer(fired)

        # The replaced timer's tick must not schedule a second chain
        assert [c.args[0] for c in mock_timer.call_args_list] == [30.0, 60.0]

    def test_tick_after_unmount_does_not_reschedule(self, news_repo, container):
        options = SectionOptions(siteSlug="acme", autoRefresh=True, refreshInterval=30)

        with patch("src.sections.presentation.widget.threading.Timer") as mock_timer:
            widget = NewsWidget(news_repo, options, container)
            widget.mount()
            widget.unmount()

            widget._on_timer(1)

            assert mock_timer.call_count == 1


class TestBusyMarker:
    def test_shell_is_busy_only_while_fetching(self, news_widget, news_repo, container):
        widget = news_widget()
        widget.mount()
        assert "aria-busy" not in container.inner_html

        seen = []
        news_repo.before_fetch = lambda *_: seen.append(container.inner_html)
        widget.refresh()

        # Refetching keeps the last rows on screen, marked busy
        assert 'aria-busy="true"' in seen[0]
        assert "News 0" in seen[0]
        assert "aria-busy" not in container.inner_html


class TestPrizes:
    def test_one_failing_table_fails_the_section(self, fake_repo, container):
        fake_repo.seed(Collection.MAIN_PRIZES, [{"id": "m1", "title": "Grand Prix"}])
        fake_repo.fail(Collection.ADDITIONAL_PRIZES, "timeout")
        widget = PrizesWidget(fake_repo, SectionOptions(siteSlug="acme"), container)

        widget.mount()

        assert widget.state == WidgetState.ERRORED
        assert "Grand Prix" not in container.inner_html

    def test_max_items_applies_per_group(self, fake_repo, container):
        fake_repo.seed(
            Collection.MAIN_PRIZES,
            [{"id": f"m{i}", "title": f"Main {i}", "display_order": i} for i in range(3)],
        )
        fake_repo.seed(
            Collection.ADDITIONAL_PRIZES,
            [{"id": f"a{i}", "name": f"Extra {i}", "display_order": i} for i in range(3)],
        )
        widget = PrizesWidget(fake_repo, SectionOptions(siteSlug="acme", maxItems=2), container)

        widget.mount()

        html = container.inner_html
        assert "Main 1" in html and "Main 2" not in html
        assert "Extra 1" in html and "Extra 2" not in html


def test_every_section_type_has_a_widget():
    from src.config import SectionType

    assert set(WIDGET_TYPES) == set(SectionType.all_keys())
