import threading
import weakref
from abc import ABC, abstractmethod
from typing import Any, ClassVar

from src.components.sections import empty_panel, error_panel, loading_panel, section_shell
from src.config import SectionType
from src.fsm import WidgetAction, WidgetState, WidgetStateMachine
from src.sections.domain.models import Collection, FetchResult, SectionOptions
from src.sections.domain.ports import IChangeFeed, ISectionsRepository, Subscription
from src.sections.domain.theme import normalize_theme
from src.sections.presentation.containers import IContainer
from src.shared.telemetry import Telemetry


class SectionWidget(ABC):
    """
    One mounted section: fetches its rows, tracks Idle/Loading/Loaded/Errored
    through the state machine and paints the matching HTML into its container.

    Fetches are tagged with a request token; only the response to the newest
    request is applied, and nothing is applied after `unmount()`.
    """

    section_type: ClassVar[SectionType]
    title: ClassVar[str]
    subtitle: ClassVar[str] = ""
    loading_text: ClassVar[str] = "Loading…"
    empty_title: ClassVar[str] = "Nothing here yet"
    empty_message: ClassVar[str] = "Please check back soon."
    extra_css: ClassVar[str] = ""
    # Table whose change feed triggers a re-fetch, if any
    live_table: ClassVar[Collection | None] = None
    # Option fields whose change triggers a re-fetch
    refetch_on: ClassVar[tuple[str, ...]] = ("site_slug",)

    def __init__(
        self,
        repo: ISectionsRepository,
        options: SectionOptions,
        container: IContainer,
        change_feed: IChangeFeed | None = None,
    ) -> None:
        self.telemetry = Telemetry(self.__class__.__name__)
        self.repo = repo
        self.options = options
        # Weak: a container dropped by its host page takes the widget down with it
        self._container_ref = weakref.ref(container)
        self.change_feed = change_feed
        self.theme = normalize_theme(options.theme)
        self.fsm = WidgetStateMachine()

        self._lock = threading.RLock()
        self._request_seq = 0
        self._result: FetchResult[Any] = FetchResult()
        self._subscription: Subscription | None = None
        self._timer: threading.Timer | None = None
        self._timer_generation = 0

    # --- Properties ---
    @property
    def state(self) -> WidgetState:
        return self.fsm.current_state

    @property
    def container(self) -> IContainer | None:
        return self._container_ref()

    @property
    def is_mounted(self) -> bool:
        return self.state not in (WidgetState.IDLE, WidgetState.UNMOUNTED)

    @property
    def error(self) -> str | None:
        return self._result.error

    @property
    def items(self) -> list[Any]:
        return list(self._result.data)

    # --- Hooks ---
    @abstractmethod
    def load(self, options: SectionOptions) -> FetchResult[Any]:
        """Performs the remote read for `options`."""

    @abstractmethod
    def render_items(self, items: list[Any]) -> str:
        """Markup for a non-empty, already capped item list."""

    def visible_items(self) -> list[Any]:
        items = sorted(self._result.data, key=lambda item: item.display_order)
        if self.options.max_items:
            items = items[: self.options.max_items]
        return items

    # --- Lifecycle ---
    def mount(self) -> None:
        subscription = None
        if self.live_table is not None and self.change_feed is not None:
            subscription = self.change_feed.subscribe(
                self.live_table.value, self._on_remote_change
            )

        with self._lock:
            torn_down = self.state is WidgetState.UNMOUNTED
            if not torn_down:
                self._subscription = subscription
                self._schedule_refresh()

        if torn_down:
            # Unmounted while subscribing
            if subscription is not None:
                subscription.close()
            return

        self.telemetry.log_info(
            "Mounting", section=self.section_type.value, site_slug=self.options.site_slug
        )
        self.refresh()

    def refresh(self) -> None:
        with self._lock:
            if self.state is WidgetState.UNMOUNTED:
                return
            self._request_seq += 1
            token = self._request_seq
            options = self.options
            self.fsm.transition(WidgetAction.FETCH)
            self._paint()

        try:
            result = self.load(options)
        except Exception as e:
            self.telemetry.log_error("Section load failed", e, section=self.section_type.value)
            result = FetchResult.failure(str(e) or e.__class__.__name__)

        with self._lock:
            if self.state is WidgetState.UNMOUNTED:
                self.telemetry.log_info("Dropping response after unmount", token=token)
                return
            if token != self._request_seq:
                self.telemetry.log_info(
                    "Dropping stale response", token=token, latest=self._request_seq
                )
                return

            self._result = result
            if result.error is not None:
                self.fsm.transition(WidgetAction.LOAD_ERROR)
            else:
                self.fsm.transition(WidgetAction.LOAD_SUCCESS)
            self._paint()

    def update_options(self, options: SectionOptions) -> None:
        with self._lock:
            if self.state is WidgetState.UNMOUNTED:
                return
            previous, self.options = self.options, options
            self.theme = normalize_theme(options.theme)

            if (previous.auto_refresh, previous.refresh_interval) != (
                options.auto_refresh,
                options.refresh_interval,
            ):
                self._cancel_timer()
                self._schedule_refresh()

            needs_fetch = any(
                getattr(previous, name) != getattr(options, name) for name in self.refetch_on
            )
            if not needs_fetch:
                self._paint()
                return

        self.refresh()

    def unmount(self) -> None:
        with self._lock:
            if self.state is WidgetState.UNMOUNTED:
                return
            self.fsm.transition(WidgetAction.UNMOUNT)
            self._cancel_timer()
            subscription, self._subscription = self._subscription, None
            container = self.container
            if container is not None:
                container.clear()

        if subscription is not None:
            subscription.close()
        self.telemetry.log_info("Unmounted", section=self.section_type.value)

    # --- Rendering ---
    def render(self) -> str:
        state = self.state
        if state in (WidgetState.IDLE, WidgetState.LOADING):
            body = loading_panel(self.loading_text)
        elif state is WidgetState.ERRORED:
            body = error_panel(self._result.error or "")
        else:
            items = self.visible_items()
            if items:
                body = self.render_items(items)
            else:
                body = empty_panel(self.empty_title, self.empty_message)

        return section_shell(
            self.section_type.value,
            body,
            self.options,
            self.theme,
            title=self.title,
            subtitle=self.subtitle,
            extra_css=self.extra_css,
            busy=self.fsm.is_busy,
        )

    def _paint(self) -> None:
        container = self.container
        if container is not None and self.state is not WidgetState.UNMOUNTED:
            container.set_html(self.render())

    # --- Live Updates ---
    def _on_remote_change(self) -> None:
        self.telemetry.log_info("Remote change, re-fetching", section=self.section_type.value)
        self.refresh()

    def _schedule_refresh(self) -> None:
        if not self.options.auto_refresh:
            return
        self._timer_generation += 1
        timer = threading.Timer(
            self.options.refresh_interval, self._on_timer, args=(self._timer_generation,)
        )
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _on_timer(self, generation: int) -> None:
        self.refresh()
        with self._lock:
            # A timer replaced while its tick was running ends its chain here
            if self.state is not WidgetState.UNMOUNTED and generation == self._timer_generation:
                self._schedule_refresh()

    def _cancel_timer(self) -> None:
        self._timer_generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
