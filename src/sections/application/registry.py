import threading
import weakref
from typing import Any

from pydantic import ValidationError

from src.config import SectionsConfig
from src.sections.domain.models import SectionOptions
from src.sections.domain.ports import IChangeFeed, ISectionsRepository
from src.sections.domain.validation import validate_section_config
from src.sections.presentation.containers import IContainer, PageDocument
from src.sections.presentation.widget import SectionWidget
from src.sections.presentation.widgets import WIDGET_TYPES
from src.shared.telemetry import SECTION_MOUNTS, Telemetry


class MountHandle:
    """Returned by `SectionRegistry.mount`; tears its widget down on `unmount()`."""

    def __init__(
        self, registry: "SectionRegistry", container: IContainer, widget: SectionWidget
    ) -> None:
        self._registry = registry
        self._container_ref = weakref.ref(container)
        self.widget = widget
        # Unmounts the widget if the host drops the container without unmounting
        self._finalizer = weakref.finalize(container, registry.collected, widget)

    @property
    def container(self) -> IContainer | None:
        return self._container_ref()

    @property
    def mounted(self) -> bool:
        container = self.container
        return container is not None and self._registry.get_handle(container) is self

    def update(self, config: dict[str, Any] | SectionOptions) -> bool:
        """Re-configures the live widget. Returns False if the config is rejected."""
        options = self._registry.parse_options(config)
        if options is None:
            return False
        self.widget.update_options(options)
        return True

    def unmount(self) -> None:
        self._registry.release(self)

    def teardown(self) -> None:
        self._finalizer.detach()
        self.widget.unmount()


class SectionRegistry:
    """
    Mount surface for host pages.

    `render(type, container_id, config)` / `unmount(container_id)` mirror the
    script-tag global; `mount(type, container, config)` returns a handle for
    Python hosts. At most one widget lives on a container: mounting onto an
    occupied container tears the previous widget down first. Nothing here
    raises into the host page for bad input; problems are logged and the call
    becomes a no-op.

    Containers are held weakly. The host owns them, and a container it drops
    without unmounting takes its widget down when it is collected.
    """

    version = SectionsConfig.COMPONENTS_VERSION

    def __init__(
        self,
        repo: ISectionsRepository,
        document: PageDocument | None = None,
        change_feed: IChangeFeed | None = None,
        widget_types: dict[str, type[SectionWidget]] | None = None,
    ) -> None:
        self.telemetry = Telemetry("SectionRegistry")
        self.repo = repo
        self.document = document if document is not None else PageDocument()
        self.change_feed = change_feed
        self.widget_types = dict(widget_types if widget_types is not None else WIDGET_TYPES)
        self._handles: weakref.WeakKeyDictionary[IContainer, MountHandle] = (
            weakref.WeakKeyDictionary()
        )
        self._lock = threading.RLock()

    # --- Queries ---
    def get_handle(self, container: IContainer) -> MountHandle | None:
        with self._lock:
            return self._handles.get(container)

    @property
    def active_count(self) -> int:
        with self._lock:
            return len(self._handles)

    def parse_options(self, config: dict[str, Any] | SectionOptions) -> SectionOptions | None:
        if isinstance(config, SectionOptions):
            return config

        errors = validate_section_config(config)
        if errors:
            self.telemetry.log_warning("Rejected section config", errors=errors)
            return None
        try:
            return SectionOptions.model_validate(config)
        except ValidationError as e:
            self.telemetry.log_warning(
                "Rejected section config", errors=[err["msg"] for err in e.errors()]
            )
            return None

    # --- Handle API ---
    def mount(
        self,
        section_type: str,
        container: IContainer,
        config: dict[str, Any] | SectionOptions,
    ) -> MountHandle | None:
        Telemetry.start_trace()
        key = getattr(section_type, "value", section_type)
        widget_cls = self.widget_types.get(key)
        if widget_cls is None:
            self.telemetry.log_warning(f'Component type "{key}" not found')
            return None

        options = self.parse_options(config)
        if options is None:
            return None

        with self._lock:
            previous = self._handles.pop(container, None)
            if previous is not None:
                self.telemetry.log_info("Replacing mounted section", section=key)
                previous.teardown()

            try:
                widget = widget_cls(self.repo, options, container, self.change_feed)
            except Exception as e:
                self.telemetry.log_error(f"Error creating {key} section", e)
                return None
            handle = MountHandle(self, container, widget)
            self._handles[container] = handle

        try:
            widget.mount()
        except Exception as e:
            self.telemetry.log_error(f"Error rendering {key} section", e)
            handle.unmount()
            return None

        SECTION_MOUNTS.labels(section=key, site_slug=options.site_slug).inc()
        self.telemetry.log_info("Mounted section", section=key, site_slug=options.site_slug)
        return handle

    def release(self, handle: MountHandle) -> None:
        container = handle.container
        with self._lock:
            if container is not None and self._handles.get(container) is handle:
                del self._handles[container]
        handle.teardown()

    def collected(self, widget: SectionWidget) -> None:
        """Finalizer for containers garbage-collected while still mounted."""
        # The weak map has already dropped the entry
        self.telemetry.log_info(
            "Container collected, unmounting", section=widget.section_type.value
        )
        widget.unmount()

    # --- Script-tag surface (RemilaSections.render / unmount) ---
    def render(
        self, section_type: str, container_id: str, config: dict[str, Any] | None = None
    ) -> None:
        container = self.document.get_element_by_id(container_id)
        if container is None:
            self.telemetry.log_warning(f'Container with id "{container_id}" not found')
            return
        self.mount(section_type, container, config or {})

    def unmount(self, container_id: str) -> None:
        container = self.document.get_element_by_id(container_id)
        if container is None:
            return
        with self._lock:
            handle = self._handles.pop(container, None)
        if handle is not None:
            handle.teardown()


def build_registry(
    document: PageDocument | None = None,
    realtime: bool = SectionsConfig.REALTIME_ENABLED,
) -> SectionRegistry:
    """Composition root for hosts that talk to the hosted database."""
    from src.sections.adapters.realtime import SupabaseChangeFeed
    from src.sections.adapters.supabase_repository import SupabaseSectionsRepository

    repo = SupabaseSectionsRepository(SectionsConfig.SUPABASE_URL, SectionsConfig.SUPABASE_KEY)
    change_feed = (
        SupabaseChangeFeed(SectionsConfig.SUPABASE_URL, SectionsConfig.SUPABASE_KEY)
        if realtime
        else None
    )
    return SectionRegistry(repo, document=document, change_feed=change_feed)
