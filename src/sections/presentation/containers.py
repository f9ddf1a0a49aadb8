import threading
from abc import ABC, abstractmethod
from typing import Any

import streamlit as st


class IContainer(ABC):
    """A host-page element a widget paints into."""

    @abstractmethod
    def set_html(self, html: str) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class HtmlContainer(IContainer):
    """In-memory element for server-side hosts (and tests)."""

    def __init__(self, element_id: str) -> None:
        self.element_id = element_id
        self.inner_html = ""
        self._lock = threading.Lock()

    def set_html(self, html: str) -> None:
        with self._lock:
            self.inner_html = html

    def clear(self) -> None:
        with self._lock:
            self.inner_html = ""

    def outer_html(self) -> str:
        return f'<div id="{self.element_id}">{self.inner_html}</div>'


class StreamlitContainer(IContainer):
    """Wraps an `st.empty()` placeholder."""

    def __init__(self, placeholder: Any = None) -> None:
        self.placeholder = placeholder if placeholder is not None else st.empty()

    def set_html(self, html: str) -> None:
        self.placeholder.html(html)

    def clear(self) -> None:
        self.placeholder.empty()


class PageDocument:
    """
    Element lookup for a host page: maps element ids to containers.
    """

    def __init__(self) -> None:
        self._elements: dict[str, IContainer] = {}
        self._lock = threading.Lock()

    def add(self, element_id: str, container: IContainer | None = None) -> IContainer:
        element = container if container is not None else HtmlContainer(element_id)
        with self._lock:
            self._elements[element_id] = element
        return element

    def remove(self, element_id: str) -> None:
        with self._lock:
            self._elements.pop(element_id, None)

    def get_element_by_id(self, element_id: str) -> IContainer | None:
        with self._lock:
            return self._elements.get(element_id)

    def __contains__(self, element_id: object) -> bool:
        with self._lock:
            return element_id in self._elements
