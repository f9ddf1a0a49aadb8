import pytest
import streamlit as st

from src.sections.application.registry import SectionRegistry
from src.sections.domain.models import Collection, SectionOptions
from src.sections.presentation.containers import HtmlContainer, PageDocument
from tests.drivers.fake_sections import FakeChangeFeed, FakeSectionsRepository, news_rows


class MockSessionState(dict):
    """
    Mock for st.session_state that behaves like both a dict and an object.
    Allows both dict-style and attribute-style access.
    """

    def __getattr__(self, name):
        try:
            return self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err

    def __setattr__(self, name, value):
        self[name] = value

    def __delattr__(self, name):
        try:
            del self[name]
        except KeyError as err:
            raise AttributeError(
                f"'MockSessionState' object has no attribute '{name}'"
            ) from err


@pytest.fixture(autouse=True)
def mock_streamlit_session():
    """
    Auto-use fixture that ensures st.session_state exists for all tests.
    """
    original_session_state = getattr(st, "session_state", None)

    st.session_state = MockSessionState()

    yield st.session_state

    st.session_state.clear()

    if original_session_state is not None:
        st.session_state = original_session_state


@pytest.fixture
def fake_repo():
    """Empty in-memory repository."""
    return FakeSectionsRepository()


@pytest.fixture
def news_repo(fake_repo):
    """Repository holding ten published news rows for tenant 'acme'."""
    fake_repo.seed(Collection.NEWS, news_rows(10))
    return fake_repo


@pytest.fixture
def change_feed():
    return FakeChangeFeed()


@pytest.fixture
def container():
    return HtmlContainer("root")


@pytest.fixture
def options():
    return SectionOptions(siteSlug="acme")


@pytest.fixture
def document():
    doc = PageDocument()
    doc.add("news-root")
    return doc


@pytest.fixture
def registry(news_repo, document, change_feed):
    return SectionRegistry(news_repo, document=document, change_feed=change_feed)
