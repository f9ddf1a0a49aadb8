import threading
from unittest.mock import ANY, AsyncMock, MagicMock, patch

import pytest

from src.sections.adapters.realtime import SupabaseChangeFeed
from src.sections.domain.ports import Subscription


class TestSubscription:
    def test_close_runs_release_once(self):
        release = MagicMock()
        subscription = Subscription(release)

        subscription.close()
        subscription.close()

        release.assert_called_once()
        assert subscription.closed

    def test_close_without_release(self):
        subscription = Subscription()
        subscription.close()
        assert subscription.closed


@pytest.fixture
def realtime_client():
    client = MagicMock()
    channel = MagicMock()
    channel.subscribe = AsyncMock(return_value=channel)
    client.channel.return_value = channel
    client.remove_channel = AsyncMock()
    with patch(
        "src.sections.adapters.realtime.acreate_client", AsyncMock(return_value=client)
    ):
        yield client


@pytest.fixture
def feed(realtime_client):
    feed = SupabaseChangeFeed("https://db.test", "key")
    yield feed
    feed.close()


class TestSupabaseChangeFeed:
    def test_subscribe_registers_postgres_changes(self, feed, realtime_client):
        feed.subscribe("news", lambda: None)

        realtime_client.channel.assert_called_once_with("shared-news-changes")
        channel = realtime_client.channel.return_value
        channel.on_postgres_changes.assert_called_once_with(
            "*", schema="public", table="news", callback=ANY
        )
        channel.subscribe.assert_awaited_once()

    def test_change_notifies_listener(self, feed, realtime_client):
        notified = threading.Event()
        feed.subscribe("sponsors", notified.set)
        channel = realtime_client.channel.return_value
        callback = channel.on_postgres_changes.call_args.kwargs["callback"]

        feed._loop.call_soon_threadsafe(callback, {"eventType": "UPDATE"})

        assert notified.wait(timeout=5)

    def test_close_removes_channel(self, feed, realtime_client):
        subscription = feed.subscribe("resources", lambda: None)

        subscription.close()
        subscription.close()

        realtime_client.remove_channel.assert_awaited_once_with(
            realtime_client.channel.return_value
        )

    def test_subscribe_failure_degrades_to_no_op(self):
        with patch(
            "src.sections.adapters.realtime.acreate_client",
            AsyncMock(side_effect=ConnectionError("no realtime")),
        ):
            feed = SupabaseChangeFeed("https://db.test", "key")
            try:
                subscription = feed.subscribe("news", lambda: None)
                subscription.close()
            finally:
                feed.close()

        assert subscription.closed
