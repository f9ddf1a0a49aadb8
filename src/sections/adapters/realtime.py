import asyncio
import threading
from collections.abc import Callable
from typing import Any

from src.config import SectionsConfig
from src.sections.domain.ports import IChangeFeed, Subscription
from src.shared.telemetry import Telemetry
from supabase import AsyncClient, acreate_client


class SupabaseChangeFeed(IChangeFeed):
    """
    Postgres change notifications through Supabase Realtime.

    The realtime client is asyncio-only, so the feed owns a private event loop
    running on a daemon thread; widgets talk to it synchronously.
    """

    def __init__(self, url: str, key: str, schema: str = "public") -> None:
        self.telemetry = Telemetry("SupabaseChangeFeed")
        self.url = url
        self.key = key
        self.schema = schema
        self._client: AsyncClient | None = None
        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(
            target=self._loop.run_forever, name="sections-realtime", daemon=True
        )
        self._thread.start()

    async def _get_client(self) -> AsyncClient:
        if self._client is None:
            self._client = await acreate_client(self.url, self.key)
        return self._client

    async def _subscribe(self, table: str, on_change: Callable[[], None]) -> Any:
        client = await self._get_client()

        def _notify(payload: Any) -> None:
            self.telemetry.log_info("Change received", table=table)
            # Re-fetching blocks, keep it off the event loop
            self._loop.run_in_executor(None, self._dispatch, on_change, table)

        channel = client.channel(f"shared-{table}-changes")
        channel.on_postgres_changes(
            "*", schema=self.schema, table=table, callback=_notify
        )
        await channel.subscribe()
        return channel

    def _dispatch(self, on_change: Callable[[], None], table: str) -> None:
        try:
            on_change()
        except Exception as e:
            self.telemetry.log_error("Change handler failed", e, table=table)

    async def _unsubscribe(self, channel: Any) -> None:
        client = await self._get_client()
        await client.remove_channel(channel)

    def _run(self, coro: Any) -> Any:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        return future.result(timeout=SectionsConfig.FETCH_TIMEOUT_SECONDS)

    def subscribe(self, table: str, on_change: Callable[[], None]) -> Subscription:
        try:
            channel = self._run(self._subscribe(table, on_change))
        except Exception as e:
            # Widgets still work without live updates
            self.telemetry.log_error("Realtime subscription failed", e, table=table)
            return Subscription()

        self.telemetry.log_info("Subscribed", table=table)

        def _release() -> None:
            try:
                self._run(self._unsubscribe(channel))
                self.telemetry.log_info("Unsubscribed", table=table)
            except Exception as e:
                self.telemetry.log_error("Realtime unsubscribe failed", e, table=table)

        return Subscription(_release)

    def close(self) -> None:
        self._loop.call_soon_threadsafe(self._loop.stop)
        self._thread.join(timeout=1)
