"""HTTP probe connectivity monitor — asyncio daemon polling a health URL."""

import asyncio
import logging

import httpx

from app.infrastructure.connectivity.base import ListenerConnectivitySource

logger = logging.getLogger(__name__)


class HttpConnectivityMonitor(ListenerConnectivitySource):
    """Polls ``probe_url`` and treats any HTTP response as "online".

    Runs as an asyncio.Task inside the FastAPI lifespan. Until the first
    probe completes the configured initial state is reported, so startup
    never blocks on the network.
    """

    def __init__(
        self,
        probe_url: str,
        interval: float = 10.0,
        *,
        initially_online: bool = True,
        timeout: float = 5.0,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(initially_online=initially_online)
        self._probe_url = probe_url
        self._interval = interval
        self._timeout = timeout
        self._http_client = http_client
        self._running = False
        self._task: asyncio.Task | None = None

    async def start(self) -> None:
        """Start the background probe loop."""
        self._running = True
        self._task = asyncio.create_task(self._loop())
        logger.info("HttpConnectivityMonitor started (probe=%s)", self._probe_url)

    async def stop(self) -> None:
        """Gracefully stop the background probe loop."""
        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
        logger.info("HttpConnectivityMonitor stopped")

    async def _loop(self) -> None:
        while self._running:
            try:
                await self.check_now()
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Connectivity probe loop error")

            await asyncio.sleep(self._interval)

    async def check_now(self) -> bool:
        """Probe once, fire listeners on a transition, and return the new state."""
        online = await self._probe()
        await self._transition(online)
        return online

    async def _probe(self) -> bool:
        client = self._http_client or httpx.AsyncClient(timeout=self._timeout)
        should_close = self._http_client is None
        try:
            await client.get(self._probe_url)
            return True
        except httpx.TransportError as exc:
            logger.debug("Connectivity probe failed: %s", exc)
            return False
        finally:
            if should_close:
                await client.aclose()
