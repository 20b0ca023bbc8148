"""Connectivity source whose state is pushed in by the caller."""

from app.infrastructure.connectivity.base import ListenerConnectivitySource


class ManualConnectivity(ListenerConnectivitySource):
    """Connectivity flipped explicitly — by tests, or through the HTTP API
    when the host has its own network-change hook."""

    async def set_online(self) -> None:
        await self._transition(True)

    async def set_offline(self) -> None:
        await self._transition(False)
