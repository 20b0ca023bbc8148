"""Listener bookkeeping shared by the connectivity sources."""

import logging
from collections.abc import Callable

from app.application.interfaces.connectivity_source import (
    ConnectivityListener,
    ConnectivitySource,
)

logger = logging.getLogger(__name__)


class ListenerConnectivitySource(ConnectivitySource):
    """Holds the online flag and fires listeners only on real transitions."""

    def __init__(self, initially_online: bool = True):
        self._online = initially_online
        self._listeners: list[tuple[ConnectivityListener, ConnectivityListener]] = []

    def is_online(self) -> bool:
        return self._online

    def subscribe(
        self,
        on_online: ConnectivityListener,
        on_offline: ConnectivityListener,
    ) -> Callable[[], None]:
        entry = (on_online, on_offline)
        self._listeners.append(entry)

        def unsubscribe() -> None:
            if entry in self._listeners:
                self._listeners.remove(entry)

        return unsubscribe

    async def _transition(self, online: bool) -> None:
        """Record the new state and await every matching listener in order."""
        if online == self._online:
            return
        self._online = online
        logger.info("Connectivity changed: %s", "online" if online else "offline")

        for on_online, on_offline in list(self._listeners):
            await (on_online() if online else on_offline())
