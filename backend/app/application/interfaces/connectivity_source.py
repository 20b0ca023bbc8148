"""Abstract port for the platform connectivity signal."""

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable

# Async callback invoked on a connectivity transition
ConnectivityListener = Callable[[], Awaitable[None]]


class ConnectivitySource(ABC):
    """Answers "are we online?" and notifies listeners on transitions."""

    @abstractmethod
    def is_online(self) -> bool:
        """Current connectivity. Synchronous and non-blocking."""
        ...

    @abstractmethod
    def subscribe(
        self,
        on_online: ConnectivityListener,
        on_offline: ConnectivityListener,
    ) -> Callable[[], None]:
        """Register transition listeners. Returns a function that unregisters them."""
        ...
