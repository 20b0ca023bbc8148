from .local_store import LocalStore
from .remote_api import RemoteApi
from .connectivity_source import ConnectivitySource, ConnectivityListener
from .crypto_provider import CryptoProvider

__all__ = [
    "LocalStore",
    "RemoteApi",
    "ConnectivitySource",
    "ConnectivityListener",
    "CryptoProvider",
]
