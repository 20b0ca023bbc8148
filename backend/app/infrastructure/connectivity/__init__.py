"""Connectivity sources — answer "online?" and announce transitions."""

from .base import ListenerConnectivitySource
from .manual_connectivity import ManualConnectivity
from .http_connectivity_monitor import HttpConnectivityMonitor

__all__ = [
    "ListenerConnectivitySource",
    "ManualConnectivity",
    "HttpConnectivityMonitor",
]
