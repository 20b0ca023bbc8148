"""Colored sync logger — ANSI-colored console lines for queue drain passes.

Color scheme:
    🔵 Blue    — Queue reads / bookkeeping
    🟣 Magenta — Replay of a queued operation
    🟡 Yellow  — Connectivity transitions
    🔴 Red     — Errors
    🟢 Green   — Pass complete
"""

import logging
from typing import Any


class _Colors:
    """ANSI escape codes for terminal colors."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"

    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    BLUE = "\033[94m"
    MAGENTA = "\033[95m"
    GRAY = "\033[90m"


class SyncStage:
    """Predefined sync stages with colors and icons."""

    QUEUE = ("QUEUE", _Colors.BLUE, "📥")
    REPLAY = ("REPLAY", _Colors.MAGENTA, "🔁")
    CONNECTIVITY = ("NETWORK", _Colors.YELLOW, "📶")
    ERROR = ("ERROR", _Colors.RED, "❌")
    COMPLETE = ("COMPLETE", _Colors.GREEN, "✅")


def _format_details(kwargs: dict[str, Any]) -> str:
    details = " | ".join(f"{k}={v}" for k, v in kwargs.items())
    return f" {_Colors.GRAY}({details}){_Colors.RESET}"


class SyncLogger:
    """Color-coded logger for the synchronization engine.

    Usage:
        log = SyncLogger("SyncEngine")
        log.step_start(SyncStage.QUEUE, "Draining 3 queued operations")
        log.step_complete(SyncStage.REPLAY, "POST /patients", attempts=0)
    """

    def __init__(self, component_name: str):
        self._logger = logging.getLogger(component_name)

    def step_start(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{_Colors.BOLD}{icon} [{label}]{_Colors.RESET} "
            f"{color}{message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.info(formatted)

    def step_complete(self, stage: tuple[str, str, str], message: str, **kwargs: Any) -> None:
        label, color, icon = stage
        formatted = (
            f"{color}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.GREEN}✓ {message}{_Colors.RESET}"
        )
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.info(formatted)

    def step_failed(
        self,
        stage: tuple[str, str, str],
        message: str,
        error: Exception | None = None,
        **kwargs: Any,
    ) -> None:
        """Log a recoverable failure at WARNING (the operation stays queued)."""
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{icon} [{label}]{_Colors.RESET} "
            f"{_Colors.RED}✗ {message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        if kwargs:
            formatted += _format_details(kwargs)
        self._logger.warning(formatted)

    def step_error(self, stage: tuple[str, str, str], message: str, error: Exception | None = None) -> None:
        label, _, icon = stage
        formatted = (
            f"{_Colors.RED}{_Colors.BOLD}❌ [{label}]{_Colors.RESET} "
            f"{_Colors.RED}{message}{_Colors.RESET}"
        )
        if error:
            formatted += f" {_Colors.DIM}→ {type(error).__name__}: {error}{_Colors.RESET}"
        self._logger.error(formatted)

    def stats(self, **kwargs: Any) -> None:
        """Log pass statistics."""
        parts = [f"{k}: {v}" for k, v in kwargs.items()]
        self._logger.info(f"   {_Colors.GRAY}📈 {' | '.join(parts)}{_Colors.RESET}")
