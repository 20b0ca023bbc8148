"""Result of an offline-first collection fetch."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class DataSource(str, Enum):
    """Where the returned items came from."""

    REMOTE = "remote"
    LOCAL = "local"


@dataclass
class FetchResult:
    """Items returned by a collection fetch plus the error that forced a fallback, if any."""

    items: list[dict[str, Any]] = field(default_factory=list)
    source: DataSource = DataSource.REMOTE
    error: Exception | None = None
