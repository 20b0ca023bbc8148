"""Domain entity for mutations made while offline and awaiting replay."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class OperationType(str, Enum):
    """Kind of mutation captured in the sync queue."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass
class PendingOperation:
    """A queued mutation replayed against the remote API once online.

    ``attempts`` only ever grows; it is never reset, and there is no
    upper bound after which the operation is dropped.
    """

    type: OperationType
    store_name: str
    data: dict[str, Any]
    endpoint: str
    method: str
    id: int | None = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    attempts: int = 0

    def record_failure(self) -> None:
        """Count one more failed replay attempt."""
        self.attempts += 1
