"""Abstract port for the remote health records REST API."""

from abc import ABC, abstractmethod
from typing import Any

from app.domain.entities import Collection


class RemoteApi(ABC):
    """REST access to the remote system, one explicit call per operation.

    Implementations raise ApiRequestError for non-success responses and
    RemoteUnreachableError when no response was received.
    """

    @abstractmethod
    async def send(
        self,
        method: str,
        endpoint: str,
        data: dict[str, Any] | None = None,
    ) -> Any:
        """Issue a raw JSON request against an API-relative endpoint."""
        ...

    @abstractmethod
    async def list_records(self, collection: Collection) -> list[dict[str, Any]]:
        ...

    @abstractmethod
    async def get_record(self, collection: Collection, record_id: str) -> dict[str, Any]:
        ...

    @abstractmethod
    async def create_record(
        self, collection: Collection, data: dict[str, Any]
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    async def update_record(
        self, collection: Collection, record_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        ...

    @abstractmethod
    async def delete_record(self, collection: Collection, record_id: str) -> None:
        ...
