"""Health records REST client — implements the RemoteApi interface.

Talks JSON to the per-entity endpoints (``GET/POST /{entity}``,
``GET/PUT/DELETE /{entity}/{id}``) using httpx. Sync-queue replay goes
through :meth:`HealthRecordsApiClient.send` with the stored method and
endpoint.
"""

import json
import logging
from typing import Any

import httpx

from app.application.interfaces.remote_api import RemoteApi
from app.domain.entities import Collection
from app.domain.exceptions import (
    ApiRequestError,
    AuthenticationRequiredError,
    RemoteUnreachableError,
)

logger = logging.getLogger(__name__)


class HealthRecordsApiClient(RemoteApi):
    """Infrastructure adapter — connects to the remote health records API.

    An injected ``httpx.AsyncClient`` is reused across calls; otherwise a
    client is created and closed per request.
    """

    def __init__(
        self,
        base_url: str,
        api_token: str = "",
        timeout: float | None = 30.0,
        http_client: httpx.AsyncClient | None = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._api_token = api_token
        self._timeout = timeout
        self._http_client = http_client

    def _get_headers(self) -> dict[str, str]:
        """JSON headers plus the bearer token when one is configured."""
        headers = {"Content-Type": "application/json"}
        if self._api_token:
            headers["Authorization"] = f"Bearer {self._api_token}"
        return headers

    def _build_url(self, endpoint: str) -> str:
        if endpoint.startswith(("http://", "https://")):
            return endpoint
        return f"{self._base_url}/{endpoint.lstrip('/')}"

    async def _get_client(self) -> httpx.AsyncClient:
        """Return the injected client or create a new one."""
        if self._http_client is not None:
            return self._http_client
        return httpx.AsyncClient(timeout=self._timeout)

    async def send(
        self,
        method: str,
        endpoint: str,
        data: dict[str, Any] | None = None,
    ) -> Any:
        url = self._build_url(endpoint)
        client = await self._get_client()
        should_close = self._http_client is None

        try:
            try:
                response = await client.request(
                    method.upper(),
                    url,
                    headers=self._get_headers(),
                    json=data,
                )
            except httpx.HTTPError as exc:
                raise RemoteUnreachableError(
                    f"{method.upper()} {url} failed: {type(exc).__name__}: {exc}"
                ) from exc

            if response.status_code == 401:
                raise AuthenticationRequiredError()
            if not response.is_success:
                self._raise_request_error(response)

            logger.debug("%s %s -> %d", method.upper(), url, response.status_code)
            if not response.content:
                return None
            try:
                return response.json()
            except (json.JSONDecodeError, UnicodeDecodeError):
                # Delivered; a non-JSON acknowledgement carries no record
                logger.debug("%s %s returned a non-JSON body", method.upper(), url)
                return None

        finally:
            if should_close:
                await client.aclose()

    async def list_records(self, collection: Collection) -> list[dict[str, Any]]:
        result = await self.send("GET", collection.resource_path)
        return list(result or [])

    async def get_record(self, collection: Collection, record_id: str) -> dict[str, Any]:
        return await self.send("GET", collection.item_path(record_id))

    async def create_record(
        self, collection: Collection, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.send("POST", collection.resource_path, data)

    async def update_record(
        self, collection: Collection, record_id: str, data: dict[str, Any]
    ) -> dict[str, Any]:
        return await self.send("PUT", collection.item_path(record_id), data)

    async def delete_record(self, collection: Collection, record_id: str) -> None:
        await self.send("DELETE", collection.item_path(record_id))

    @staticmethod
    def _raise_request_error(response: httpx.Response) -> None:
        """Raise ApiRequestError from a non-2xx httpx Response."""
        try:
            data = response.json()
            error = data.get("error", response.text) if isinstance(data, dict) else response.text
            if isinstance(error, dict):
                error = error.get("message", response.text)
            message = str(error) or "An error occurred"
        except (json.JSONDecodeError, UnicodeDecodeError):
            message = response.text or "An error occurred"

        raise ApiRequestError(status_code=response.status_code, message=message)
