"""
HTTP client exposing a REST resource as entity fetch functions.

Endpoints:
    GET {base_url}/{resource}/{id}          -> one entity (404 -> None)
    GET {base_url}/{resource}?id=1&id=2     -> list of entities
    GET {base_url}/{resource}               -> all entities

List endpoints may answer with a bare JSON list or {"items": [...]}.
"""

from __future__ import annotations

from typing import Any, Awaitable, Callable, Optional

import httpx
from pydantic import BaseModel, Field

from ..core.errors import ServiceError


class EntityListResponse(BaseModel):
    """List response from a service."""
    items: list[dict[str, Any]] = Field(default_factory=list)
    total: Optional[int] = None


class ServiceClient:
    """
    Async HTTP client for entity services.

    Usage:
        client = ServiceClient("http://users:8002")
        entity_configs = {
            "user": {
                "api": client.entity_api(
                    "users", get_one="get_user", get_some="get_users", get_all="list_users"
                ),
                "plugins": {"denormalizer": {"get_one": "get_user", "get_some": "get_users"}},
            },
        }
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize service client.

        Args:
            base_url: Base URL of the service (e.g., "http://users:8002")
            timeout: HTTP request timeout in seconds
            transport: Optional httpx transport (e.g. httpx.MockTransport in tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create async HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        return self._client

    async def close(self):
        """Close the HTTP client."""
        if self._client:
            await self._client.aclose()
            self._client = None

    async def _get(self, path: str, params: Optional[dict[str, Any]] = None) -> httpx.Response:
        client = await self._get_client()
        url = f"{self.base_url}/{path.lstrip('/')}"
        try:
            return await client.get(url, params=params)
        except httpx.RequestError as e:
            raise ServiceError(service=self.base_url, status_code=0, message=str(e))

    def _check(self, response: httpx.Response) -> None:
        if response.status_code != 200:
            raise ServiceError(
                service=self.base_url,
                status_code=response.status_code,
                message=response.text,
            )

    def _parse_list(self, data: Any) -> list[dict[str, Any]]:
        if isinstance(data, list):
            data = {"items": data}
        return EntityListResponse.model_validate(data).items

    async def get_one(self, resource: str, id: Any) -> Optional[dict[str, Any]]:
        """
        Fetch a single entity.

        Returns:
            Entity dict, or None if the service answers 404

        Raises:
            ServiceError: On any other non-200 response or transport error
        """
        response = await self._get(f"{resource}/{id}")
        if response.status_code == 404:
            return None
        self._check(response)
        return response.json()

    async def get_some(self, resource: str, ids: list[Any]) -> list[dict[str, Any]]:
        """Fetch entities by a list of ids."""
        if not ids:
            return []
        response = await self._get(resource, params={"id": list(ids)})
        self._check(response)
        return self._parse_list(response.json())

    async def get_all(self, resource: str) -> list[dict[str, Any]]:
        """Fetch every entity of a resource."""
        response = await self._get(resource)
        self._check(response)
        return self._parse_list(response.json())

    def entity_api(
        self,
        resource: str,
        get_one: str = "get_one",
        get_some: Optional[str] = None,
        get_all: Optional[str] = None,
    ) -> dict[str, Callable[..., Awaitable[Any]]]:
        """
        Build an entity "api" mapping backed by this client.

        Args:
            resource: Resource path (e.g., "users")
            get_one: Name of the single-entity function
            get_some: Name of the by-ids function (omitted if None)
            get_all: Name of the fetch-everything function (omitted if None)

        Returns:
            Dict mapping function name -> async function
        """
        async def fetch_one(id: Any) -> Optional[dict[str, Any]]:
            return await self.get_one(resource, id)

        fetch_one.__name__ = get_one
        api: dict[str, Callable[..., Awaitable[Any]]] = {get_one: fetch_one}

        if get_some:
            async def fetch_some(ids: list[Any]) -> list[dict[str, Any]]:
                return await self.get_some(resource, ids)

            fetch_some.__name__ = get_some
            api[get_some] = fetch_some

        if get_all:
            async def fetch_all() -> list[dict[str, Any]]:
                return await self.get_all(resource)

            fetch_all.__name__ = get_all
            api[get_all] = fetch_all

        return api
