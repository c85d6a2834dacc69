import logging
from typing import List, Dict, Any, Optional, Type, TypeVar
from urllib.parse import quote

import httpx
from pydantic import BaseModel, ValidationError

from vecshell_data_model.data_models import TenantModel, DatabaseModel, CollectionModel, CreateCollectionPayload, \
    GetRequestPayload, GetResponse
from vecshell_exception_model.exception import ResourceNotFoundException, ResourceConflictException, \
    TransportException, SerializationException

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v2"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _segment(name: str) -> str:
    """Escape a resource name for use as one URL path segment"""
    return quote(name, safe="")


def _paging_params(limit: Optional[int], offset: Optional[int]) -> Dict[str, int]:
    params = {}
    if limit is not None:
        params["limit"] = limit
    if offset is not None:
        params["offset"] = offset
    return params


class VecshellRestAPIClient:
    """Client for the tenant / database / collection endpoints of a Chroma-compatible server"""

    def __init__(self, base_url: str = "http://localhost:8000"):
        self.base_url = base_url.rstrip("/")
        self.session = None

    async def __aenter__(self):
        self.session = httpx.AsyncClient()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if self.session:
            await self.session.aclose()

    def url(self, path: str) -> str:
        return f"{self.base_url}{API_PREFIX}{path}"

    async def request(
            self,
            method: str,
            path: str,
            json_body: Optional[Dict[str, Any]] = None,
            params: Optional[Dict[str, Any]] = None
    ) -> Any:
        """
        Send one request and return the decoded JSON body.

        Args:
            method: HTTP method
            path: Path below the API prefix, e.g. ``/tenants/acme``
            json_body: Optional JSON request body
            params: Optional query parameters

        Returns:
            The decoded body, or None for an empty body

        Raises:
            ResourceNotFoundException: on HTTP 404
            ResourceConflictException: on HTTP 409
            TransportException: on any other error status or a connection failure
            SerializationException: when the body is not valid JSON
        """
        assert self.session, "Client session not initialized. Use 'async with' context."
        url = self.url(path)
        kwargs = {}
        if json_body is not None:
            kwargs["json"] = json_body
        if params:
            kwargs["params"] = params
        logger.debug(f"{method} {url}")
        try:
            response = await self.session.request(method, url, **kwargs)
        except httpx.TransportError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportException(f"Service unavailable: {e}", url=url) from e

        self._raise_for_status(response, url)

        if not response.content:
            return None
        try:
            data = response.json()
        except ValueError as e:
            raise SerializationException("Malformed response body", response.status_code, url, e) from e
        return data

    @staticmethod
    def _raise_for_status(response, url: str) -> None:
        status = response.status_code
        if status < 400:
            return
        message = response.text or f"HTTP {status}"
        logger.error(f"Request to {url} failed with status {status}: {message}")
        if status == 404:
            raise ResourceNotFoundException(message, status, url)
        if status == 409:
            raise ResourceConflictException(message, status, url)
        raise TransportException(message, status, url)

    def decode(self, model: Type[ModelT], data: Any, path: str) -> ModelT:
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise SerializationException(f"Unexpected {model.__name__} payload", url=self.url(path), cause=e) from e

    async def create_tenant(self, name: str) -> "Tenant":
        """
        Create a tenant and return its handle

        Raises:
            ResourceConflictException: if the tenant already exists
        """
        await self.request("POST", "/tenants", json_body={"name": name})
        return await self.get_tenant(name)

    async def get_tenant(self, name: str) -> "Tenant":
        """
        Fetch an existing tenant

        Raises:
            ResourceNotFoundException: if no tenant has this name
        """
        path = f"/tenants/{_segment(name)}"
        data = await self.request("GET", path)
        return Tenant(self, self.decode(TenantModel, data, path))


class Tenant:
    """Handle to a tenant; owns databases"""

    def __init__(self, client: VecshellRestAPIClient, model: TenantModel):
        self.client = client
        self.model = model

    @property
    def name(self) -> str:
        return self.model.name

    def _path(self, suffix: str = "") -> str:
        return f"/tenants/{_segment(self.name)}/databases{suffix}"

    async def create_database(self, name: str) -> "Database":
        await self.client.request("POST", self._path(), json_body={"name": name})
        return await self.get_database(name)

    async def get_database(self, name: str) -> "Database":
        path = self._path(f"/{_segment(name)}")
        data = await self.client.request("GET", path)
        return Database(self, self.client.decode(DatabaseModel, data, path))

    async def delete_database(self, name: str) -> None:
        await self.client.request("DELETE", self._path(f"/{_segment(name)}"))

    async def list_databases(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List["Database"]:
        path = self._path()
        data = await self.client.request("GET", path, params=_paging_params(limit, offset))
        return [Database(self, self.client.decode(DatabaseModel, item, path)) for item in data or []]

    def __repr__(self):
        return f"<Tenant name={self.name}>"


class Database:
    """Handle to a database inside a tenant; owns collections"""

    def __init__(self, tenant: Tenant, model: DatabaseModel):
        self.tenant = tenant
        self.client = tenant.client
        self.model = model

    @property
    def name(self) -> str:
        return self.model.name

    def _path(self, suffix: str = "") -> str:
        return f"/tenants/{_segment(self.tenant.name)}/databases/{_segment(self.name)}/collections{suffix}"

    async def create_collection(self, payload: CreateCollectionPayload) -> "Collection":
        path = self._path()
        data = await self.client.request("POST", path, json_body=payload.to_request_body())
        return Collection(self, self.client.decode(CollectionModel, data, path))

    async def get_collection(self, name: str) -> "Collection":
        path = self._path(f"/{_segment(name)}")
        data = await self.client.request("GET", path)
        return Collection(self, self.client.decode(CollectionModel, data, path))

    async def delete_collection(self, name: str) -> None:
        await self.client.request("DELETE", self._path(f"/{_segment(name)}"))

    async def list_collections(self, limit: Optional[int] = None, offset: Optional[int] = None) -> List["Collection"]:
        path = self._path()
        data = await self.client.request("GET", path, params=_paging_params(limit, offset))
        return [Collection(self, self.client.decode(CollectionModel, item, path)) for item in data or []]

    def __repr__(self):
        return f"<Database name={self.name} tenant={self.tenant.name}>"


class Collection:
    """Handle to a collection; reads go through its server-assigned id"""

    def __init__(self, database: Database, model: CollectionModel):
        self.database = database
        self.client = database.client
        self.model = model

    @property
    def id(self) -> str:
        return self.model.id

    @property
    def name(self) -> str:
        return self.model.name

    def _path(self, suffix: str) -> str:
        return self.database._path(f"/{_segment(self.id)}{suffix}")

    async def count(self) -> int:
        path = self._path("/count")
        data = await self.client.request("GET", path)
        if isinstance(data, bool) or not isinstance(data, int):
            raise SerializationException(f"Expected an integer count, got {data!r}", url=self.client.url(path))
        return data

    async def get(self, payload: GetRequestPayload) -> GetResponse:
        path = self._path("/get")
        data = await self.client.request("POST", path, json_body=payload.to_request_body())
        return self.client.decode(GetResponse, data, path)

    def __repr__(self):
        return f"<Collection id={self.id} name={self.name}>"
