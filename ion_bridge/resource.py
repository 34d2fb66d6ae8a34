from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Mapping
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import httpx
import structlog

from .constants import ACCESS_TOKEN_PARAM, REQUEST_TIMEOUT_SECONDS
from .endpoint import EndpointDescriptor
from .errors import InvalidArgumentError, NetworkError, ParseError

logger = structlog.get_logger(__name__)

EndpointFetcher = Callable[["Resource"], Awaitable[dict[str, Any]]]


def _read_json(response: httpx.Response, url: str) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as error:
        raise ParseError(f"Invalid JSON response from {url}", url=url) from error
    if not isinstance(payload, dict):
        raise ParseError(f"Expected a JSON object from {url}", url=url)
    return payload


@dataclass(frozen=True)
class Resource:
    """A url plus the query parameters needed to fetch it.

    Instances are never mutated; the derive/replace helpers return new objects.
    ``query_parameters`` is copied into a read-only mapping on construction, so
    resources are hashable and can be used as cache keys.
    """

    url: str
    query_parameters: Mapping[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "query_parameters", MappingProxyType(dict(self.query_parameters)))

    def __hash__(self) -> int:
        return hash((self.url, frozenset((key, str(value)) for key, value in self.query_parameters.items())))

    @property
    def href(self) -> str:
        if not self.query_parameters:
            return self.url
        parts = urlsplit(self.url)
        # Repeated keys already on the url survive unless a parameter replaces them.
        overridden = {str(key) for key in self.query_parameters}
        pairs = [
            (key, value)
            for key, value in parse_qsl(parts.query, keep_blank_values=True)
            if key not in overridden
        ]
        pairs.extend((key, str(value)) for key, value in self.query_parameters.items())
        return urlunsplit(parts._replace(query=urlencode(pairs)))

    def get_derived_resource(
        self,
        path: str = "",
        query_parameters: Mapping[str, Any] | None = None,
    ) -> "Resource":
        url = self.url
        if path:
            url = url.rstrip("/") + "/" + path.lstrip("/")
        merged = {**self.query_parameters, **(query_parameters or {})}
        return dataclasses.replace(self, url=url, query_parameters=merged)

    async def fetch_json(self, client: httpx.AsyncClient | None = None) -> dict[str, Any]:
        # Token-bearing href is never put in messages or logs; only the bare url.
        try:
            if client is None:
                async with httpx.AsyncClient(timeout=REQUEST_TIMEOUT_SECONDS) as owned:
                    response = await owned.get(self.href)
            else:
                response = await client.get(self.href)
            response.raise_for_status()
        except httpx.HTTPStatusError as error:
            status_code = error.response.status_code
            raise NetworkError(
                f"Request to {self.url} failed with status {status_code}",
                url=self.url,
                status_code=status_code,
            ) from error
        except httpx.HTTPError as error:
            raise NetworkError(f"Request to {self.url} failed: {error}", url=self.url) from error
        return _read_json(response, self.url)


async def fetch_endpoint_json(request: Resource) -> dict[str, Any]:
    return await request.fetch_json()


@dataclass(frozen=True)
class IonResource(Resource):
    """Resource for an asset hosted natively by Cesium ion."""

    __hash__ = Resource.__hash__

    endpoint: EndpointDescriptor | None = None
    endpoint_request: Resource | None = None

    @classmethod
    def create(cls, endpoint: EndpointDescriptor, endpoint_request: Resource) -> "IonResource":
        query_parameters = dict(endpoint_request.query_parameters)
        if endpoint.access_token is not None:
            query_parameters[ACCESS_TOKEN_PARAM] = endpoint.access_token
        return cls(
            url=endpoint.url or endpoint_request.url,
            query_parameters=query_parameters,
            endpoint=endpoint,
            endpoint_request=endpoint_request,
        )

    async def refresh(self, fetcher: EndpointFetcher | None = None) -> "IonResource":
        if self.endpoint_request is None:
            raise InvalidArgumentError("IonResource has no endpoint request to refresh from")
        fetch = fetcher or fetch_endpoint_json
        endpoint = EndpointDescriptor.from_dict(await fetch(self.endpoint_request))

        query_parameters = dict(self.query_parameters)
        if endpoint.access_token is not None:
            query_parameters[ACCESS_TOKEN_PARAM] = endpoint.access_token

        # Derived resources keep their own path; the root follows the new endpoint url.
        url = self.url
        if self.endpoint is None or self.url == (self.endpoint.url or self.endpoint_request.url):
            url = endpoint.url or self.endpoint_request.url

        refreshed = dataclasses.replace(
            self,
            url=url,
            query_parameters=query_parameters,
            endpoint=endpoint,
        )
        logger.info("ion_resource_refreshed", url=refreshed.url)
        return refreshed

    async def fetch_json(self, client: httpx.AsyncClient | None = None) -> dict[str, Any]:
        try:
            return await super().fetch_json(client)
        except NetworkError as error:
            if error.status_code != 401 or self.endpoint_request is None:
                raise
            logger.info("ion_asset_token_expired", url=self.url)

        async def fetch(request: Resource) -> dict[str, Any]:
            return await request.fetch_json(client)

        refreshed = await self.refresh(fetch)
        return await Resource.fetch_json(refreshed, client)
