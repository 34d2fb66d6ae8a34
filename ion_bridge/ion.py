"""Resolve Cesium ion asset ids into resources and imagery providers.

Every resolution follows the same pipeline:

1. build the authenticated endpoint request for the asset id
   (``GET {server_url}/v1/assets/{asset_id}/endpoint[?access_token=...]``);
2. fetch the endpoint descriptor, the only await in the pipeline;
3. branch on the descriptor and construct the result synchronously.

Usage:
    import ion_bridge

    ion_bridge.defaults.default_access_token = "..."
    resource = await ion_bridge.create_resource(124624234)
    provider = await ion_bridge.create_imagery_provider(2347923)
"""

from __future__ import annotations

from typing import Any, Mapping

import structlog

from . import endpoint as endpoint_types
from .config_store import IonConfig, defaults
from .constants import ACCESS_TOKEN_PARAM, ENDPOINT_PATH
from .endpoint import EndpointDescriptor
from .errors import InvalidArgumentError, ParseError, UnsupportedAssetError, WrongAssetTypeError
from .imagery_base import ImageryProvider
from .imagery_providers import create_tile_map_service_imagery_provider
from .imagery_router import IMAGERY_PROVIDER_FACTORIES, ImageryProviderFactory, get_imagery_provider
from .resource import EndpointFetcher, IonResource, Resource, fetch_endpoint_json

logger = structlog.get_logger(__name__)


class IonClient:
    """Endpoint lookup and asset dispatch bound to one configuration.

    ``config`` is read at call time, never written. ``fetcher`` performs the
    endpoint fetch and can be replaced with a stub.
    """

    def __init__(
        self,
        config: IonConfig | None = None,
        fetcher: EndpointFetcher | None = None,
        imagery_factories: Mapping[str, ImageryProviderFactory] = IMAGERY_PROVIDER_FACTORIES,
    ) -> None:
        self.config = config if config is not None else defaults
        self.fetcher = fetcher or fetch_endpoint_json
        self.imagery_factories = imagery_factories

    def build_endpoint_request(
        self,
        asset_id: Any = None,
        *,
        access_token: str | None = None,
        server_url: str | None = None,
    ) -> Resource:
        if asset_id is None:
            raise InvalidArgumentError("asset_id is required.")

        if server_url is None:
            server_url = self.config.default_server_url
        if access_token is None:
            access_token = self.config.default_access_token

        url = server_url.rstrip("/") + ENDPOINT_PATH.format(asset_id=asset_id)
        query_parameters: dict[str, str] = {}
        if access_token is not None:
            query_parameters[ACCESS_TOKEN_PARAM] = access_token

        logger.debug(
            "ion_endpoint_request_built",
            asset_id=asset_id,
            url=url,
            authenticated=access_token is not None,
        )
        return Resource(url=url, query_parameters=query_parameters)

    async def fetch_endpoint(self, request: Resource) -> EndpointDescriptor:
        payload = await self.fetcher(request)
        return EndpointDescriptor.from_dict(payload)

    async def create_resource(
        self,
        asset_id: Any = None,
        *,
        access_token: str | None = None,
        server_url: str | None = None,
    ) -> Resource:
        request = self.build_endpoint_request(asset_id, access_token=access_token, server_url=server_url)
        endpoint = await self.fetch_endpoint(request)

        external_type = endpoint.external_type
        if external_type is None:
            resource = IonResource.create(endpoint, request)
            logger.info("ion_resource_resolved", asset_id=asset_id, asset_type=endpoint.type, url=resource.url)
            return resource

        # 3D Tiles and STK Terrain Server external assets can still be represented
        # as a plain resource, just not an IonResource. External imagery has
        # configuration a resource cannot carry, whatever its external type.
        if (
            endpoint.type != endpoint_types.IMAGERY
            and external_type in endpoint_types.RESOURCE_EXTERNAL_TYPES
        ):
            url = endpoint.options.get("url")
            if not url:
                raise ParseError(f"Endpoint for asset {asset_id} ({external_type}) is missing options.url")
            logger.info("ion_external_resource_resolved", asset_id=asset_id, external_type=external_type)
            return Resource(url=str(url))

        raise UnsupportedAssetError(external_type)

    async def create_imagery_provider(
        self,
        asset_id: Any = None,
        *,
        access_token: str | None = None,
        server_url: str | None = None,
    ) -> ImageryProvider:
        request = self.build_endpoint_request(asset_id, access_token=access_token, server_url=server_url)
        endpoint = await self.fetch_endpoint(request)

        if endpoint.type != endpoint_types.IMAGERY:
            raise WrongAssetTypeError(asset_id, endpoint.type)

        external_type = endpoint.external_type
        if external_type is None:
            provider = create_tile_map_service_imagery_provider({"url": IonResource.create(endpoint, request)})
        else:
            provider = get_imagery_provider(external_type, endpoint.options, self.imagery_factories)

        logger.info(
            "ion_imagery_provider_resolved",
            asset_id=asset_id,
            external_type=external_type,
            provider=provider.name,
        )
        return provider


def build_endpoint_request(
    asset_id: Any = None,
    *,
    access_token: str | None = None,
    server_url: str | None = None,
) -> Resource:
    return IonClient().build_endpoint_request(asset_id, access_token=access_token, server_url=server_url)


async def create_resource(
    asset_id: Any = None,
    *,
    access_token: str | None = None,
    server_url: str | None = None,
) -> Resource:
    """Resolve an ion asset into a :class:`Resource` using the process-wide defaults.

    External imagery assets are rejected with ``UnsupportedAssetError``; use
    :func:`create_imagery_provider` for those.
    """
    return await IonClient().create_resource(asset_id, access_token=access_token, server_url=server_url)


async def create_imagery_provider(
    asset_id: Any = None,
    *,
    access_token: str | None = None,
    server_url: str | None = None,
) -> ImageryProvider:
    """Resolve an ion imagery asset into a configured imagery provider.

    Unlike :func:`create_resource`, external imagery assets are supported.
    """
    return await IonClient().create_imagery_provider(
        asset_id, access_token=access_token, server_url=server_url
    )
