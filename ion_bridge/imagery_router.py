from __future__ import annotations

from types import MappingProxyType
from typing import Any, Callable, Mapping

from . import endpoint
from .errors import UnrecognizedExternalTypeError
from .imagery_base import ImageryProvider
from .imagery_providers import (
    ArcGisMapServerImageryProvider,
    BingMapsImageryProvider,
    GoogleEarthEnterpriseMapsProvider,
    MapboxImageryProvider,
    SingleTileImageryProvider,
    UrlTemplateImageryProvider,
    WebMapServiceImageryProvider,
    WebMapTileServiceImageryProvider,
    create_tile_map_service_imagery_provider,
)

ImageryProviderFactory = Callable[[Mapping[str, Any]], ImageryProvider]


def create_factory(provider_type: type[ImageryProvider]) -> ImageryProviderFactory:
    def factory(options: Mapping[str, Any]) -> ImageryProvider:
        return provider_type(options)

    factory.__name__ = f"create_{provider_type.__name__}"
    return factory


# Unofficial list of external imagery assets supported by Cesium ion.
IMAGERY_PROVIDER_FACTORIES: Mapping[str, ImageryProviderFactory] = MappingProxyType(
    {
        endpoint.ARCGIS_MAPSERVER: create_factory(ArcGisMapServerImageryProvider),
        endpoint.BING: create_factory(BingMapsImageryProvider),
        endpoint.GOOGLE_EARTH: create_factory(GoogleEarthEnterpriseMapsProvider),
        endpoint.MAPBOX: create_factory(MapboxImageryProvider),
        endpoint.SINGLE_TILE: create_factory(SingleTileImageryProvider),
        endpoint.TMS: create_tile_map_service_imagery_provider,
        endpoint.URL_TEMPLATE: create_factory(UrlTemplateImageryProvider),
        endpoint.WMS: create_factory(WebMapServiceImageryProvider),
        endpoint.WMTS: create_factory(WebMapTileServiceImageryProvider),
    }
)


def get_imagery_provider(
    external_type: str,
    options: Mapping[str, Any],
    factories: Mapping[str, ImageryProviderFactory] = IMAGERY_PROVIDER_FACTORIES,
) -> ImageryProvider:
    factory = factories.get(external_type)
    if factory is None:
        raise UnrecognizedExternalTypeError(external_type)
    return factory(options)
