"""Concrete imagery providers for the external imagery families served by ion.

Each provider turns its options into tile urls for its protocol. Options are
read as the ion service sends them (camelCase keys).
"""

from __future__ import annotations

from typing import Any, Mapping

from .imagery_base import ImageryProvider
from .resource import Resource

TILE_SIZE = 256


class ArcGisMapServerImageryProvider(ImageryProvider):
    @property
    def name(self) -> str:
        return "arcgis_mapserver"

    def tile_url(self, x: int, y: int, level: int) -> str:
        token = self.option("token")
        derived = self.resource.get_derived_resource(
            f"tile/{level}/{y}/{x}",
            {"token": token} if token else None,
        )
        return derived.href


class BingMapsImageryProvider(ImageryProvider):
    """Bing Maps tiles addressed by quadkey."""

    default_url = "https://dev.virtualearth.net"

    _STYLE_PREFIXES = {
        "Aerial": "a",
        "AerialWithLabels": "h",
        "AerialWithLabelsOnDemand": "h",
        "Road": "r",
        "RoadOnDemand": "r",
    }

    @property
    def name(self) -> str:
        return "bing"

    @property
    def map_style(self) -> str:
        return str(self.option("mapStyle", "Aerial"))

    @property
    def metadata_url(self) -> str:
        derived = self.resource.get_derived_resource(
            f"REST/v1/Imagery/Metadata/{self.map_style}",
            {"incl": "ImageryProviders", "key": self.option("key", ""), "uriScheme": "https"},
        )
        return derived.href

    @staticmethod
    def tile_xy_to_quad_key(x: int, y: int, level: int) -> str:
        # Bing has no single root tile, so level 0 already has one digit.
        quad_key = ""
        for i in range(level, -1, -1):
            digit = 0
            mask = 1 << i
            if (x & mask) != 0:
                digit += 1
            if (y & mask) != 0:
                digit += 2
            quad_key += str(digit)
        return quad_key

    def tile_url(self, x: int, y: int, level: int) -> str:
        quad_key = self.tile_xy_to_quad_key(x, y, level)
        prefix = self._STYLE_PREFIXES.get(self.map_style, "a")
        subdomain = (x + y) % 4
        return (
            f"https://ecn.t{subdomain}.tiles.virtualearth.net/tiles/"
            f"{prefix}{quad_key}.jpeg?g=14000"
        )


class GoogleEarthEnterpriseMapsProvider(ImageryProvider):
    @property
    def name(self) -> str:
        return "google_earth"

    def tile_url(self, x: int, y: int, level: int) -> str:
        channel = self.option("channel")
        if channel is None:
            raise ValueError("google_earth imagery provider requires options.channel")
        path = str(self.option("path", "/default_map"))
        derived = self.resource.get_derived_resource(
            f"{path.strip('/')}/query",
            {
                "request": "ImageryMaps",
                "channel": channel,
                "version": self.option("version", 1),
                "x": x,
                "y": y,
                "z": level + 1,
            },
        )
        return derived.href


class MapboxImageryProvider(ImageryProvider):
    default_url = "https://api.mapbox.com/v4/"

    @property
    def name(self) -> str:
        return "mapbox"

    def tile_url(self, x: int, y: int, level: int) -> str:
        map_id = self.option("mapId")
        if not map_id:
            raise ValueError("mapbox imagery provider requires options.mapId")
        file_format = str(self.option("format", "png")).lstrip(".")
        access_token = self.option("accessToken")
        derived = self.resource.get_derived_resource(
            f"{map_id}/{level}/{x}/{y}.{file_format}",
            {"access_token": access_token} if access_token else None,
        )
        return derived.href


class SingleTileImageryProvider(ImageryProvider):
    @property
    def name(self) -> str:
        return "single_tile"

    def tile_url(self, x: int, y: int, level: int) -> str:
        if (x, y, level) != (0, 0, 0):
            raise ValueError(f"single_tile imagery has only tile 0/0/0, got {x}/{y}/{level}")
        return self.resource.href


class TileMapServiceImageryProvider(ImageryProvider):
    @property
    def name(self) -> str:
        return "tms"

    def tile_url(self, x: int, y: int, level: int) -> str:
        extension = str(self.option("fileExtension", "png")).lstrip(".")
        reverse_y = (1 << level) - 1 - y
        return self.resource.get_derived_resource(f"{level}/{x}/{reverse_y}.{extension}").href


def create_tile_map_service_imagery_provider(options: Mapping[str, Any]) -> TileMapServiceImageryProvider:
    return TileMapServiceImageryProvider(options)


class UrlTemplateImageryProvider(ImageryProvider):
    @property
    def name(self) -> str:
        return "url_template"

    def tile_url(self, x: int, y: int, level: int) -> str:
        url = self.option("url")
        template = url.href if isinstance(url, Resource) else str(url or "")
        if not template:
            raise ValueError("url_template imagery provider requires options.url")

        subdomains = self.option("subdomains", "abc")
        if isinstance(subdomains, str):
            subdomains = list(subdomains)
        subdomain = subdomains[(x + y + level) % len(subdomains)] if subdomains else ""

        count = 1 << level
        replacements = {
            "{x}": str(x),
            "{y}": str(y),
            "{z}": str(level),
            "{s}": str(subdomain),
            "{reverseX}": str(count - 1 - x),
            "{reverseY}": str(count - 1 - y),
        }
        for tag, value in replacements.items():
            template = template.replace(tag, value)
        return template


class WebMapServiceImageryProvider(ImageryProvider):
    """WMS GetMap tiles on a geographic scheme with two root tiles."""

    @property
    def name(self) -> str:
        return "wms"

    @staticmethod
    def tile_bbox(x: int, y: int, level: int) -> tuple[float, float, float, float]:
        size = 180.0 / (1 << level)
        west = -180.0 + x * size
        north = 90.0 - y * size
        return west, north - size, west + size, north

    def tile_url(self, x: int, y: int, level: int) -> str:
        west, south, east, north = self.tile_bbox(x, y, level)
        params: dict[str, Any] = {
            "service": "WMS",
            "version": "1.1.1",
            "request": "GetMap",
            "styles": "",
            "format": "image/jpeg",
            "layers": self.option("layers", ""),
            "srs": "EPSG:4326",
            "bbox": f"{west},{south},{east},{north}",
            "width": TILE_SIZE,
            "height": TILE_SIZE,
        }
        extra = self.option("parameters")
        if isinstance(extra, dict):
            params.update({str(key).lower(): value for key, value in extra.items()})
        return self.resource.get_derived_resource(query_parameters=params).href


class WebMapTileServiceImageryProvider(ImageryProvider):
    @property
    def name(self) -> str:
        return "wmts"

    def _tile_matrix(self, level: int) -> str:
        labels = self.option("tileMatrixLabels")
        if isinstance(labels, list) and level < len(labels):
            return str(labels[level])
        return str(level)

    def tile_url(self, x: int, y: int, level: int) -> str:
        tile_matrix = self._tile_matrix(level)
        style = str(self.option("style", "default"))
        tile_matrix_set = str(self.option("tileMatrixSetID", ""))
        resource = self.resource

        if "{" in resource.url:
            # RESTful encoding
            url = resource.url
            for tag, value in (
                ("{TileMatrixSet}", tile_matrix_set),
                ("{TileMatrix}", tile_matrix),
                ("{TileRow}", str(y)),
                ("{TileCol}", str(x)),
                ("{Style}", style),
                ("{style}", style),
            ):
                url = url.replace(tag, value)
            return Resource(url=url, query_parameters=resource.query_parameters).href

        params = {
            "service": "WMTS",
            "version": "1.0.0",
            "request": "GetTile",
            "tilematrix": tile_matrix,
            "layer": self.option("layer", ""),
            "style": style,
            "tilerow": y,
            "tilecol": x,
            "tilematrixset": tile_matrix_set,
            "format": self.option("format", "image/jpeg"),
        }
        return resource.get_derived_resource(query_parameters=params).href
