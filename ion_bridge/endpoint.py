from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .errors import ParseError

IMAGERY = "IMAGERY"

# External assets that can still be represented as a bare url resource.
RESOURCE_EXTERNAL_TYPES = frozenset({"3DTILES", "STK_TERRAIN_SERVER"})

ARCGIS_MAPSERVER = "ARCGIS_MAPSERVER"
BING = "BING"
GOOGLE_EARTH = "GOOGLE_EARTH"
MAPBOX = "MAPBOX"
SINGLE_TILE = "SINGLE_TILE"
TMS = "TMS"
URL_TEMPLATE = "URL_TEMPLATE"
WMS = "WMS"
WMTS = "WMTS"


@dataclass(frozen=True)
class EndpointDescriptor:
    type: str
    external_type: str | None = None
    options: dict[str, Any] = field(default_factory=dict)
    url: str | None = None
    access_token: str | None = None
    attributions: list[Any] = field(default_factory=list)
    raw: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.type}
        if self.external_type is not None:
            payload["externalType"] = self.external_type
            payload["options"] = self.options
        if self.url is not None:
            payload["url"] = self.url
        if self.access_token is not None:
            payload["accessToken"] = self.access_token
        if self.attributions:
            payload["attributions"] = self.attributions
        return payload

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> "EndpointDescriptor":
        options = raw.get("options")
        attributions = raw.get("attributions")
        external_type = raw.get("externalType")
        url = raw.get("url")
        access_token = raw.get("accessToken")
        if external_type is not None and "options" in raw and not isinstance(options, dict):
            raise ParseError(f"Endpoint options for {external_type} must be a JSON object")
        return cls(
            type=str(raw.get("type", "")),
            external_type=str(external_type) if external_type is not None else None,
            # Provider options are handed to the provider untouched.
            options=options if isinstance(options, dict) else {},
            url=str(url) if url is not None else None,
            access_token=str(access_token) if access_token is not None else None,
            attributions=attributions if isinstance(attributions, list) else [],
            raw=raw,
        )
