from __future__ import annotations

from .config_store import IonConfig, defaults, load_defaults, load_effective_config
from .endpoint import EndpointDescriptor
from .errors import (
    InvalidArgumentError,
    IonError,
    NetworkError,
    ParseError,
    UnrecognizedExternalTypeError,
    UnsupportedAssetError,
    WrongAssetTypeError,
)
from .imagery_base import ImageryProvider
from .imagery_router import IMAGERY_PROVIDER_FACTORIES
from .ion import IonClient, build_endpoint_request, create_imagery_provider, create_resource
from .resource import IonResource, Resource

__version__ = "0.1.0"

__all__ = [
    "IMAGERY_PROVIDER_FACTORIES",
    "EndpointDescriptor",
    "ImageryProvider",
    "InvalidArgumentError",
    "IonClient",
    "IonConfig",
    "IonError",
    "IonResource",
    "NetworkError",
    "ParseError",
    "Resource",
    "UnrecognizedExternalTypeError",
    "UnsupportedAssetError",
    "WrongAssetTypeError",
    "build_endpoint_request",
    "create_imagery_provider",
    "create_resource",
    "defaults",
    "load_defaults",
    "load_effective_config",
]
