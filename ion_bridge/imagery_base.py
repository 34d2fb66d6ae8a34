from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Mapping

from .resource import Resource


class ImageryProvider(ABC):
    """Abstract base class for imagery providers.

    Providers are built from a provider-specific options mapping. The mapping
    is stored as given and read lazily; it is never copied or validated here.
    Subclasses implement ``name`` and ``tile_url``.
    """

    default_url: str | None = None

    def __init__(self, options: Mapping[str, Any]) -> None:
        self.options = options

    @property
    @abstractmethod
    def name(self) -> str:
        raise NotImplementedError

    @abstractmethod
    def tile_url(self, x: int, y: int, level: int) -> str:
        raise NotImplementedError

    def option(self, key: str, default: Any = None) -> Any:
        return self.options.get(key, default)

    @property
    def resource(self) -> Resource:
        url = self.options.get("url", self.default_url)
        if isinstance(url, Resource):
            return url
        if not url:
            raise ValueError(f"{self.name} imagery provider requires options.url")
        return Resource(url=str(url))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(url={self.options.get('url', self.default_url)!r})"
