from __future__ import annotations

from typing import Any

import pytest

from ion_bridge import IonClient, IonConfig


class StubFetcher:
    """Deterministic endpoint fetcher that records every request it is given."""

    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload
        self.requests: list[Any] = []

    async def __call__(self, request: Any) -> dict[str, Any]:
        self.requests.append(request)
        return self.payload


@pytest.fixture
def make_client():
    def factory(payload: dict[str, Any], config: IonConfig | None = None, **kwargs: Any):
        fetcher = StubFetcher(payload)
        if config is None:
            config = IonConfig(default_access_token="default-token", default_server_url="https://ion.test")
        return IonClient(config=config, fetcher=fetcher, **kwargs), fetcher

    return factory
