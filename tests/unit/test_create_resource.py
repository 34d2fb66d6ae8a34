"""
Unit tests for resolving ion assets into resources
"""

import asyncio

import pytest

from ion_bridge import (
    InvalidArgumentError,
    IonResource,
    NetworkError,
    ParseError,
    Resource,
    UnsupportedAssetError,
)
from ion_bridge.endpoint import EndpointDescriptor


class TestCreateResource:
    """Test cases for IonClient.create_resource"""

    def test_native_asset_returns_ion_resource(self, make_client):
        """Assets without an external type become IonResources"""
        payload = {
            "type": "3DTILES",
            "url": "https://assets.ion.test/124624234/tileset.json",
            "accessToken": "asset-token",
        }
        client, fetcher = make_client(payload)

        resource = asyncio.run(client.create_resource(124624234))

        request = fetcher.requests[0]
        assert request.url == "https://ion.test/v1/assets/124624234/endpoint"
        assert isinstance(resource, IonResource)
        assert resource == IonResource.create(EndpointDescriptor.from_dict(payload), request)
        assert resource.url == "https://assets.ion.test/124624234/tileset.json"
        assert resource.query_parameters["access_token"] == "asset-token"
        assert resource.endpoint_request is request

    def test_native_asset_without_descriptor_url(self, make_client):
        """Without a descriptor url the resource points at the request url"""
        client, fetcher = make_client({"type": "3DTILES-ish-other"})

        resource = asyncio.run(client.create_resource(124624234))

        assert resource.url == fetcher.requests[0].url
        assert resource.query_parameters == {"access_token": "default-token"}

    @pytest.mark.parametrize("asset_type", ["IMAGERY", "TERRAIN", "3DTILES", "CZML", "GLTF"])
    def test_native_asset_never_unsupported(self, make_client, asset_type):
        """No external type never fails with UnsupportedAssetError"""
        client, _ = make_client({"type": asset_type, "url": "https://assets.ion.test/1/"})

        resource = asyncio.run(client.create_resource(1))

        assert isinstance(resource, IonResource)

    @pytest.mark.parametrize("external_type", ["3DTILES", "STK_TERRAIN_SERVER"])
    def test_url_representable_external_types(self, make_client, external_type):
        """3D Tiles and STK terrain externals become bare resources"""
        payload = {
            "type": "3DTILES" if external_type == "3DTILES" else "TERRAIN",
            "externalType": external_type,
            "options": {"url": "https://external.test/data", "ignored": True},
        }
        client, _ = make_client(payload)

        resource = asyncio.run(client.create_resource(5))

        assert type(resource) is Resource
        assert resource == Resource(url="https://external.test/data")
        assert not resource.query_parameters

    @pytest.mark.parametrize("external_type", ["BING", "WMS", "URL_TEMPLATE", "SOMETHING_NEW"])
    def test_external_imagery_is_unsupported(self, make_client, external_type):
        """Other external types point the caller to create_imagery_provider"""
        payload = {"type": "IMAGERY", "externalType": external_type, "options": {"url": "https://x.test"}}
        client, _ = make_client(payload)

        with pytest.raises(UnsupportedAssetError, match="create_imagery_provider") as excinfo:
            asyncio.run(client.create_resource(2347923))

        assert excinfo.value.external_type == external_type

    def test_imagery_asset_with_3dtiles_external_type(self, make_client):
        """An imagery asset is never reduced to a bare resource"""
        client, _ = make_client({"type": "IMAGERY", "externalType": "3DTILES", "options": {"url": "https://x.test"}})

        with pytest.raises(UnsupportedAssetError):
            asyncio.run(client.create_resource(999))

    def test_url_external_without_url(self, make_client):
        """A url-representable external asset must carry options.url"""
        client, _ = make_client({"type": "TERRAIN", "externalType": "STK_TERRAIN_SERVER", "options": {}})

        with pytest.raises(ParseError, match="options.url"):
            asyncio.run(client.create_resource(8))

    def test_fetch_errors_propagate(self, make_client):
        """Fetcher failures reach the caller untouched"""
        client, _ = make_client({})
        error = NetworkError("boom", url="https://ion.test", status_code=503)

        async def failing(_request):
            raise error

        client.fetcher = failing
        with pytest.raises(NetworkError) as excinfo:
            asyncio.run(client.create_resource(1))

        assert excinfo.value is error

    def test_fetches_exactly_once(self, make_client):
        """One lookup per resolution"""
        client, fetcher = make_client({"type": "3DTILES", "url": "https://assets.ion.test/1/"})

        asyncio.run(client.create_resource(1, access_token="call-token"))

        assert len(fetcher.requests) == 1
        assert fetcher.requests[0].query_parameters == {"access_token": "call-token"}

    def test_omitted_asset_id(self, make_client):
        """Without an asset id nothing is fetched"""
        client, fetcher = make_client({"type": "3DTILES"})

        with pytest.raises(InvalidArgumentError, match="asset_id is required"):
            asyncio.run(client.create_resource())

        assert fetcher.requests == []
