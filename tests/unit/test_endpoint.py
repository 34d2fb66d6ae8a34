"""
Unit tests for EndpointDescriptor
"""

import pytest

from ion_bridge import ParseError
from ion_bridge.endpoint import EndpointDescriptor


class TestEndpointDescriptor:
    """Test cases for EndpointDescriptor"""

    def test_from_dict_reads_service_keys(self):
        options = {"url": "https://tiles.test/{z}/{x}/{y}.png", "credit": "Tiles"}
        raw = {
            "type": "IMAGERY",
            "externalType": "URL_TEMPLATE",
            "options": options,
            "attributions": [{"html": "<span>Tiles</span>", "collapsible": False}],
        }
        endpoint = EndpointDescriptor.from_dict(raw)

        assert endpoint.type == "IMAGERY"
        assert endpoint.external_type == "URL_TEMPLATE"
        assert endpoint.options is options
        assert endpoint.attributions == raw["attributions"]
        assert endpoint.raw is raw
        assert endpoint.url is None
        assert endpoint.access_token is None

    def test_native_asset(self):
        endpoint = EndpointDescriptor.from_dict(
            {"type": "3DTILES", "url": "https://assets.ion.test/1/", "accessToken": "t"}
        )

        assert endpoint.external_type is None
        assert endpoint.options == {}
        assert endpoint.to_dict() == {"type": "3DTILES", "url": "https://assets.ion.test/1/", "accessToken": "t"}

    @pytest.mark.parametrize("options", ["nope", None, ["url"], 3])
    def test_non_object_options_are_rejected(self, options):
        """External options that are not a JSON object are a malformed response"""
        with pytest.raises(ParseError, match="WMS"):
            EndpointDescriptor.from_dict({"type": "IMAGERY", "externalType": "WMS", "options": options})

    def test_missing_options_default_to_empty(self):
        endpoint = EndpointDescriptor.from_dict({"type": "IMAGERY", "externalType": "WMS"})

        assert endpoint.options == {}
        assert endpoint.to_dict() == {"type": "IMAGERY", "externalType": "WMS", "options": {}}
