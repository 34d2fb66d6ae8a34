from __future__ import annotations


class IonError(RuntimeError):
    """Base class for every failure raised while resolving an ion asset."""


class InvalidArgumentError(IonError, ValueError):
    pass


class NetworkError(IonError):
    def __init__(self, message: str, *, url: str = "", status_code: int | None = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class ParseError(IonError):
    def __init__(self, message: str, *, url: str = "") -> None:
        super().__init__(message)
        self.url = url


class UnsupportedAssetError(IonError):
    def __init__(self, external_type: str) -> None:
        super().__init__(
            "create_resource does not support external imagery assets "
            f"(externalType={external_type}); use create_imagery_provider instead."
        )
        self.external_type = external_type


class WrongAssetTypeError(IonError):
    def __init__(self, asset_id: object, asset_type: str | None) -> None:
        super().__init__(f"Cesium ion asset {asset_id} is not an imagery asset.")
        self.asset_id = asset_id
        self.asset_type = asset_type


class UnrecognizedExternalTypeError(IonError):
    def __init__(self, external_type: str) -> None:
        super().__init__(f"Unrecognized Cesium ion imagery type: {external_type}")
        self.external_type = external_type
