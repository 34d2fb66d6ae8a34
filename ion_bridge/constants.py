from __future__ import annotations

from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent

DEFAULT_SERVER_URL = "https://api.cesium.com"
ENDPOINT_PATH = "/v1/assets/{asset_id}/endpoint"
ACCESS_TOKEN_PARAM = "access_token"

REQUEST_TIMEOUT_SECONDS = 30.0
