from __future__ import annotations

import logging

LOGGER = logging.getLogger("monzo.api")
APP_VERSION = "0.1.0"

AUTH_URL = "https://auth.monzo.com/"
API_URL = "https://api.monzo.com/"
TOKEN_PATH = "oauth2/token"

JSON_CONTENT_TYPE = "application/json"
FORM_CONTENT_TYPE = "application/x-www-form-urlencoded; charset=utf-8"
REQUEST_METHODS = {"GET", "POST"}
