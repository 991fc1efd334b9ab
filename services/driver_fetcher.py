"""
Full driver roster retrieval.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from config.settings import Settings, get_settings
from errors import FetchError


logger = logging.getLogger(__name__)

# filterType 5 with an empty value matches every driverId.
ALL_DRIVERS_FILTER: Dict[str, Any] = {
    "filterItems": [
        {
            "columnName": "driverId",
            "filterType": 5,
            "filterFromValue": "",
        },
    ],
}


def ditat_auth_headers(token: str) -> Dict[str, str]:
    return {"Authorization": f"Ditat-Token {token}"}


class DriverFetcher:
    """Retrieves the whole roster in a single request (no pagination)."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    def fetch_all(self, token: str) -> List[Dict[str, Any]]:
        logger.info("Fetching driver roster", extra={"step": "fetch_drivers"})
        try:
            response = self.session.post(
                self.settings.drivers_url,
                json=ALL_DRIVERS_FILTER,
                headers=ditat_auth_headers(token),
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Driver roster request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise FetchError(f"Driver roster request failed with status {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise FetchError(f"Driver roster response is not JSON: {e}") from e

        envelope = body.get("data") if isinstance(body, dict) else None
        drivers = envelope.get("data") if isinstance(envelope, dict) else None
        if not drivers:
            logger.info("Driver roster is empty", extra={"step": "fetch_drivers", "status": "empty"})
            return []
        if not isinstance(drivers, list):
            raise FetchError(f"Driver roster has unexpected shape: {type(drivers).__name__}")

        logger.info(f"Fetched {len(drivers)} drivers", extra={"step": "fetch_drivers", "status": "ok"})
        return drivers
