"""
Bearer token acquisition from the Ditat token authority.
"""
from __future__ import annotations

import logging
from typing import Any, Optional

import requests

from config.settings import Settings, get_settings
from errors import AuthError


logger = logging.getLogger(__name__)


def _extract_token(response: Any) -> Optional[str]:
    """The authority answers with the bare token, usually as a JSON string."""
    try:
        payload = response.json()
    except ValueError:
        payload = response.text
    if isinstance(payload, dict):
        payload = payload.get("token") or payload.get("data")
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return None


class TokenProvider:
    """Obtains a short-lived Ditat token. No caching and no retry."""

    def __init__(self, settings: Optional[Settings] = None, session: Optional[requests.Session] = None):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()

    def _headers(self) -> dict[str, str]:
        return {
            "Ditat-Application-Role": self.settings.application_role,
            "ditat-account-id": self.settings.account_id,
            "Authorization": self.settings.authorization,
        }

    def acquire(self) -> str:
        logger.info("Requesting API token", extra={"step": "token"})
        try:
            response = self.session.post(
                self.settings.token_url,
                json={},
                headers=self._headers(),
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise AuthError(f"Token request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise AuthError(f"Token request failed with status {response.status_code}")

        token = _extract_token(response)
        if not token:
            raise AuthError("Token authority returned an empty token")
        logger.info("API token acquired", extra={"step": "token", "status": "ok"})
        return token
