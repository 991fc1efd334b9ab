"""
Dispatcher assignment retrieval.

Each configured dispatcher owns a list of driver records on Ditat. The lists
are fetched one dispatcher at a time, in roster order, and folded into a
single driver id -> dispatcher name mapping.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from config.settings import Settings, get_settings
from errors import FetchError
from services.driver_fetcher import ditat_auth_headers


logger = logging.getLogger(__name__)


def merge_assignments(assignments: Dict[str, str], driver_ids, dispatcher_name: str) -> Dict[str, str]:
    """Assign every id to ``dispatcher_name``, overwriting earlier dispatchers.

    Callers fold dispatchers in roster order, so the last dispatcher listing a
    driver wins. This is the intended precedence, not a conflict.
    """
    for driver_id in driver_ids:
        previous = assignments.get(driver_id)
        if previous is not None and previous != dispatcher_name:
            logger.debug(f"Driver {driver_id} reassigned from {previous} to {dispatcher_name}")
        assignments[driver_id] = dispatcher_name
    return assignments


class DispatcherFetcher:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        session: Optional[requests.Session] = None,
        dispatchers: Optional[Mapping[int, str]] = None,
    ):
        self.settings = settings or get_settings()
        self.session = session or requests.Session()
        self.dispatchers: Mapping[int, str] = dispatchers if dispatchers is not None else self.settings.dispatchers

    def dispatcher_url(self, dispatcher_id: int) -> str:
        return f"{self.settings.dispatchers_url}/{dispatcher_id}/item"

    def fetch_driver_ids(self, token: str, dispatcher_id: int) -> list[str]:
        """Return the trimmed driver ids listed under one dispatcher."""
        url = self.dispatcher_url(dispatcher_id)
        try:
            response = self.session.get(
                url,
                headers=ditat_auth_headers(token),
                timeout=self.settings.http_timeout_seconds,
            )
        except requests.exceptions.RequestException as e:
            raise FetchError(f"Dispatcher {dispatcher_id} request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise FetchError(f"Dispatcher {dispatcher_id} request failed with status {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise FetchError(f"Dispatcher {dispatcher_id} response is not JSON: {e}") from e

        entries: Any = body.get("data") if isinstance(body, dict) else None
        if not isinstance(entries, list):
            raise FetchError(f"Dispatcher {dispatcher_id} response has no driver list")

        driver_ids: list[str] = []
        for entry in entries:
            record_id = entry.get("recordId") if isinstance(entry, dict) else None
            if record_id is None or not str(record_id).strip():
                logger.warning(f"Skipping entry without recordId under dispatcher {dispatcher_id}")
                continue
            driver_ids.append(str(record_id).strip())
        return driver_ids

    def fetch_assignments(self, token: str) -> Dict[str, str]:
        logger.info(
            f"Fetching assignments for {len(self.dispatchers)} dispatchers",
            extra={"step": "fetch_dispatchers"},
        )
        assignments: Dict[str, str] = {}
        for dispatcher_id, name in self.dispatchers.items():
            logger.info(f"Retrieving {name}'s drivers from {self.dispatcher_url(dispatcher_id)}")
            driver_ids = self.fetch_driver_ids(token, dispatcher_id)
            merge_assignments(assignments, driver_ids, name)
        logger.info(
            f"Collected {len(assignments)} driver assignments",
            extra={"step": "fetch_dispatchers", "status": "ok"},
        )
        return assignments
