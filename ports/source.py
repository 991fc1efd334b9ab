from __future__ import annotations

from typing import Any, Dict, List, Protocol


class TokenProviderPort(Protocol):
    def acquire(self) -> str:
        ...


class DriverSourcePort(Protocol):
    def fetch_all(self, token: str) -> List[Dict[str, Any]]:
        ...


class DispatcherSourcePort(Protocol):
    def fetch_assignments(self, token: str) -> Dict[str, str]:
        ...
