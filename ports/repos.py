from __future__ import annotations

from typing import Any, Dict, Optional, Protocol, Sequence

from models.driver_record import DriverRecord


class DriversRepoPort(Protocol):
    def upsert_driver(self, record: DriverRecord, updated_on: str) -> None:
        ...

    def get_driver(self, driver_id: str) -> Optional[Dict[str, Any]]:
        ...


class DriverWriterPort(Protocol):
    def upsert_all(self, records: Sequence[DriverRecord], synced_at: Optional[str] = None) -> int:
        ...
