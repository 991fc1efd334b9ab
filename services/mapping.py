from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

from pydantic import ValidationError

from models.driver_record import DriverRecord


logger = logging.getLogger(__name__)

_DRIVER_ID_KEYS = {"driverId", "driver_id"}


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="seconds")


def map_to_driver_record(raw: Dict[str, Any], dispatcher: Optional[str], synced_at: str) -> DriverRecord:
    """Reshape one Ditat driver payload into a DriverRecord.

    Optional fields that fail validation are dropped (stored as NULL) and
    logged; only an unusable driverId raises ValidationError.
    """
    try:
        record = DriverRecord.model_validate(raw)
    except ValidationError as e:
        bad_keys = {str(err["loc"][0]) for err in e.errors() if err.get("loc")}
        if bad_keys & _DRIVER_ID_KEYS:
            raise
        logger.warning(
            f"Driver {raw.get('driverId')}: ignoring unreadable field(s) {', '.join(sorted(bad_keys))}",
            extra={"step": "join", "status": "partial"},
        )
        # Payloads may use either the API key or the field name
        for name, info in DriverRecord.model_fields.items():
            if name in bad_keys or info.alias in bad_keys:
                bad_keys |= {name, info.alias or name}
        record = DriverRecord.model_validate({k: v for k, v in raw.items() if k not in bad_keys})
    return record.model_copy(update={"dispatcher": dispatcher, "updated_on": synced_at})


def join_drivers(
    raw_drivers: Iterable[Dict[str, Any]],
    assignments: Mapping[str, str],
    synced_at: Optional[str] = None,
) -> List[DriverRecord]:
    """Join roster payloads with dispatcher assignments by driver id.

    A driver with no assignment gets ``dispatcher=None``. Payloads without a
    usable driverId cannot be persisted and are skipped with a warning.
    """
    stamp = synced_at or utc_now_iso()
    joined: List[DriverRecord] = []
    for raw in raw_drivers:
        if not isinstance(raw, dict):
            logger.warning(f"Skipping non-object driver payload: {raw!r}")
            continue
        driver_id = str(raw.get("driverId") or "").strip()
        try:
            joined.append(map_to_driver_record(raw, assignments.get(driver_id), stamp))
        except ValidationError as e:
            logger.warning(
                f"Skipping driver payload {driver_id or '<no id>'}",
                extra={"step": "join", "status": "skipped", "error": e.errors()[0].get("msg")},
            )
    unassigned = sum(1 for d in joined if d.dispatcher is None)
    logger.info(
        f"Joined {len(joined)} drivers ({unassigned} without dispatcher)",
        extra={"step": "join", "status": "ok"},
    )
    return joined
