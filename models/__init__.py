from .driver_record import DriverRecord, PREFERENCE_FIELDS

__all__ = [
    "DriverRecord",
    "PREFERENCE_FIELDS",
]
