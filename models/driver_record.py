from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator


PREFERENCE_FIELDS: tuple[str, ...] = (
    "global_dnd",
    "safety_call",
    "safety_message",
    "hos_support",
    "maintainance_call",
    "maintainance_message",
    "dispatch_call",
    "dispatch_message",
    "account_call",
    "account_message",
)

_FLAG_WORDS = {"true", "false", "1", "0", "yes", "no", "y", "n", "on", "off", "t", "f"}


class DriverRecord(BaseModel):
    """App/DB record shape: one roster driver merged with its dispatcher.

    Aliases are the Ditat payload keys; ``email`` is read from ``emailAddress``.
    """

    driver_id: str = Field(alias="driverId")
    status: str | None = None
    first_name: str | None = Field(default=None, alias="firstName")
    last_name: str | None = Field(default=None, alias="lastName")
    truck_id: str | None = Field(default=None, alias="truckId")
    phone_number: str | None = Field(default=None, alias="phoneNumber")
    email: str | None = Field(default=None, alias="emailAddress")
    hired_on: str | None = Field(default=None, alias="hiredOn")
    updated_on: str | None = None
    company_id: str | None = Field(default=None, alias="companyId")
    dispatcher: str | None = None

    first_language: str | None = Field(default=None, alias="firstLanguage")
    second_language: str | None = Field(default=None, alias="secondLanguage")

    # Communication preferences
    global_dnd: bool | None = Field(default=None, alias="globalDnd")
    safety_call: bool | None = Field(default=None, alias="safetyCall")
    safety_message: bool | None = Field(default=None, alias="safetyMessage")
    hos_support: bool | None = Field(default=None, alias="hosSupport")
    maintainance_call: bool | None = Field(default=None, alias="maintainanceCall")
    maintainance_message: bool | None = Field(default=None, alias="maintainanceMessage")
    dispatch_call: bool | None = Field(default=None, alias="dispatchCall")
    dispatch_message: bool | None = Field(default=None, alias="dispatchMessage")
    account_call: bool | None = Field(default=None, alias="accountCall")
    account_message: bool | None = Field(default=None, alias="accountMessage")

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    @field_validator("driver_id", mode="before")
    @classmethod
    def _clean_driver_id(cls, value: Any) -> Any:
        if value is None:
            return value
        text = str(value).strip()
        if not text:
            raise ValueError("driverId must not be empty")
        return text

    @field_validator(
        "status",
        "first_name",
        "last_name",
        "truck_id",
        "phone_number",
        "email",
        "hired_on",
        "company_id",
        "first_language",
        "second_language",
        mode="before",
    )
    @classmethod
    def _numbers_to_text(cls, value: Any) -> Any:
        # Ditat returns some ids and phone numbers as JSON numbers
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator(*PREFERENCE_FIELDS, mode="before")
    @classmethod
    def _unknown_flag_is_unset(cls, value: Any) -> Any:
        # An unreadable preference must not drop the whole driver
        if isinstance(value, str) and value.strip().lower() not in _FLAG_WORDS:
            return None
        if isinstance(value, (int, float)) and not isinstance(value, bool) and value not in (0, 1):
            return None
        return value
