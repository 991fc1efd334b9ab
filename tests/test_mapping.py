from __future__ import annotations

from services.mapping import join_drivers


RAW_A1 = {
    "driverId": "A1",
    "status": "Active",
    "firstName": "Ana",
    "lastName": "Petrovic",
    "truckId": 412,
    "phoneNumber": "555-0100",
    "emailAddress": "a@x.com",
    "hiredOn": "2021-03-01T00:00:00",
    "updatedOn": "2024-01-01T00:00:00",
    "companyId": "ACME",
    "someUnknownField": "ignored",
}


def test_join_maps_fields_and_dispatcher():
    [record] = join_drivers([RAW_A1], {"A1": "Marko"}, synced_at="2025-01-01T00:00:00+00:00")

    assert record.driver_id == "A1"
    assert record.email == "a@x.com"
    assert record.dispatcher == "Marko"
    assert record.first_name == "Ana"
    assert record.truck_id == "412"
    assert record.hired_on == "2021-03-01T00:00:00"
    # Sync time replaces the API's own timestamp
    assert record.updated_on == "2025-01-01T00:00:00+00:00"


def test_unmatched_driver_has_no_dispatcher():
    [record] = join_drivers([{"driverId": "B2"}], {}, synced_at="t")
    assert record.driver_id == "B2"
    assert record.dispatcher is None
    assert record.email is None


def test_lookup_uses_trimmed_driver_id():
    [record] = join_drivers([{"driverId": " C3 "}], {"C3": "Paul"}, synced_at="t")
    assert record.driver_id == "C3"
    assert record.dispatcher == "Paul"


def test_preferences_pass_through_when_present():
    raw = {"driverId": "D4", "globalDnd": True, "safetyCall": False, "firstLanguage": "sr"}
    [record] = join_drivers([raw], {}, synced_at="t")
    assert record.global_dnd is True
    assert record.safety_call is False
    assert record.first_language == "sr"
    assert record.dispatch_message is None


def test_payloads_without_driver_id_are_skipped():
    records = join_drivers([{"firstName": "NoId"}, {"driverId": "   "}, "junk", {"driverId": "E5"}], {}, synced_at="t")
    assert [r.driver_id for r in records] == ["E5"]


def test_empty_roster_joins_to_empty_list():
    assert join_drivers([], {"A1": "Marko"}) == []


def test_unreadable_preference_does_not_drop_driver():
    [record] = join_drivers([{"driverId": "F6", "globalDnd": "N/A", "hosSupport": 7, "safetyMessage": "yes"}], {}, synced_at="t")
    assert record.global_dnd is None
    assert record.hos_support is None
    assert record.safety_message is True


def test_numeric_email_and_language_are_kept_as_text():
    [record] = join_drivers([{"driverId": "A1", "emailAddress": 12345, "firstLanguage": 7}], {"A1": "Marko"}, synced_at="t")
    assert record.email == "12345"
    assert record.first_language == "7"
    assert record.dispatcher == "Marko"


def test_unreadable_optional_field_is_nulled_not_dropped():
    raw = {"driverId": "G7", "firstName": {"x": 1}, "lastName": "Ilic", "secondLanguage": ["en"]}
    [record] = join_drivers([raw], {"G7": "Paul"}, synced_at="t")
    assert record.driver_id == "G7"
    assert record.first_name is None
    assert record.second_language is None
    assert record.last_name == "Ilic"
    assert record.dispatcher == "Paul"


def test_unreadable_driver_id_still_skips_driver():
    records = join_drivers([{"driverId": None, "firstName": {"x": 1}}, {"driverId": "H8"}], {}, synced_at="t")
    assert [r.driver_id for r in records] == ["H8"]
