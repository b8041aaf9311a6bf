from datetime import date, datetime, timezone

from datetime_utils import ensure_utc, parse_due, parse_rfc3339, to_rfc3339_utc


def test_parse_rfc3339_asana_timestamp():
    parsed = parse_rfc3339("2024-03-05T10:15:30.123Z")
    assert parsed == datetime(2024, 3, 5, 10, 15, 30, 123000, tzinfo=timezone.utc)


def test_parse_rfc3339_offset_is_converted_to_utc():
    parsed = parse_rfc3339("2024-03-05T12:00:00+02:00")
    assert parsed == datetime(2024, 3, 5, 10, 0, tzinfo=timezone.utc)


def test_parse_rfc3339_rejects_garbage():
    assert parse_rfc3339(None) is None
    assert parse_rfc3339("   ") is None
    assert parse_rfc3339("yesterday") is None


def test_parse_due_accepts_date_and_timestamp():
    assert parse_due("2024-06-30") == date(2024, 6, 30)
    assert parse_due("2024-06-30T23:00:00.000Z") == date(2024, 6, 30)
    assert parse_due("") is None
    assert parse_due("30.06.2024") is None


def test_to_rfc3339_utc_naive_is_treated_as_utc():
    assert to_rfc3339_utc(datetime(2024, 1, 2, 3, 4, 5, 999)) == "2024-01-02T03:04:05Z"
    assert to_rfc3339_utc(None) is None
    assert ensure_utc(None) is None
