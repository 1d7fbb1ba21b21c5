from __future__ import annotations

from vehiclemate._redact import redact_for_log


def test_redact_for_log_redacts_sensitive_keys() -> None:
    payload = {
        "username": "kamal",
        "password": "pw",
        "Authorization": "Bearer abc",
        "nested": {"token": "SIG", "userId": 12},
    }

    redacted = redact_for_log(payload)
    assert redacted["username"] == "kamal"
    assert redacted["password"] == "<redacted>"
    assert redacted["Authorization"] == "<redacted>"
    assert redacted["nested"]["token"] == "<redacted>"
    assert redacted["nested"]["userId"] == 12
    assert payload["password"] == "pw"


def test_redact_for_log_truncates_long_strings() -> None:
    long_value = "x" * 600
    redacted = redact_for_log({"value": long_value}, max_string=10)
    assert redacted["value"].startswith("x" * 10)
    assert "<truncated>" in redacted["value"]


def test_redact_for_log_shortens_long_collections() -> None:
    payload = {"fuelLogs": [{"localId": str(i)} for i in range(25)]}

    redacted = redact_for_log(payload, max_items=3)

    assert redacted["fuelLogs"][:3] == [{"localId": "0"}, {"localId": "1"}, {"localId": "2"}]
    assert redacted["fuelLogs"][3] == "<22 more>"
    assert len(redacted["fuelLogs"]) == 4


def test_redact_for_log_passes_scalars_through() -> None:
    assert redact_for_log(None) is None
    assert redact_for_log(3.5) == 3.5
    assert redact_for_log(b"abc") == "<bytes:3b>"
