"""Validation envelope — presence failures vs. format failures.

Invariants:
    - `error` is always a plain message string (what the site's forms display)
    - Only absent, blank, or null values count as missing
"""

from app.api.error_handlers import build_validation_error_response


def test_only_presence_failures_use_missing_fields_message():
    body = build_validation_error_response([
        {"loc": ("body", "name"), "msg": "Field required", "type": "missing"},
        {"loc": ("body", "email"), "msg": "Field is required", "type": "blank_field"},
    ])
    assert body["error"] == "All fields are required"
    assert body["code"] == "MISSING_FIELDS"
    assert [d["field"] for d in body["details"]] == ["name", "email"]
    assert "context" not in body


def test_format_failure_uses_generic_validation_message():
    body = build_validation_error_response([
        {"loc": ("body", "name"), "msg": "Field required", "type": "missing"},
        {"loc": ("body", "email"), "msg": "not an email", "type": "value_error"},
    ])
    assert body["error"] == "Invalid request data"
    assert body["code"] == "VALIDATION_ERROR"


def test_null_value_counts_as_missing():
    body = build_validation_error_response([
        {"loc": ("body", "name"), "msg": "Input should be a valid string",
         "type": "string_type", "input": None},
    ])
    assert body["code"] == "MISSING_FIELDS"


def test_wrongly_typed_value_is_not_missing():
    body = build_validation_error_response([
        {"loc": ("body", "name"), "msg": "Input should be a valid string",
         "type": "string_type", "input": 123},
    ])
    assert body["code"] == "VALIDATION_ERROR"
    assert body["error"] == "Invalid request data"


def test_model_level_error_reported_against_body():
    body = build_validation_error_response([
        {"loc": ("body",), "msg": "tx_ref required", "type": "blank_field"},
    ])
    assert body["details"][0]["field"] == "body"
