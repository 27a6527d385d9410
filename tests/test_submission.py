"""Tests for the submission completeness check."""

from workflow.submission import find_empty_fields, is_empty


def test_is_empty():
    assert is_empty(None)
    assert is_empty("   ")
    assert not is_empty("x")
    assert not is_empty(0)


def test_nested_empty_fields_use_dotted_paths():
    form = {
        "first_name": "Ada",
        "last_name": " ",
        "address": {"city": "", "street": "12 Analytical Way"},
        "gender": None,
    }

    assert find_empty_fields(form) == ["last_name", "address.city", "gender"]


def test_optional_sections_are_skipped():
    form = {
        "first_name": "Ada",
        "middle_name": "",
        "preferred_name": None,
        "references": {"first_name": ""},
        "emergency_contact": {"phone": ""},
        "documents": {"profile_picture_url": ""},
        "feedback": "",
    }

    assert find_empty_fields(form) == []
