"""Completeness check run before an application may be submitted."""

from __future__ import annotations

from typing import Mapping

# Optional sections and reviewer-owned fields never block a submission.
EXCLUDED_FIELDS = frozenset(
    {
        "middle_name",
        "preferred_name",
        "documents",
        "work_authorization",
        "references",
        "emergency_contact",
        "feedback",
    }
)


def is_empty(value: object) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


def find_empty_fields(
    form: Mapping[str, object], excluded: frozenset[str] = EXCLUDED_FIELDS
) -> list[str]:
    """Return dotted paths of empty fields, looking one level into nested objects."""

    empty: list[str] = []
    for key, value in form.items():
        if key in excluded:
            continue
        if isinstance(value, Mapping):
            empty.extend(
                f"{key}.{sub_key}" for sub_key, sub_value in value.items() if is_empty(sub_value)
            )
        elif is_empty(value):
            empty.append(key)
    return empty
