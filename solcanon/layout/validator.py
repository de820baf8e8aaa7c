"""Validator — check that a storage layout's type references are closed."""

from __future__ import annotations

from solcanon.layout.models import StorageLayout


def validate_layout(layout: StorageLayout) -> list[str]:
    """Return a list of dangling type references. Empty list means valid."""
    issues: list[str] = []

    for i, entry in enumerate(layout.storage):
        if entry.type not in layout.types:
            issues.append(
                f"Storage entry {i + 1} ('{entry.label}') references unknown type '{entry.type}'"
            )

    for type_str in sorted(layout.types):
        info = layout.types[type_str]
        for field_name in ("key", "value", "base"):
            ref = getattr(info, field_name)
            if ref and ref not in layout.types:
                issues.append(f"Type '{type_str}' {field_name} references unknown type '{ref}'")

    return issues
