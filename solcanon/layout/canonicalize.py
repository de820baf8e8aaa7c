"""Canonicalization of AST ids in storage layouts.

solc embeds AST ids in storage entries and in the names of struct, enum,
contract and user-defined value types. Those ids move whenever unrelated
source changes, so committed layouts churn even when storage did not change.
``canonicalize_ast_ids`` renumbers them in a fixed order so that the same
logical layout always serializes to the same bytes.

It works in two passes:

1. Find every AST id in the storage entries and the type table and build
   the replacement tables.
2. Build a new layout with the replacements applied.

The input layout is never modified. ``replace_type`` does a linear scan over
all type replacements for composite types, which is slow in theory and fast
enough for layouts with hundreds of entries.
"""

from __future__ import annotations

import logging

from solcanon.layout.models import StorageLayout, StorageLayoutEntry, StorageLayoutType
from solcanon.layout.paths import DEFAULT_ROOT_MARKER, normalize_contract_path
from solcanon.layout.type_ids import parse_type_id

logger = logging.getLogger(__name__)

# Canonical ids start well above the small integers that show up elsewhere
# in the output (offsets, slots, array lengths).
DEFAULT_BASE_ID = 1000


class IdCounter:
    """Hands out canonical ids for one canonicalization run."""

    def __init__(self, start: int = DEFAULT_BASE_ID):
        self.value = start

    def next(self) -> int:
        current = self.value
        self.value += 1
        return current


def build_ast_id_remappings(layout: StorageLayout, counter: IdCounter) -> dict[int, int]:
    """Assign each storage entry's AST id the next canonical id, in slot order."""
    remappings: dict[int, int] = {}
    for entry in layout.storage:
        remappings[entry.ast_id] = counter.next()
    return remappings


def build_type_remappings(sorted_types: list[str], counter: IdCounter) -> dict[str, str]:
    """Map each id-bearing type string to the same string with a canonical id.

    ``sorted_types`` must already be sorted; the ids handed out depend on
    the order. Fixed-size storage arrays end in their length, not an AST
    id, and are left alone.
    """
    remappings: dict[str, str] = {}
    seen: set[str] = set()

    for old_type in sorted_types:
        if not old_type or old_type in seen:
            continue

        type_id = parse_type_id(old_type)
        if type_id is None or not type_id.has_ast_id:
            continue

        remappings[old_type] = type_id.with_ast_id(counter.next())
        seen.add(old_type)

    return remappings


def replace_type(
    remappings: dict[str, str],
    type_str: str,
    longest_match_first: bool = False,
) -> str:
    """Rewrite every remapped type that appears in ``type_str``.

    Exact matches are returned directly. Otherwise each old type found as a
    substring has its first occurrence replaced, in table order. With
    ``longest_match_first`` the replacements are applied longest first, then
    by leftmost position, so that overlapping old types (``t_enum(A)5`` and
    ``t_enum(A)50``) cannot clobber each other.
    """
    remapped = remappings.get(type_str)
    if remapped:
        return remapped

    matches = [(old, new) for old, new in remappings.items() if old in type_str]
    if longest_match_first:
        matches.sort(key=lambda m: (-len(m[0]), type_str.index(m[0])))

    for old, new in matches:
        type_str = type_str.replace(old, new, 1)

    return type_str


def canonicalize_ast_ids(
    layout: StorageLayout,
    base_id: int = DEFAULT_BASE_ID,
    marker: str = DEFAULT_ROOT_MARKER,
    longest_match_first: bool = False,
) -> StorageLayout:
    """Return a copy of ``layout`` with deterministic AST ids and contract paths."""
    counter = IdCounter(base_id)
    ast_id_remappings = build_ast_id_remappings(layout, counter)

    # Dict order reflects however the JSON was produced; sort so the
    # canonical ids do not depend on it.
    sorted_old_types = sorted(layout.types)
    type_remappings = build_type_remappings(sorted_old_types, counter)

    logger.debug(
        "Canonicalizing %d storage entries and %d types (%d type ids remapped)",
        len(layout.storage),
        len(layout.types),
        len(type_remappings),
    )

    def rewrite(type_str: str) -> str:
        return replace_type(type_remappings, type_str, longest_match_first)

    out = StorageLayout()
    for entry in layout.storage:
        out.storage.append(
            StorageLayoutEntry(
                ast_id=ast_id_remappings[entry.ast_id],
                contract=normalize_contract_path(entry.contract, marker),
                label=entry.label,
                offset=entry.offset,
                slot=entry.slot,
                type=rewrite(entry.type),
            )
        )

    for old_type in sorted_old_types:
        value = layout.types[old_type]
        out.types[rewrite(old_type)] = StorageLayoutType(
            encoding=value.encoding,
            label=value.label,
            number_of_bytes=value.number_of_bytes,
            key=rewrite(value.key),
            value=rewrite(value.value),
            base=rewrite(value.base) if value.base else "",
        )

    return out
