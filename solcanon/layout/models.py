"""Storage layout data models.

These mirror the ``storageLayout`` object solc emits for a contract: an
ordered list of storage entries plus a table of the types they reference.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class StorageLayoutEntry:
    """One declared storage variable."""

    ast_id: int
    contract: str  # Source unit and contract name, e.g. "src/Foo.sol:Foo"
    label: str
    offset: int  # Byte offset inside the slot
    slot: int
    type: str  # Key into StorageLayout.types


@dataclass
class StorageLayoutType:
    """A type referenced by storage."""

    encoding: str  # inplace, mapping, dynamic_array or bytes
    label: str
    number_of_bytes: int
    key: str = ""  # Mapping key type
    value: str = ""  # Mapping value type
    base: str = ""  # Array element type


@dataclass
class StorageLayout:
    """The storage layout of a single contract."""

    storage: list[StorageLayoutEntry] = field(default_factory=list)
    types: dict[str, StorageLayoutType] = field(default_factory=dict)

    @property
    def labels(self) -> list[str]:
        return [entry.label for entry in self.storage]

    def entry(self, label: str) -> StorageLayoutEntry | None:
        for entry in self.storage:
            if entry.label == label:
                return entry
        return None

    def type_of(self, entry: StorageLayoutEntry) -> StorageLayoutType:
        """Look up the type of a storage entry.

        A dangling reference raises KeyError; layouts from solc are closed.
        """
        return self.types[entry.type]
