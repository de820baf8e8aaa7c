"""Parsing of solc type identifiers that carry an AST id.

solc names some storage types after the declaration that introduced them and
appends that declaration's AST id, e.g. ``t_struct(Deposit)1234_storage`` or
``t_enum(Kind)87``. The id changes whenever unrelated source changes shift
the AST, so it is the piece that has to be canonicalized.

Grammar handled here::

    t_<kind>(<name>)<ast id>[_<suffix>]

Composite types such as ``t_mapping(t_address,t_uint256)`` or
``t_array(t_struct(Foo)12_storage)dyn_storage`` do not match; their embedded
ids are rewritten through the string table built from the simple types.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

_TYPE_ID_RE = re.compile(
    r"^t_(?P<kind>\w+)\((?P<name>\w+)\)(?P<ast_id>\d+)(?P<suffix>_\w+)?$",
    re.ASCII,
)

# Kinds whose storage-located form still embeds an AST id. Any other type
# mentioning storage is left alone: fixed-size storage arrays end in their
# length, not an id.
STORAGE_REF_KINDS = frozenset({"struct", "userDefinedValueType"})


@dataclass(frozen=True)
class TypeId:
    """A type identifier split into its parts."""

    kind: str
    name: str
    ast_id: str  # Digits as they appear in the identifier
    suffix: str = ""

    @property
    def mentions_storage(self) -> bool:
        """True when "storage" appears anywhere in the identifier, name included."""
        return "storage" in str(self)

    @property
    def is_storage_ref(self) -> bool:
        """True for struct and user-defined value type storage references."""
        return self.kind in STORAGE_REF_KINDS and self.suffix.startswith("_storage")

    @property
    def has_ast_id(self) -> bool:
        """Whether the trailing digits are an AST id rather than a length."""
        return not self.mentions_storage or self.is_storage_ref

    def with_ast_id(self, ast_id: int) -> str:
        return f"t_{self.kind}({self.name}){ast_id}{self.suffix}"

    def __str__(self) -> str:
        return f"t_{self.kind}({self.name}){self.ast_id}{self.suffix}"


def parse_type_id(type_str: str) -> TypeId | None:
    """Parse ``type_str`` or return None when it is not a simple id-bearing type."""
    match = _TYPE_ID_RE.match(type_str)
    if not match:
        return None
    return TypeId(
        kind=match.group("kind"),
        name=match.group("name"),
        ast_id=match.group("ast_id"),
        suffix=match.group("suffix") or "",
    )
