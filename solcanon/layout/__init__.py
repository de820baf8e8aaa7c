"""Storage layout model and the AST id canonicalization pass.

- models: StorageLayout and friends, shaped after solc's ``storageLayout``
- type_ids: parsing of id-bearing type identifiers
- canonicalize: the two-pass AST id rewrite
- paths: contract path normalization
- validator: dangling type reference checks
- io: JSON loading and deterministic dumping
"""

from solcanon.layout.canonicalize import canonicalize_ast_ids, replace_type
from solcanon.layout.io import dump_layout, layout_from_json, layout_to_json, load_layout
from solcanon.layout.models import StorageLayout, StorageLayoutEntry, StorageLayoutType
from solcanon.layout.paths import normalize_contract_path
from solcanon.layout.type_ids import TypeId, parse_type_id
from solcanon.layout.validator import validate_layout

__all__ = [
    "StorageLayout",
    "StorageLayoutEntry",
    "StorageLayoutType",
    "TypeId",
    "canonicalize_ast_ids",
    "dump_layout",
    "layout_from_json",
    "layout_to_json",
    "load_layout",
    "normalize_contract_path",
    "parse_type_id",
    "replace_type",
    "validate_layout",
]
