"""Reading and writing storage layouts as solc-shaped JSON.

Input is either a bare ``storageLayout`` object or a compiler artifact (forge
or hardhat style) that carries one under the ``storageLayout`` key. Output is
deterministic: type keys sorted, entry fields in solc order, a trailing
newline.
"""

from __future__ import annotations

import json
from pathlib import Path

from solcanon.errors import LayoutFormatError
from solcanon.layout.models import StorageLayout, StorageLayoutEntry, StorageLayoutType


def layout_from_json(data: dict) -> StorageLayout:
    """Build a StorageLayout from parsed JSON."""
    if not isinstance(data, dict):
        raise LayoutFormatError(f"Expected a JSON object, got {type(data).__name__}")

    if "storageLayout" in data:
        data = data["storageLayout"]
        if not isinstance(data, dict):
            raise LayoutFormatError("'storageLayout' is not a JSON object")

    if "storage" not in data:
        raise LayoutFormatError("Missing 'storage' key")

    storage = data["storage"] or []
    types = data.get("types") or {}
    if not isinstance(storage, list):
        raise LayoutFormatError("'storage' must be a list")
    if not isinstance(types, dict):
        raise LayoutFormatError("'types' must be an object")

    layout = StorageLayout()
    for i, item in enumerate(storage):
        try:
            layout.storage.append(
                StorageLayoutEntry(
                    ast_id=int(item["astId"]),
                    contract=item.get("contract", ""),
                    label=item.get("label", ""),
                    offset=int(item.get("offset", 0)),
                    slot=int(item.get("slot", 0)),
                    type=item["type"],
                )
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise LayoutFormatError(f"storage[{i}]: {e!r}") from e

    for name, item in types.items():
        try:
            layout.types[name] = StorageLayoutType(
                encoding=item.get("encoding", ""),
                label=item.get("label", ""),
                number_of_bytes=int(item.get("numberOfBytes", 0)),
                key=item.get("key") or "",
                value=item.get("value") or "",
                base=item.get("base") or "",
            )
        except (TypeError, ValueError, AttributeError) as e:
            raise LayoutFormatError(f"types[{name!r}]: {e!r}") from e

    return layout


def load_layout(path: str | Path) -> StorageLayout:
    """Read a storage layout (or an artifact containing one) from a JSON file."""
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except UnicodeDecodeError as e:
        raise LayoutFormatError(f"{path} is not valid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        raise LayoutFormatError(f"Invalid JSON in {path}: {e}") from e
    return layout_from_json(data)


def layout_to_json(layout: StorageLayout) -> dict:
    """Convert a StorageLayout to solc-shaped JSON, with type keys sorted."""
    storage = [
        {
            "astId": entry.ast_id,
            "contract": entry.contract,
            "label": entry.label,
            "offset": entry.offset,
            "slot": str(entry.slot),
            "type": entry.type,
        }
        for entry in layout.storage
    ]

    types = {}
    for name in sorted(layout.types):
        info = layout.types[name]
        item = {
            "encoding": info.encoding,
            "label": info.label,
            "numberOfBytes": str(info.number_of_bytes),
        }
        if info.key:
            item["key"] = info.key
        if info.value:
            item["value"] = info.value
        if info.base:
            item["base"] = info.base
        types[name] = item

    return {"storage": storage, "types": types}


def dump_layout(layout: StorageLayout) -> str:
    return json.dumps(layout_to_json(layout), indent=2) + "\n"
