"""Contract path normalization.

solc falls back to absolute source paths when two imported contracts share a
name. Absolute paths differ between machines and checkouts, so only the part
below the repository root is kept.
"""

from __future__ import annotations

import posixpath

DEFAULT_ROOT_MARKER = "optimism"


def normalize_contract_path(contract: str, marker: str = DEFAULT_ROOT_MARKER) -> str:
    """Strip everything up to and including the ``marker`` directory.

    >>> normalize_contract_path("/home/user/build/optimism/packages/contracts/Foo.sol")
    'packages/contracts/Foo.sol'

    Relative paths, and absolute paths that never pass through ``marker``,
    are returned unchanged.
    """
    if not posixpath.isabs(contract):
        return contract

    elements = contract.split("/")
    try:
        idx = elements.index(marker)
    except ValueError:
        return contract

    rest = [e for e in elements[idx + 1:] if e]
    if not rest:
        return ""
    return posixpath.normpath("/".join(rest))
