"""Exceptions raised at the I/O, config and RPC edges of solcanon.

The canonicalization pass itself never raises; these cover the code that
feeds it and the block fetcher.
"""

from __future__ import annotations


class SolcanonError(Exception):
    """Base class for all solcanon errors."""


class LayoutFormatError(SolcanonError, ValueError):
    """Storage layout JSON is structurally unusable."""


class ConfigError(SolcanonError, ValueError):
    """Configuration file or environment override is invalid."""


class RPCError(SolcanonError, RuntimeError):
    """A JSON-RPC call failed at the transport or protocol level."""

    def __init__(self, message: str, code: int | None = None):
        super().__init__(message)
        self.code = code


class BlockNotFoundError(RPCError):
    """The node returned no block for the requested hash."""


class BlockHashMismatchError(RPCError):
    """The node returned a block whose hash differs from the one requested."""
