"""L1 block fetching by hash.

``L1Client`` talks to an execution-layer node over JSON-RPC. ``Prefetcher``
sits in front of any fetcher and keeps the blocks it has already served.
"""

from __future__ import annotations

import logging
from typing import Protocol

from solcanon.config import L1Settings
from solcanon.errors import BlockHashMismatchError, BlockNotFoundError, RPCError
from solcanon.l1.rpc import RPCClient
from solcanon.l1.types import Block, BlockHeader, Transaction

logger = logging.getLogger(__name__)


class BlockFetcher(Protocol):
    def block_by_hash(self, block_hash: str) -> Block: ...


class L1Client:
    """Fetches L1 headers and blocks by hash.

    Unless ``trust_rpc`` is set, the hash reported by the node is checked
    against the one requested.
    """

    def __init__(self, rpc: RPCClient, trust_rpc: bool = False):
        self.rpc = rpc
        self.trust_rpc = trust_rpc

    def _get_block(self, block_hash: str, full_txs: bool) -> dict:
        data = self.rpc.call("eth_getBlockByHash", [block_hash, full_txs])
        if data is None:
            raise BlockNotFoundError(f"Block {block_hash} not found")
        if not isinstance(data, dict):
            raise RPCError(f"eth_getBlockByHash: expected a block object, got {data!r}")
        if not self.trust_rpc and (data.get("hash") or "").lower() != block_hash.lower():
            raise BlockHashMismatchError(
                f"Requested block {block_hash} but node returned {data.get('hash')}"
            )
        return data

    def header_by_hash(self, block_hash: str) -> BlockHeader:
        return BlockHeader.from_rpc(self._get_block(block_hash, full_txs=False))

    def block_by_hash(self, block_hash: str) -> Block:
        data = self._get_block(block_hash, full_txs=True)
        raw_txs = data.get("transactions") or []
        if not isinstance(raw_txs, list):
            raise RPCError(f"Block {block_hash}: transactions is not a list")
        txs = [Transaction.from_rpc(tx) for tx in raw_txs]
        logger.debug("Fetched block %s with %d transactions", block_hash, len(txs))
        return Block(header=BlockHeader.from_rpc(data), transactions=txs)

    def close(self) -> None:
        self.rpc.close()


def new_fetching_l1(settings: L1Settings, transport=None) -> L1Client:
    """Build an L1Client from settings."""
    rpc = RPCClient(settings.url, timeout=settings.timeout, transport=transport)
    return L1Client(rpc, trust_rpc=settings.trust_rpc)


class Prefetcher:
    """Serves blocks from memory, fetching each hash at most once."""

    def __init__(self, fetcher: BlockFetcher):
        self.fetcher = fetcher
        self._blocks: dict[str, Block] = {}

    def block_by_hash(self, block_hash: str) -> Block:
        key = block_hash.lower()
        block = self._blocks.get(key)
        if block is None:
            logger.debug("Prefetch miss for %s", block_hash)
            block = self.fetcher.block_by_hash(block_hash)
            self._blocks[key] = block
        return block

    def __len__(self) -> int:
        return len(self._blocks)
