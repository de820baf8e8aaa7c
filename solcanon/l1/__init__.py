"""L1 block fetching over JSON-RPC."""

from solcanon.l1.client import BlockFetcher, L1Client, Prefetcher, new_fetching_l1
from solcanon.l1.rpc import RPCClient
from solcanon.l1.types import Block, BlockHeader, Transaction

__all__ = [
    "Block",
    "BlockFetcher",
    "BlockHeader",
    "L1Client",
    "Prefetcher",
    "RPCClient",
    "Transaction",
    "new_fetching_l1",
]
