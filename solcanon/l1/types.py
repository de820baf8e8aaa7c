"""L1 block types decoded from ``eth_getBlockByHash`` responses."""

from __future__ import annotations

from dataclasses import dataclass, field

from solcanon.errors import RPCError

_DECODE_ERRORS = (KeyError, TypeError, ValueError, AttributeError)


def _quantity(value: str | None) -> int:
    """Decode a hex-encoded JSON-RPC quantity; missing values decode to 0."""
    if not value:
        return 0
    return int(value, 16)


@dataclass
class BlockHeader:
    hash: str
    parent_hash: str
    number: int
    timestamp: int
    state_root: str = ""
    transactions_root: str = ""
    receipts_root: str = ""
    gas_limit: int = 0
    gas_used: int = 0
    base_fee: int | None = None  # Absent before London
    miner: str = ""

    @classmethod
    def from_rpc(cls, data: dict) -> BlockHeader:
        try:
            return cls._decode(data)
        except _DECODE_ERRORS as e:
            raise RPCError(f"Malformed block header: {e!r}") from e

    @classmethod
    def _decode(cls, data: dict) -> BlockHeader:
        base_fee = data.get("baseFeePerGas")
        return cls(
            hash=data["hash"],
            parent_hash=data["parentHash"],
            number=_quantity(data["number"]),
            timestamp=_quantity(data["timestamp"]),
            state_root=data.get("stateRoot", ""),
            transactions_root=data.get("transactionsRoot", ""),
            receipts_root=data.get("receiptsRoot", ""),
            gas_limit=_quantity(data.get("gasLimit")),
            gas_used=_quantity(data.get("gasUsed")),
            base_fee=_quantity(base_fee) if base_fee is not None else None,
            miner=data.get("miner", ""),
        )


@dataclass
class Transaction:
    hash: str
    sender: str
    to: str | None  # None for contract creation
    nonce: int = 0
    value: int = 0
    gas: int = 0
    input: str = "0x"

    @classmethod
    def from_rpc(cls, data: dict) -> Transaction:
        try:
            return cls._decode(data)
        except _DECODE_ERRORS as e:
            raise RPCError(f"Malformed transaction: {e!r}") from e

    @classmethod
    def _decode(cls, data: dict) -> Transaction:
        return cls(
            hash=data["hash"],
            sender=data.get("from", ""),
            to=data.get("to"),
            nonce=_quantity(data.get("nonce")),
            value=_quantity(data.get("value")),
            gas=_quantity(data.get("gas")),
            input=data.get("input", "0x"),
        )


@dataclass
class Block:
    header: BlockHeader
    transactions: list[Transaction] = field(default_factory=list)

    @property
    def hash(self) -> str:
        return self.header.hash

    @property
    def number(self) -> int:
        return self.header.number
