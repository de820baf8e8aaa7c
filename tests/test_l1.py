"""Tests for the L1 JSON-RPC block fetcher."""

import json

import httpx
import pytest

from solcanon.config import L1Settings
from solcanon.errors import BlockHashMismatchError, BlockNotFoundError, RPCError
from solcanon.l1.client import L1Client, Prefetcher, new_fetching_l1
from solcanon.l1.rpc import RPCClient

BLOCK_HASH = "0x" + "ab" * 32
PARENT_HASH = "0x" + "cd" * 32
URL = "http://l1.test:8545"


def _make_block(block_hash: str = BLOCK_HASH, full_txs: bool = True) -> dict:
    tx = {
        "hash": "0x" + "11" * 32,
        "from": "0x" + "22" * 20,
        "to": None,
        "nonce": "0x3",
        "value": "0xde0b6b3a7640000",
        "gas": "0x5208",
        "input": "0x60806040",
    }
    return {
        "hash": block_hash,
        "parentHash": PARENT_HASH,
        "number": "0x10",
        "timestamp": "0x64",
        "stateRoot": "0x" + "01" * 32,
        "transactionsRoot": "0x" + "02" * 32,
        "receiptsRoot": "0x" + "03" * 32,
        "gasLimit": "0x1c9c380",
        "gasUsed": "0x5208",
        "baseFeePerGas": "0x7",
        "miner": "0x" + "00" * 20,
        "transactions": [tx] if full_txs else [tx["hash"]],
    }


def _transport(handler, calls=None):
    """Wrap a (method, params) -> response-body function as an httpx transport."""

    def handle(request: httpx.Request) -> httpx.Response:
        payload = json.loads(request.content)
        if calls is not None:
            calls.append(payload)
        body = handler(payload["method"], payload["params"])
        if isinstance(body, httpx.Response):
            return body
        body.setdefault("jsonrpc", "2.0")
        body.setdefault("id", payload["id"])
        return httpx.Response(200, json=body)

    return httpx.MockTransport(handle)


# --- RPCClient ---


def test_rpc_call_returns_result():
    calls = []
    rpc = RPCClient(URL, transport=_transport(lambda m, p: {"result": "0x10"}, calls))
    assert rpc.call("eth_blockNumber") == "0x10"
    assert rpc.call("eth_blockNumber") == "0x10"
    assert calls[0]["jsonrpc"] == "2.0"
    assert calls[0]["params"] == []
    assert calls[1]["id"] == calls[0]["id"] + 1


def test_rpc_error_object():
    rpc = RPCClient(
        URL,
        transport=_transport(lambda m, p: {"error": {"code": -32601, "message": "method not found"}}),
    )
    with pytest.raises(RPCError, match="method not found") as exc:
        rpc.call("eth_nope")
    assert exc.value.code == -32601


def test_rpc_http_error():
    rpc = RPCClient(URL, transport=_transport(lambda m, p: httpx.Response(503, text="busy")))
    with pytest.raises(RPCError, match="HTTP 503"):
        rpc.call("eth_blockNumber")


def test_rpc_non_json_response():
    rpc = RPCClient(URL, transport=_transport(lambda m, p: httpx.Response(200, text="<html>")))
    with pytest.raises(RPCError, match="not JSON"):
        rpc.call("eth_blockNumber")


def test_rpc_transport_failure():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    rpc = RPCClient(URL, transport=httpx.MockTransport(refuse))
    with pytest.raises(RPCError, match="failed"):
        rpc.call("eth_blockNumber")


def test_rpc_requires_url():
    with pytest.raises(RPCError):
        RPCClient("")


# --- L1Client ---


def test_block_by_hash():
    calls = []
    transport = _transport(lambda m, p: {"result": _make_block()}, calls)
    with RPCClient(URL, transport=transport) as rpc:
        block = L1Client(rpc).block_by_hash(BLOCK_HASH)

    assert calls[0]["method"] == "eth_getBlockByHash"
    assert calls[0]["params"] == [BLOCK_HASH, True]
    assert block.hash == BLOCK_HASH
    assert block.number == 16
    assert block.header.timestamp == 100
    assert block.header.parent_hash == PARENT_HASH
    assert block.header.base_fee == 7
    assert len(block.transactions) == 1
    tx = block.transactions[0]
    assert tx.to is None
    assert tx.nonce == 3
    assert tx.value == 10**18
    assert tx.gas == 21000


def test_header_by_hash():
    calls = []
    transport = _transport(lambda m, p: {"result": _make_block(full_txs=False)}, calls)
    header = L1Client(RPCClient(URL, transport=transport)).header_by_hash(BLOCK_HASH)
    assert calls[0]["params"] == [BLOCK_HASH, False]
    assert header.number == 16
    assert header.gas_limit == 30_000_000


def test_pre_london_block_has_no_base_fee():
    block_data = _make_block()
    del block_data["baseFeePerGas"]
    transport = _transport(lambda m, p: {"result": block_data})
    block = L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH)
    assert block.header.base_fee is None


def test_block_not_found():
    transport = _transport(lambda m, p: {"result": None})
    with pytest.raises(BlockNotFoundError):
        L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH)


def test_block_hash_mismatch():
    transport = _transport(lambda m, p: {"result": _make_block(block_hash=PARENT_HASH)})
    with pytest.raises(BlockHashMismatchError):
        L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH)


def test_block_hash_mismatch_trusted_rpc():
    transport = _transport(lambda m, p: {"result": _make_block(block_hash=PARENT_HASH)})
    block = L1Client(RPCClient(URL, transport=transport), trust_rpc=True).block_by_hash(BLOCK_HASH)
    assert block.hash == PARENT_HASH


def test_block_hash_compare_ignores_case():
    transport = _transport(lambda m, p: {"result": _make_block()})
    block = L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH.upper().replace("0X", "0x"))
    assert block.number == 16


def test_non_object_block_result():
    transport = _transport(lambda m, p: {"result": "0x1"})
    with pytest.raises(RPCError, match="expected a block object"):
        L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH)


def test_block_missing_parent_hash():
    block_data = _make_block()
    del block_data["parentHash"]
    transport = _transport(lambda m, p: {"result": block_data})
    with pytest.raises(RPCError, match="Malformed block header"):
        L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH)


def test_header_with_bad_quantity():
    block_data = _make_block(full_txs=False)
    block_data["number"] = "not-hex"
    transport = _transport(lambda m, p: {"result": block_data})
    with pytest.raises(RPCError, match="Malformed block header"):
        L1Client(RPCClient(URL, transport=transport)).header_by_hash(BLOCK_HASH)


def test_block_with_malformed_transaction():
    block_data = _make_block()
    block_data["transactions"] = [{"from": "0x" + "22" * 20}]
    transport = _transport(lambda m, p: {"result": block_data})
    with pytest.raises(RPCError, match="Malformed transaction"):
        L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH)


def test_block_transactions_not_a_list():
    block_data = _make_block()
    block_data["transactions"] = "0x"
    transport = _transport(lambda m, p: {"result": block_data})
    with pytest.raises(RPCError, match="not a list"):
        L1Client(RPCClient(URL, transport=transport)).block_by_hash(BLOCK_HASH)


def test_new_fetching_l1():
    settings = L1Settings(url=URL, trust_rpc=True, timeout=2.0)
    client = new_fetching_l1(settings, transport=_transport(lambda m, p: {"result": _make_block()}))
    assert client.trust_rpc
    assert client.rpc.url == URL
    assert client.block_by_hash(BLOCK_HASH).number == 16
    client.close()


# --- Prefetcher ---


def test_prefetcher_caches_blocks():
    calls = []
    transport = _transport(lambda m, p: {"result": _make_block()}, calls)
    prefetcher = Prefetcher(L1Client(RPCClient(URL, transport=transport)))

    first = prefetcher.block_by_hash(BLOCK_HASH)
    second = prefetcher.block_by_hash(BLOCK_HASH)
    assert first is second
    assert len(calls) == 1
    assert len(prefetcher) == 1


def test_prefetcher_propagates_errors():
    transport = _transport(lambda m, p: {"result": None})
    prefetcher = Prefetcher(L1Client(RPCClient(URL, transport=transport)))
    with pytest.raises(BlockNotFoundError):
        prefetcher.block_by_hash(BLOCK_HASH)
    assert len(prefetcher) == 0
