"""Canned Ethereum JSON-RPC handlers.

All handlers are registered on the module-level ``dispatcher`` and read or
mutate the module-level ``chain``, a tiny in-memory ledger good enough
to give the terminal client realistic answers.
"""

from __future__ import annotations

import hashlib
import json
import logging
from dataclasses import dataclass, field
from typing import Any

from devnode.dispatcher import Dispatcher, InvalidParamsError

log = logging.getLogger(__name__)

dispatcher = Dispatcher()

CHAIN_ID = 1337
CLIENT_VERSION = "devnode/0.1.0"
GAS_PRICE = 1_000_000_000  # 1 gwei
BLOCK_TAGS = {"latest", "earliest", "pending", "safe", "finalized"}

# Pre-funded accounts (wei)
GENESIS_BALANCES = {
    "0x0000000000000000000000000000000000000abc": 10**18,
    "0x00000000000000000000000000000000000000de": 5 * 10**17,
}


# ── Ledger ───────────────────────────────────────────────────────────


@dataclass(slots=True)
class Chain:
    """In-memory ledger: balances, nonces and a list of mined blocks."""

    block_number: int = 0
    balances: dict[str, int] = field(default_factory=dict)
    nonces: dict[str, int] = field(default_factory=dict)
    blocks: list[dict[str, Any]] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.block_number = 0
        self.balances = dict(GENESIS_BALANCES)
        self.nonces = {}
        self.blocks = [self._make_block(0, [])]

    def _make_block(self, number: int, txs: list[dict[str, Any]]) -> dict[str, Any]:
        digest = hashlib.sha256(f"block:{number}:{json.dumps(txs)}".encode()).hexdigest()
        return {"number": hex(number), "hash": "0x" + digest, "transactions": txs}

    def transfer(self, sender: str, to: str, value: int) -> str:
        if self.balances.get(sender, 0) < value:
            raise InvalidParamsError(f"insufficient funds for {sender}")
        nonce = self.nonces.get(sender, 0)
        tx = {"from": sender, "to": to, "value": hex(value), "nonce": hex(nonce)}
        tx_hash = "0x" + hashlib.sha256(json.dumps(tx, sort_keys=True).encode()).hexdigest()
        tx["hash"] = tx_hash

        self.balances[sender] -= value
        self.balances[to] = self.balances.get(to, 0) + value
        self.nonces[sender] = nonce + 1
        self.block_number += 1
        self.blocks.append(self._make_block(self.block_number, [tx]))
        log.info("mined block %d with tx %s", self.block_number, tx_hash)
        return tx_hash

    def block(self, number: int) -> dict[str, Any] | None:
        if 0 <= number < len(self.blocks):
            return self.blocks[number]
        return None


chain = Chain()


# ── Param helpers ────────────────────────────────────────────────────


def _arg(params: list[Any], index: int, name: str, default: Any = None) -> Any:
    if index < len(params):
        return params[index]
    if default is not None:
        return default
    raise InvalidParamsError(f"missing '{name}'")


def _address(value: Any) -> str:
    if not isinstance(value, str) or not value.startswith("0x") or len(value) != 42:
        raise InvalidParamsError(f"bad address {value!r}")
    try:
        int(value, 16)
    except ValueError:
        raise InvalidParamsError(f"bad address {value!r}") from None
    return value.lower()


def _quantity(value: Any) -> int:
    if not isinstance(value, str) or not value.startswith("0x"):
        raise InvalidParamsError(f"bad quantity {value!r}")
    try:
        return int(value, 16)
    except ValueError:
        raise InvalidParamsError(f"bad quantity {value!r}") from None


def _block_number(value: Any) -> int:
    if value in BLOCK_TAGS:
        return 0 if value == "earliest" else chain.block_number
    return _quantity(value)


# ── Handlers ─────────────────────────────────────────────────────────


@dispatcher.handler("eth_blockNumber")
async def block_number(params: list[Any]) -> str:
    return hex(chain.block_number)


@dispatcher.handler("eth_chainId")
async def chain_id(params: list[Any]) -> str:
    return hex(CHAIN_ID)


@dispatcher.handler("net_version")
async def net_version(params: list[Any]) -> str:
    return str(CHAIN_ID)


@dispatcher.handler("web3_clientVersion")
async def client_version(params: list[Any]) -> str:
    return CLIENT_VERSION


@dispatcher.handler("eth_gasPrice")
async def gas_price(params: list[Any]) -> str:
    return hex(GAS_PRICE)


@dispatcher.handler("eth_getBalance")
async def get_balance(params: list[Any]) -> str:
    """Balance of an address; the block argument is accepted but not historical."""
    address = _address(_arg(params, 0, "address"))
    _block_number(_arg(params, 1, "block", "latest"))
    return hex(chain.balances.get(address, 0))


@dispatcher.handler("eth_getTransactionCount")
async def get_transaction_count(params: list[Any]) -> str:
    address = _address(_arg(params, 0, "address"))
    _block_number(_arg(params, 1, "block", "latest"))
    return hex(chain.nonces.get(address, 0))


@dispatcher.handler("eth_getBlockByNumber")
async def get_block_by_number(params: list[Any]) -> dict[str, Any] | None:
    number = _block_number(_arg(params, 0, "block"))
    full = _arg(params, 1, "full_transactions", False)
    found = chain.block(number)
    if found is None or full is True or full == "true":
        return found
    return {**found, "transactions": [tx["hash"] for tx in found["transactions"]]}


@dispatcher.handler("eth_call")
async def call(params: list[Any]) -> str:
    """No contracts live on the dev node; every call returns empty data."""
    call_object = _arg(params, 0, "call_object")
    if not isinstance(call_object, dict):
        raise InvalidParamsError("call_object must be a JSON object")
    _address(call_object.get("to"))
    return "0x"


@dispatcher.handler("eth_sendTransaction")
async def send_transaction(params: list[Any]) -> str:
    tx = _arg(params, 0, "tx_object")
    if not isinstance(tx, dict):
        raise InvalidParamsError("tx_object must be a JSON object")
    sender = _address(tx.get("from"))
    to = _address(tx.get("to"))
    value = _quantity(tx.get("value", "0x0"))
    return chain.transfer(sender, to, value)
