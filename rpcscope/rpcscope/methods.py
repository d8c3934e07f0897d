"""Method registry.

A read-only catalog mapping a JSON-RPC method name to the ordered list of
parameter names it expects.  Lookup only; nothing is dispatched here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Iterator

log = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class MethodSpec:
    """One method's signature, e.g. ``eth_getBalance(address, block)``."""

    name: str
    params: tuple[str, ...] = ()


class MethodRegistry:
    """A simple name → ``MethodSpec`` mapping that preserves order.

    Usage::

        registry = MethodRegistry([MethodSpec("eth_chainId")])
        registry.lookup("eth_chainId")   # MethodSpec(...)
        registry.lookup("nope")          # None
    """

    def __init__(self, specs: Iterable[MethodSpec]) -> None:
        self._specs: dict[str, MethodSpec] = {}
        for spec in specs:
            if spec.name in self._specs:
                raise ValueError(f"duplicate method in registry: {spec.name}")
            self._specs[spec.name] = spec
        log.debug("registry loaded with %d methods", len(self._specs))

    @classmethod
    def from_names(cls, names: Iterable[str]) -> "MethodRegistry":
        """Registry of parameterless methods, for tests and demos."""
        return cls(MethodSpec(name) for name in names)

    # -- Lookup --------------------------------------------------------
    def lookup(self, name: str) -> MethodSpec | None:
        return self._specs.get(name)

    @property
    def names(self) -> list[str]:
        return list(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs

    def __iter__(self) -> Iterator[MethodSpec]:
        return iter(self._specs.values())

    def __len__(self) -> int:
        return len(self._specs)


# ── Built-in catalog ─────────────────────────────────────────────────

DEFAULT_REGISTRY = MethodRegistry(
    [
        MethodSpec("eth_blockNumber"),
        MethodSpec("eth_getBalance", ("address", "block")),
        MethodSpec("eth_gasPrice"),
        MethodSpec("eth_call", ("call_object", "block")),
        MethodSpec("eth_sendTransaction", ("tx_object",)),
        MethodSpec("eth_chainId"),
        MethodSpec("eth_getTransactionCount", ("address", "block")),
        MethodSpec("eth_getBlockByNumber", ("block", "full_transactions")),
        MethodSpec("net_version"),
        MethodSpec("web3_clientVersion"),
    ]
)
