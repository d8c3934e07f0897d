"""Application state.

``AppState`` is the single mutable container the mode controller works
on.  The only derived field is ``filtered_methods``; it is recomputed by
``filter_methods()`` after every change to ``search_input`` and never
updated any other way.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum

from rpcwire.jsonrpc import JsonRpcRequest, JsonRpcResponse

from rpcscope.methods import DEFAULT_REGISTRY, MethodRegistry

log = logging.getLogger(__name__)


class Mode(Enum):
    MAIN = "main"
    PARAM_INPUT = "param_input"
    HISTORY = "history"


@dataclass(slots=True, frozen=True)
class HistoryEntry:
    """A sent request and what came back.

    ``failure`` is set when the exchange failed and ``response`` is an
    error-shaped stand-in rather than something the peer sent.
    """

    request: JsonRpcRequest
    response: JsonRpcResponse
    failure: str | None = None


# ── Cursor helpers ───────────────────────────────────────────────────
# ``None`` means "nothing selected" and only occurs for an empty list.


def move_up(index: int | None) -> int | None:
    if index is None or index == 0:
        return index
    return index - 1


def move_down(index: int | None, length: int) -> int | None:
    if index is None or index + 1 >= length:
        return index
    return index + 1


def first_index(length: int) -> int | None:
    return 0 if length > 0 else None


@dataclass
class AppState:
    registry: MethodRegistry = DEFAULT_REGISTRY

    mode: Mode = Mode.MAIN
    should_quit: bool = False

    # -- Method search -------------------------------------------------
    search_input: str = ""
    all_methods: list[str] = field(default_factory=list)
    filtered_methods: list[str] = field(default_factory=list)
    methods_selected: int | None = None

    # -- Parameter entry -----------------------------------------------
    param_inputs: list[str] = field(default_factory=list)
    param_names: list[str] = field(default_factory=list)

    # -- History -------------------------------------------------------
    history: list[HistoryEntry] = field(default_factory=list)
    history_selected: int | None = None

    next_id: int = 1

    def __post_init__(self) -> None:
        if not self.all_methods:
            self.all_methods = self.registry.names
        self.filter_methods()

    @classmethod
    def with_methods(cls, names: list[str]) -> "AppState":
        """State over a registry of parameterless methods named *names*."""
        return cls(registry=MethodRegistry.from_names(names))

    # -- Filtering -----------------------------------------------------
    def filter_methods(self) -> None:
        """Recompute ``filtered_methods`` from ``search_input``; reset selection."""
        query = self.search_input.lower()
        self.filtered_methods = [m for m in self.all_methods if query in m.lower()]
        self.methods_selected = first_index(len(self.filtered_methods))

    # -- Selection -----------------------------------------------------
    def selected_method(self) -> str | None:
        if self.methods_selected is None:
            return None
        if self.methods_selected >= len(self.filtered_methods):
            return None
        return self.filtered_methods[self.methods_selected]

    def selected_history(self) -> HistoryEntry | None:
        if self.history_selected is None:
            return None
        if self.history_selected >= len(self.history):
            return None
        return self.history[self.history_selected]

    # -- History -------------------------------------------------------
    def allocate_id(self) -> int:
        req_id = self.next_id
        self.next_id += 1
        return req_id

    def record(self, entry: HistoryEntry) -> None:
        """Append *entry*; the first entry ever recorded becomes selected."""
        self.history.append(entry)
        if self.history_selected is None:
            self.history_selected = 0
        log.debug(
            "history += %s(id=%s) [%d entries]",
            entry.request.method,
            entry.request.id,
            len(self.history),
        )
