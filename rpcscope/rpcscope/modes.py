"""Mode controller — one transition function per mode.

``handle_event`` is the only entry point the event loop needs: it applies
the global quit binding, then dispatches on ``state.mode``.  Each handler
takes exactly one decoded event and mutates ``state`` in place.  Events a
mode does not recognise are ignored.

Handlers are ``async`` because submitting in ``ParamInput`` awaits the
RPC exchange.  The caller must not feed the next event until the current
handler returns, which keeps exactly one request in flight.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Protocol

from rpcwire.jsonrpc import PARSE_ERROR, TRANSPORT_ERROR, JsonRpcRequest, JsonRpcResponse

from rpcscope.client import ProtocolError, RpcClientError
from rpcscope.events import EventKind, InputEvent
from rpcscope.state import AppState, HistoryEntry, Mode, first_index, move_down, move_up

log = logging.getLogger(__name__)

# Used when the selected method is missing from the registry.
FALLBACK_FIELD_COUNT = 2


class Sender(Protocol):
    async def send(self, request: JsonRpcRequest) -> JsonRpcResponse: ...


# ── Parameter conversion ─────────────────────────────────────────────


def _field_value(text: str) -> Any:
    stripped = text.strip()
    if stripped[:1] in ("{", "["):
        try:
            return json.loads(stripped)
        except json.JSONDecodeError:
            pass
    return text


def build_params(fields: list[str]) -> list[Any]:
    """Turn field text into a positional ``params`` array.

    JSON objects and arrays are sent structured, everything else as a
    string.  Trailing empty fields are dropped.
    """
    values = list(fields)
    while values and values[-1] == "":
        values.pop()
    return [_field_value(v) for v in values]


def params_to_fields(params: Any) -> list[str]:
    """Inverse of ``build_params`` for replay: one string per value."""
    if not isinstance(params, list):
        return []
    return [
        v if isinstance(v, str) else json.dumps(v, separators=(",", ":"))
        for v in params
    ]


# ── Dispatch ─────────────────────────────────────────────────────────


async def handle_event(state: AppState, event: InputEvent, client: Sender) -> None:
    if event.kind is EventKind.QUIT:
        state.should_quit = True
        return

    match state.mode:
        case Mode.MAIN:
            await handle_main_mode(state, event)
        case Mode.PARAM_INPUT:
            await handle_param_input_mode(state, event, client)
        case Mode.HISTORY:
            await handle_history_mode(state, event)


# ── Main ─────────────────────────────────────────────────────────────


async def handle_main_mode(state: AppState, event: InputEvent) -> None:
    """Search, navigate, pick a method, or jump to history."""
    match event.kind:
        case EventKind.CHAR if event.is_text:
            state.search_input += event.char
            state.filter_methods()
        case EventKind.BACKSPACE:
            state.search_input = state.search_input[:-1]
            state.filter_methods()
        case EventKind.UP:
            state.methods_selected = move_up(state.methods_selected)
        case EventKind.DOWN:
            state.methods_selected = move_down(
                state.methods_selected, len(state.filtered_methods)
            )
        case EventKind.CONFIRM:
            _enter_param_input(state)
        case EventKind.HISTORY:
            state.mode = Mode.HISTORY


def _enter_param_input(state: AppState) -> None:
    name = state.selected_method()
    if name is None:
        return
    spec = state.registry.lookup(name)
    if spec is None:
        state.param_names = [f"param {i + 1}" for i in range(FALLBACK_FIELD_COUNT)]
    else:
        state.param_names = list(spec.params)
    state.param_inputs = ["" for _ in state.param_names]
    state.mode = Mode.PARAM_INPUT
    log.debug("editing params for %s %s", name, state.param_names)


# ── ParamInput ───────────────────────────────────────────────────────


async def handle_param_input_mode(
    state: AppState, event: InputEvent, client: Sender
) -> None:
    """Edit the first field, submit, or back out."""
    match event.kind:
        case EventKind.CANCEL:
            state.mode = Mode.MAIN
        case EventKind.CONFIRM:
            await submit(state, client)
        case EventKind.CHAR if event.is_text:
            if state.param_inputs:
                state.param_inputs[0] += event.char
        case EventKind.BACKSPACE:
            if state.param_inputs:
                state.param_inputs[0] = state.param_inputs[0][:-1]


async def submit(state: AppState, client: Sender) -> None:
    """Send the selected method with the current fields and record the outcome.

    Always records exactly one history entry and returns to ``Main``.
    """
    method = state.selected_method()
    if method is None:
        state.mode = Mode.MAIN
        return

    request = JsonRpcRequest(
        method=method,
        params=build_params(state.param_inputs),
        id=state.allocate_id(),
    )
    log.info("rpc → %s(id=%s)", request.method, request.id)

    try:
        response = await client.send(request)
        entry = HistoryEntry(request, response)
    except ProtocolError as exc:
        log.warning("rpc %s(id=%s) protocol error: %s", method, request.id, exc)
        entry = HistoryEntry(
            request,
            JsonRpcResponse.fail(request.id, PARSE_ERROR, str(exc)),
            failure=str(exc),
        )
    except RpcClientError as exc:
        log.warning("rpc %s(id=%s) transport error: %s", method, request.id, exc)
        entry = HistoryEntry(
            request,
            JsonRpcResponse.fail(request.id, TRANSPORT_ERROR, str(exc)),
            failure=str(exc),
        )

    state.record(entry)
    state.mode = Mode.MAIN


# ── History ──────────────────────────────────────────────────────────


async def handle_history_mode(state: AppState, event: InputEvent) -> None:
    """Browse past exchanges and load one back into parameter entry."""
    match event.kind:
        case EventKind.CANCEL:
            state.mode = Mode.MAIN
        case EventKind.UP:
            state.history_selected = move_up(state.history_selected)
        case EventKind.DOWN:
            state.history_selected = move_down(
                state.history_selected, len(state.history)
            )
        case EventKind.CONFIRM:
            _replay(state)


def _replay(state: AppState) -> None:
    entry = state.selected_history()
    if entry is None:
        return
    request = entry.request

    # The search text is left alone; the next keystroke in Main re-filters.
    state.filtered_methods = list(state.all_methods)
    if request.method in state.filtered_methods:
        state.methods_selected = state.filtered_methods.index(request.method)
    elif state.methods_selected is None:
        state.methods_selected = first_index(len(state.filtered_methods))

    fields = params_to_fields(request.params)
    spec = state.registry.lookup(request.method)
    names = list(spec.params) if spec is not None else []
    names += [f"param {i + 1}" for i in range(len(names), len(fields))]
    # Trailing fields dropped by build_params come back empty.
    fields += [""] * (len(names) - len(fields))

    state.param_names = names
    state.param_inputs = fields
    state.mode = Mode.PARAM_INPUT
    log.debug("replaying %s(id=%s)", request.method, request.id)
