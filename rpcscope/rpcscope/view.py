"""Read-only view of ``AppState`` for the renderer.

The renderer never touches ``AppState`` directly; it gets a frozen
``Snapshot`` after each processed event.  Interpreting a response as a
result or an error happens here, not in the client.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from rpcscope.state import AppState, HistoryEntry, Mode

SHOWN_FIELDS = 2
MAX_SUMMARY = 60

HELP = {
    Mode.MAIN: "type=Search • ↑/↓=Select • Enter=Params • Tab=History • Ctrl+C=Quit",
    Mode.PARAM_INPUT: "Enter=Send • Esc=Back • Ctrl+C=Quit",
    Mode.HISTORY: "↑/↓=Navigate • Enter=Load • Esc=Back • Ctrl+C=Quit",
}


@dataclass(slots=True, frozen=True)
class HistoryLine:
    index: int
    method: str
    request_id: int
    summary: str
    ok: bool


@dataclass(slots=True, frozen=True)
class Snapshot:
    mode: Mode
    search_input: str
    filtered_methods: tuple[str, ...]
    methods_selected: int | None
    param_names: tuple[str, ...]
    param_fields: tuple[str, ...]
    history: tuple[HistoryLine, ...]
    history_selected: int | None
    endpoint: str = ""

    @property
    def help(self) -> str:
        return HELP[self.mode]


def _compact(value: Any) -> str:
    text = value if isinstance(value, str) else json.dumps(value, separators=(",", ":"))
    if len(text) > MAX_SUMMARY:
        return text[: MAX_SUMMARY - 1] + "…"
    return text


def summarize(index: int, entry: HistoryEntry) -> HistoryLine:
    """Render one history entry, covering all result/error combinations."""
    resp = entry.response
    if entry.failure is not None:
        summary, ok = f"failed: {_compact(entry.failure)}", False
    elif resp.error is not None:
        err = resp.error
        if isinstance(err, dict) and "message" in err:
            summary = f"error {err.get('code', '?')}: {_compact(err['message'])}"
        else:
            summary = f"error: {_compact(err)}"
        ok = False
    elif resp.result is not None:
        summary, ok = _compact(resp.result), True
    else:
        summary, ok = "(empty)", True

    return HistoryLine(
        index=index,
        method=entry.request.method,
        request_id=entry.request.id,
        summary=summary,
        ok=ok,
    )


def snapshot(state: AppState, endpoint: str = "") -> Snapshot:
    fields = list(state.param_inputs)
    fields += [""] * (SHOWN_FIELDS - len(fields))
    names = list(state.param_names)
    names += [f"param {i + 1}" for i in range(len(names), len(fields))]

    return Snapshot(
        mode=state.mode,
        search_input=state.search_input,
        filtered_methods=tuple(state.filtered_methods),
        methods_selected=state.methods_selected,
        param_names=tuple(names),
        param_fields=tuple(fields),
        history=tuple(summarize(i, e) for i, e in enumerate(state.history)),
        history_selected=state.history_selected,
        endpoint=endpoint,
    )
