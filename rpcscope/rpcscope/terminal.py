"""Curses front end.

Decodes keys into ``InputEvent``s, draws ``Snapshot``s, and runs the
read → handle → draw loop.  No application logic lives here.
"""

from __future__ import annotations

import curses
import logging
import os

import anyio

from rpcscope.client import DEFAULT_TIMEOUT, RpcClient
from rpcscope.events import EventKind, InputEvent
from rpcscope.methods import DEFAULT_REGISTRY, MethodRegistry
from rpcscope.modes import handle_event
from rpcscope.state import AppState, Mode
from rpcscope.view import Snapshot, snapshot

log = logging.getLogger(__name__)

_KEYMAP = {
    3: EventKind.QUIT,  # Ctrl+C
    27: EventKind.CANCEL,  # Esc
    9: EventKind.HISTORY,  # Tab
    10: EventKind.CONFIRM,
    13: EventKind.CONFIRM,
    curses.KEY_ENTER: EventKind.CONFIRM,
    8: EventKind.BACKSPACE,
    127: EventKind.BACKSPACE,
    curses.KEY_BACKSPACE: EventKind.BACKSPACE,
    curses.KEY_UP: EventKind.UP,
    curses.KEY_DOWN: EventKind.DOWN,
}


def decode_key(ch: int | str) -> InputEvent | None:
    """Map a ``get_wch()`` key to an event; ``None`` for keys we ignore.

    Characters arrive as ``str`` (already decoded from the locale, so
    non-ASCII text works); function keys arrive as ``int`` codes.
    """
    if isinstance(ch, str):
        if len(ch) != 1:
            return None
        code = ord(ch)
        if code in _KEYMAP and code < 128:
            return InputEvent.of(_KEYMAP[code])
        if 0 < code < 32:
            return InputEvent.key(chr(code + 96), ctrl=True)
        return InputEvent.key(ch) if ch.isprintable() else None

    kind = _KEYMAP.get(ch)
    if kind is not None:
        return InputEvent.of(kind)
    if 32 <= ch < 127:
        return InputEvent.key(chr(ch))
    if 0 < ch < 32:
        return InputEvent.key(chr(ch + 96), ctrl=True)
    return None


# ── Rendering ────────────────────────────────────────────────────────


def _put(win, y: int, x: int, text: str, attr: int = 0) -> None:
    h, w = win.getmaxyx()
    if y >= h or x >= w:
        return
    try:
        win.addnstr(y, x, text, w - x - 1, attr)
    except curses.error:
        pass


def _list(win, top: int, items: list[str], selected: int | None) -> None:
    h, _ = win.getmaxyx()
    rows = max(0, h - top - 2)
    start = 0
    if selected is not None and selected >= rows:
        start = selected - rows + 1
    for row, i in enumerate(range(start, min(len(items), start + rows))):
        attr = curses.A_REVERSE if i == selected else 0
        _put(win, top + row, 2, items[i], attr)


def draw(stdscr, snap: Snapshot) -> None:
    stdscr.erase()
    h, _ = stdscr.getmaxyx()
    _put(stdscr, 0, 0, f"rpcscope  {snap.endpoint}", curses.A_BOLD)

    if snap.mode is Mode.MAIN:
        _put(stdscr, 1, 0, f"Search: {snap.search_input}")
        _list(stdscr, 3, list(snap.filtered_methods), snap.methods_selected)
    elif snap.mode is Mode.PARAM_INPUT:
        method = ""
        if snap.methods_selected is not None and snap.filtered_methods:
            method = snap.filtered_methods[snap.methods_selected]
        _put(stdscr, 1, 0, f"Method: {method}")
        for i, (name, value) in enumerate(zip(snap.param_names, snap.param_fields)):
            attr = curses.A_UNDERLINE if i == 0 else 0
            _put(stdscr, 3 + i, 2, f"{name}: ")
            _put(stdscr, 3 + i, 4 + len(name), value or " ", attr)
    else:
        lines = [
            f"{line.index}: {line.method} (id={line.request_id}) → {line.summary}"
            for line in snap.history
        ]
        _put(stdscr, 1, 0, f"History ({len(lines)})")
        _list(stdscr, 3, lines, snap.history_selected)

    _put(stdscr, h - 1, 0, snap.help, curses.A_DIM)
    stdscr.refresh()


# ── Event loop ───────────────────────────────────────────────────────


async def _session(stdscr, endpoint: str, timeout: float, registry: MethodRegistry) -> None:
    state = AppState(registry=registry)
    async with RpcClient(endpoint, timeout=timeout) as client:
        while not state.should_quit:
            draw(stdscr, snapshot(state, endpoint))
            # Blocking read: nothing else may run until this event is handled.
            try:
                key = stdscr.get_wch()
            except curses.error:
                continue
            event = decode_key(key)
            if event is None:
                continue
            await handle_event(state, event, client)
    log.info("session closed with %d history entries", len(state.history))


def run(
    endpoint: str,
    timeout: float = DEFAULT_TIMEOUT,
    registry: MethodRegistry = DEFAULT_REGISTRY,
) -> None:
    # Make ESC snappy
    os.environ.setdefault("ESCDELAY", "25")

    def curses_main(stdscr) -> None:
        curses.raw()
        try:
            curses.curs_set(0)
        except curses.error:
            pass
        stdscr.keypad(True)
        anyio.run(_session, stdscr, endpoint, timeout, registry)

    curses.wrapper(curses_main)
