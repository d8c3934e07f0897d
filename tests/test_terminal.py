"""Tests for key decoding and command-line parsing."""

import curses

import pytest
from rpcscope.cli import DEFAULT_ENDPOINT, build_parser
from rpcscope.events import EventKind, InputEvent
from rpcscope.terminal import decode_key


@pytest.mark.parametrize(
    "code, kind",
    [
        (3, EventKind.QUIT),
        (27, EventKind.CANCEL),
        (9, EventKind.HISTORY),
        (10, EventKind.CONFIRM),
        (13, EventKind.CONFIRM),
        (curses.KEY_ENTER, EventKind.CONFIRM),
        (127, EventKind.BACKSPACE),
        (curses.KEY_BACKSPACE, EventKind.BACKSPACE),
        (curses.KEY_UP, EventKind.UP),
        (curses.KEY_DOWN, EventKind.DOWN),
    ],
)
def test_special_keys(code, kind):
    assert decode_key(code) == InputEvent.of(kind)


def test_printable_keys():
    assert decode_key(ord("x")) == InputEvent.key("x")
    assert decode_key(ord(" ")).is_text


def test_control_letters_are_not_text():
    event = decode_key(1)  # Ctrl+A
    assert event == InputEvent.key("a", ctrl=True)
    assert not event.is_text


@pytest.mark.parametrize("code", [-1, 0, curses.KEY_LEFT, curses.KEY_RESIZE])
def test_ignored_keys(code):
    assert decode_key(code) is None


def test_parser_defaults(monkeypatch):
    monkeypatch.delenv("RPCSCOPE_ENDPOINT", raising=False)
    args = build_parser().parse_args([])
    assert args.endpoint == DEFAULT_ENDPOINT
    assert args.log_file is None


def test_parser_reads_env(monkeypatch):
    monkeypatch.setenv("RPCSCOPE_ENDPOINT", "http://node:8545")
    monkeypatch.setenv("RPCSCOPE_TIMEOUT", "2.5")
    args = build_parser().parse_args([])
    assert args.endpoint == "http://node:8545"
    assert args.timeout == 2.5


def test_parser_flag_overrides_env(monkeypatch):
    monkeypatch.setenv("RPCSCOPE_ENDPOINT", "http://node:8545")
    args = build_parser().parse_args(["--endpoint", "http://other"])
    assert args.endpoint == "http://other"


@pytest.mark.parametrize(
    "key, kind",
    [
        ("\x03", EventKind.QUIT),
        ("\x1b", EventKind.CANCEL),
        ("\t", EventKind.HISTORY),
        ("\n", EventKind.CONFIRM),
        ("\x7f", EventKind.BACKSPACE),
    ],
)
def test_special_wide_chars(key, kind):
    assert decode_key(key) == InputEvent.of(kind)


def test_non_ascii_chars_are_text():
    event = decode_key("é")
    assert event == InputEvent.key("é")
    assert event.is_text
    assert decode_key("ж").is_text


def test_wide_char_sharing_a_function_key_code_is_text():
    # chr(KEY_DOWN) is a real letter, not the arrow key.
    assert decode_key(chr(curses.KEY_DOWN)) == InputEvent.key(chr(curses.KEY_DOWN))


def test_wide_control_letter():
    assert decode_key("\x01") == InputEvent.key("a", ctrl=True)


@pytest.mark.parametrize("key", ["\x00", "\u200b", ""])
def test_ignored_wide_chars(key):
    assert decode_key(key) is None
