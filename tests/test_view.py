"""Tests for the renderer-facing snapshot."""

import dataclasses

import pytest
from rpcscope.state import AppState, HistoryEntry, Mode
from rpcscope.view import Snapshot, snapshot, summarize
from rpcwire.jsonrpc import JsonRpcRequest, JsonRpcResponse

REQ = JsonRpcRequest("eth_chainId", [], id=3)


def test_snapshot_mirrors_state():
    state = AppState.with_methods(["alpha", "beta"])
    state.search_input = "a"
    state.filter_methods()
    snap = snapshot(state, endpoint="http://node")
    assert snap.mode is Mode.MAIN
    assert snap.search_input == "a"
    assert snap.filtered_methods == ("alpha", "beta")
    assert snap.methods_selected == 0
    assert snap.endpoint == "http://node"
    assert snap.history == ()
    assert snap.history_selected is None


def test_snapshot_always_has_two_fields():
    state = AppState()
    snap = snapshot(state)
    assert snap.param_fields == ("", "")
    assert snap.param_names == ("param 1", "param 2")


def test_snapshot_keeps_extra_fields():
    state = AppState()
    state.param_names = ["a", "b", "c"]
    state.param_inputs = ["1", "2", "3"]
    snap = snapshot(state)
    assert snap.param_fields == ("1", "2", "3")
    assert snap.param_names == ("a", "b", "c")


def test_snapshot_is_frozen_and_detached():
    state = AppState()
    snap = snapshot(state)
    with pytest.raises(dataclasses.FrozenInstanceError):
        snap.search_input = "x"  # type: ignore[misc]
    state.filtered_methods.clear()
    assert snap.filtered_methods != ()


def test_help_per_mode():
    state = AppState()
    for mode in Mode:
        state.mode = mode
        assert isinstance(snapshot(state).help, str)


class TestSummarize:
    def test_result(self):
        line = summarize(0, HistoryEntry(REQ, JsonRpcResponse.success(3, "0x539")))
        assert line.summary == "0x539"
        assert line.ok
        assert line.method == "eth_chainId"
        assert line.request_id == 3

    def test_structured_result(self):
        line = summarize(0, HistoryEntry(REQ, JsonRpcResponse.success(3, {"a": [1]})))
        assert line.summary == '{"a":[1]}'

    def test_error_object(self):
        resp = JsonRpcResponse(id=3, error={"code": -32000, "message": "reverted"})
        line = summarize(1, HistoryEntry(REQ, resp))
        assert line.summary == "error -32000: reverted"
        assert not line.ok

    def test_error_takes_precedence_over_result(self):
        resp = JsonRpcResponse(id=3, result="0x1", error="boom")
        line = summarize(1, HistoryEntry(REQ, resp))
        assert line.summary == "error: boom"

    def test_neither_result_nor_error(self):
        line = summarize(2, HistoryEntry(REQ, JsonRpcResponse(id=3)))
        assert line.summary == "(empty)"
        assert line.ok

    def test_failure(self):
        resp = JsonRpcResponse.fail(3, -32099, "cannot reach")
        line = summarize(0, HistoryEntry(REQ, resp, failure="cannot reach"))
        assert line.summary == "failed: cannot reach"

    def test_long_values_truncated(self):
        line = summarize(0, HistoryEntry(REQ, JsonRpcResponse.success(3, "x" * 500)))
        assert len(line.summary) <= 60
        assert line.summary.endswith("…")


def test_snapshot_type():
    assert isinstance(snapshot(AppState()), Snapshot)
