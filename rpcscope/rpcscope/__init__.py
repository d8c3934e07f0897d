"""rpcscope — interactive terminal client for JSON-RPC endpoints."""

from rpcscope.client import ProtocolError, RpcClient, RpcClientError, TransportError
from rpcscope.events import EventKind, InputEvent
from rpcscope.methods import DEFAULT_REGISTRY, MethodRegistry, MethodSpec
from rpcscope.modes import handle_event
from rpcscope.state import AppState, HistoryEntry, Mode
from rpcscope.view import Snapshot, snapshot

__all__ = [
    "AppState",
    "DEFAULT_REGISTRY",
    "EventKind",
    "HistoryEntry",
    "InputEvent",
    "MethodRegistry",
    "MethodSpec",
    "Mode",
    "ProtocolError",
    "RpcClient",
    "RpcClientError",
    "Snapshot",
    "TransportError",
    "handle_event",
    "snapshot",
]
