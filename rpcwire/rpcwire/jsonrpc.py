"""JSON-RPC 2.0 wire-format models.

Pure data — no I/O, no business logic.  The terminal client and the
dev node import these for serialisation only.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

# ── Standard error codes (JSON-RPC 2.0 §5.1) ────────────────────────
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

# Client-side: recorded when no response envelope could be obtained.
TRANSPORT_ERROR = -32099

VERSION = "2.0"


def _is_id(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value >= 0


# ── Models ───────────────────────────────────────────────────────────
@dataclass(slots=True)
class JsonRpcError:
    """JSON-RPC 2.0 error object."""

    code: int
    message: str
    data: Any = None

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            d["data"] = self.data
        return d


@dataclass(slots=True, frozen=True)
class JsonRpcRequest:
    """Outbound JSON-RPC 2.0 request.

    ``id`` must be supplied by the caller; notifications are not part of
    this design.
    """

    method: str
    params: Any = field(default_factory=list)
    id: int = 0
    jsonrpc: str = VERSION

    # -- Convenience ---------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        return {
            "jsonrpc": self.jsonrpc,
            "method": self.method,
            "params": self.params,
            "id": self.id,
        }

    @classmethod
    def from_dict(cls, raw: Any) -> "JsonRpcRequest":
        """Parse a raw dict into a request — raises ``ValueError`` on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("request must be a JSON object")
        if raw.get("jsonrpc") != VERSION:
            raise ValueError("missing or invalid 'jsonrpc' field")
        method = raw.get("method")
        if not isinstance(method, str) or not method:
            raise ValueError("missing or invalid 'method' field")
        req_id = raw.get("id")
        if not _is_id(req_id):
            raise ValueError("missing or invalid 'id' field")
        return cls(method=method, params=raw.get("params", []), id=req_id)


@dataclass(slots=True, frozen=True)
class JsonRpcResponse:
    """JSON-RPC 2.0 response.

    ``result`` and ``error`` are carried as-is.  A well-behaved peer sets
    exactly one of them, but nothing here enforces that.
    """

    id: int
    result: Any = None
    error: Any = None
    jsonrpc: str = VERSION

    def to_dict(self) -> dict[str, Any]:
        d: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.result is not None:
            d["result"] = self.result
        if self.error is not None:
            d["error"] = self.error
        return d

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def from_dict(cls, raw: Any) -> "JsonRpcResponse":
        """Parse a response envelope — raises ``ValueError`` on bad input."""
        if not isinstance(raw, dict):
            raise ValueError("response must be a JSON object")
        if raw.get("jsonrpc") != VERSION:
            raise ValueError("missing or invalid 'jsonrpc' field")
        resp_id = raw.get("id")
        if not _is_id(resp_id):
            raise ValueError("missing or invalid 'id' field")
        return cls(id=resp_id, result=raw.get("result"), error=raw.get("error"))

    # -- Factories -----------------------------------------------------
    @classmethod
    def success(cls, req_id: int, result: Any) -> "JsonRpcResponse":
        return cls(id=req_id, result=result)

    @classmethod
    def fail(
        cls, req_id: int | None, code: int, message: str, data: Any = None
    ) -> "JsonRpcResponse":
        return cls(
            id=req_id or 0,
            error=JsonRpcError(code=code, message=message, data=data).to_dict(),
        )
