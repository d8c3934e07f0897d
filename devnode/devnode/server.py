"""Dev node — Starlette ASGI server speaking Ethereum-flavoured JSON-RPC.

Answers POSTs on ``/`` (where Ethereum clients expect the endpoint) and
on ``/rpc``.

Run directly::

    python -m devnode.server
"""

from __future__ import annotations

import json
import logging
import os

from rpcwire.jsonrpc import (
    INTERNAL_ERROR,
    INVALID_REQUEST,
    PARSE_ERROR,
    JsonRpcRequest,
    JsonRpcResponse,
)
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Route

from devnode.dispatcher import InvalidParamsError, MethodNotFoundError
from devnode.handlers import dispatcher

log = logging.getLogger(__name__)


# ── Helpers ──────────────────────────────────────────────────────────


def _error_response(req_id: int | None, code: int, msg: str, status: int = 200) -> JSONResponse:
    """Build a JSON-RPC error response."""
    resp = JsonRpcResponse.fail(req_id, code, msg)
    return JSONResponse(resp.to_dict(), status_code=status)


# ── RPC endpoint ─────────────────────────────────────────────────────


async def rpc_endpoint(request: Request) -> JSONResponse:
    """Handle a JSON-RPC 2.0 POST."""
    try:
        body = await request.body()
        raw = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return _error_response(None, PARSE_ERROR, "Parse error")

    try:
        rpc_req = JsonRpcRequest.from_dict(raw)
    except ValueError as exc:
        return _error_response(None, INVALID_REQUEST, str(exc))

    req_id = rpc_req.id
    log.info("rpc ← %s(id=%s)", rpc_req.method, req_id)

    try:
        result = await dispatcher.dispatch(rpc_req.method, rpc_req.params)
        # ``null`` results (e.g. unknown block) are still successes.
        return JSONResponse({"jsonrpc": rpc_req.jsonrpc, "id": req_id, "result": result})
    except (MethodNotFoundError, InvalidParamsError) as exc:
        return _error_response(req_id, exc.code, str(exc))
    except Exception as exc:
        log.exception("handler error for %s", rpc_req.method)
        return _error_response(req_id, INTERNAL_ERROR, f"Internal error: {exc}")


# ── App factory ──────────────────────────────────────────────────────


def create_app() -> Starlette:
    return Starlette(
        debug=False,
        routes=[
            Route("/", rpc_endpoint, methods=["POST"]),
            Route("/rpc", rpc_endpoint, methods=["POST"]),
        ],
    )


app = create_app()


# ── Runnable entrypoint ──────────────────────────────────────────────

if __name__ == "__main__":
    import uvicorn

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    uvicorn.run(
        "devnode.server:app",
        host=os.getenv("DEVNODE_HOST", "127.0.0.1"),
        port=int(os.getenv("DEVNODE_PORT", "8545")),
        log_level="info",
    )
