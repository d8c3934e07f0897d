"""RPC client — one JSON-RPC 2.0 exchange over HTTP POST.

* ``RpcClient.send(request)``          → parsed ``JsonRpcResponse``
* ``send_rpc_request(url, request)``   → same, with a throwaway client

Uses ``httpx.AsyncClient``.  The response is returned as received; whether
it carries a ``result`` or an ``error`` is for the caller to interpret.

Two failure kinds are kept apart:

* ``TransportError``: nothing usable came back (connect failure, timeout,
  reset, undecodable body, or a non-2xx status without a JSON-RPC body).
* ``ProtocolError``: a body arrived but is not a valid response envelope.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx
from rpcwire.jsonrpc import JsonRpcRequest, JsonRpcResponse

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0


class RpcClientError(Exception):
    """Base class for exchange failures."""


class TransportError(RpcClientError):
    """The endpoint could not be reached or failed at the HTTP level."""

    def __init__(self, message: str, cause: Exception | None = None) -> None:
        self.cause = cause
        super().__init__(message)


class ProtocolError(RpcClientError):
    """A body was received but is not a JSON-RPC 2.0 response envelope."""

    def __init__(self, message: str, body: str = "") -> None:
        self.body = body
        super().__init__(message)


class RpcClient:
    """Thin async client that talks JSON-RPC 2.0 over HTTP.

    Parameters
    ----------
    endpoint : str
        Full URL requests are POSTed to, e.g. ``http://127.0.0.1:8545``.
    timeout : float
        Request timeout in seconds.
    transport : httpx.AsyncBaseTransport, optional
        Injected transport (tests use ``ASGITransport`` / ``MockTransport``).
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout),
            transport=transport,
        )

    # -- Lifecycle -----------------------------------------------------

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> "RpcClient":
        return self

    async def __aexit__(self, *exc: Any) -> None:
        await self.close()

    # -- Exchange ------------------------------------------------------

    async def send(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """POST *request* and return the parsed response envelope.

        Raises ``TransportError`` or ``ProtocolError``; never retries.
        """
        log.debug("rpc → %s(id=%s) @ %s", request.method, request.id, self.endpoint)

        try:
            resp = await self._client.post(self.endpoint, json=request.to_dict())
        except httpx.TimeoutException as exc:
            raise TransportError(f"timed out talking to {self.endpoint}", exc) from exc
        except httpx.InvalidURL as exc:
            raise TransportError(f"invalid endpoint {self.endpoint!r}", exc) from exc
        except httpx.TransportError as exc:
            raise TransportError(f"cannot reach {self.endpoint}: {exc}", exc) from exc
        except httpx.RequestError as exc:
            # Undecodable content-encoding, redirect loops and the like.
            raise TransportError(f"bad HTTP exchange with {self.endpoint}: {exc}", exc) from exc

        try:
            response = _parse_envelope(resp.text)
        except ProtocolError as exc:
            if not resp.is_success:
                raise TransportError(
                    f"HTTP {resp.status_code} from {self.endpoint}", exc
                ) from exc
            raise

        log.debug(
            "rpc ← %s(id=%s) status=%d error=%s",
            request.method,
            response.id,
            resp.status_code,
            response.is_error,
        )
        return response


def _parse_envelope(body: str) -> JsonRpcResponse:
    try:
        raw = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ProtocolError(f"response is not JSON: {exc}", body) from exc
    try:
        return JsonRpcResponse.from_dict(raw)
    except ValueError as exc:
        raise ProtocolError(f"malformed response envelope: {exc}", body) from exc


async def send_rpc_request(
    endpoint: str,
    request: JsonRpcRequest,
    timeout: float = DEFAULT_TIMEOUT,
) -> JsonRpcResponse:
    """One-shot exchange with a client that is closed afterwards."""
    async with RpcClient(endpoint, timeout=timeout) as client:
        return await client.send(request)
