"""Tests for the RPC client.

Happy paths go through ``httpx.ASGITransport`` pointed at the real dev
node; failure paths use ``httpx.MockTransport`` to fake broken peers.
"""

import json

import httpx
import pytest
from devnode.handlers import chain
from devnode.server import app
from rpcscope.client import ProtocolError, RpcClient, TransportError, send_rpc_request
from rpcwire.jsonrpc import JsonRpcRequest

ENDPOINT = "http://test/"


@pytest.fixture
async def rpc():
    """RpcClient wired to the in-process dev node."""
    chain.reset()
    transport = httpx.ASGITransport(app=app)  # type: ignore[arg-type]
    client = RpcClient(ENDPOINT, transport=transport)
    yield client
    await client.close()


def mock_client(handler) -> RpcClient:
    return RpcClient(ENDPOINT, transport=httpx.MockTransport(handler))


# ── Against the dev node ─────────────────────────────────────────────


@pytest.mark.anyio
async def test_send_returns_result(rpc):
    resp = await rpc.send(JsonRpcRequest("eth_blockNumber", [], id=1))
    assert resp.jsonrpc == "2.0"
    assert resp.result == "0x0"
    assert resp.error is None
    assert resp.id == 1


@pytest.mark.anyio
async def test_rpc_error_is_returned_not_raised(rpc):
    resp = await rpc.send(JsonRpcRequest("does_not_exist", [], id=2))
    assert resp.result is None
    assert resp.error["code"] == -32601


@pytest.mark.anyio
async def test_sequential_sends_are_independent(rpc):
    r1 = await rpc.send(JsonRpcRequest("eth_chainId", [], id=1))
    r2 = await rpc.send(JsonRpcRequest("net_version", [], id=2))
    assert r1.id == 1 and r2.id == 2
    assert int(r1.result, 16) == int(r2.result)


# ── Wire behaviour ───────────────────────────────────────────────────


@pytest.mark.anyio
async def test_posts_json_envelope():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["content_type"] = request.headers["content-type"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"jsonrpc": "2.0", "result": "0x1", "id": 4})

    async with mock_client(handler) as client:
        await client.send(JsonRpcRequest("eth_getBalance", ["0xABC"], id=4))

    assert seen["method"] == "POST"
    assert seen["content_type"] == "application/json"
    assert seen["body"] == {
        "jsonrpc": "2.0",
        "method": "eth_getBalance",
        "params": ["0xABC"],
        "id": 4,
    }


@pytest.mark.anyio
async def test_error_status_with_envelope_is_returned():
    def handler(request):
        body = {"jsonrpc": "2.0", "error": {"code": -32005, "message": "limit"}, "id": 1}
        return httpx.Response(429, json=body)

    async with mock_client(handler) as client:
        resp = await client.send(JsonRpcRequest("eth_chainId", [], id=1))
    assert resp.error["message"] == "limit"


# ── Failures ─────────────────────────────────────────────────────────


@pytest.mark.anyio
async def test_connect_error_is_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    async with mock_client(handler) as client:
        with pytest.raises(TransportError) as exc_info:
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))
    assert isinstance(exc_info.value.cause, httpx.ConnectError)


@pytest.mark.anyio
async def test_timeout_is_transport_error():
    def handler(request):
        raise httpx.ReadTimeout("too slow", request=request)

    async with mock_client(handler) as client:
        with pytest.raises(TransportError, match="timed out"):
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))


@pytest.mark.anyio
async def test_http_error_without_envelope_is_transport_error():
    def handler(request):
        return httpx.Response(502, text="Bad Gateway")

    async with mock_client(handler) as client:
        with pytest.raises(TransportError, match="502"):
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))


@pytest.mark.anyio
async def test_non_json_body_is_protocol_error():
    def handler(request):
        return httpx.Response(200, text="<html>hello</html>")

    async with mock_client(handler) as client:
        with pytest.raises(ProtocolError) as exc_info:
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))
    assert exc_info.value.body == "<html>hello</html>"


@pytest.mark.anyio
async def test_malformed_envelope_is_protocol_error():
    def handler(request):
        return httpx.Response(200, json={"result": "0x1"})

    async with mock_client(handler) as client:
        with pytest.raises(ProtocolError, match="envelope"):
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))


@pytest.mark.anyio
async def test_protocol_error_is_not_transport_error():
    def handler(request):
        return httpx.Response(200, json=[1, 2, 3])

    async with mock_client(handler) as client:
        with pytest.raises(ProtocolError):
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))
    assert not issubclass(ProtocolError, TransportError)


@pytest.mark.anyio
async def test_one_shot_send_to_closed_port():
    with pytest.raises(TransportError):
        await send_rpc_request(
            "http://127.0.0.1:1/", JsonRpcRequest("eth_chainId", [], id=1), timeout=2.0
        )


@pytest.mark.anyio
async def test_undecodable_body_is_transport_error():
    def handler(request):
        return httpx.Response(
            200,
            headers={"content-encoding": "gzip"},
            stream=httpx.ByteStream(b"not gzip"),
        )

    async with mock_client(handler) as client:
        with pytest.raises(TransportError) as exc_info:
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))
    assert isinstance(exc_info.value.cause, httpx.DecodingError)


@pytest.mark.anyio
async def test_redirect_without_envelope_is_transport_error():
    def handler(request):
        return httpx.Response(302, text="moved")

    async with mock_client(handler) as client:
        with pytest.raises(TransportError, match="302"):
            await client.send(JsonRpcRequest("eth_chainId", [], id=1))
