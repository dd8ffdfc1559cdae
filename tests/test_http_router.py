import asyncio
import threading
from typing import Optional

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from solana_rpc.api import Api
from solana_rpc.errors import RpcResponseError, RpcTransportError, WireDecodeError
from solana_rpc.result import Failure, Success
from solana_rpc.router import HttpRouter
from solana_rpc.rpc_client import AsyncRpcClient
from solana_rpc.wire import BlockTimestamp


def make_app(answers: dict, received: Optional[list] = None, failures_before_success: int = 0,
             attempts: Optional[dict] = None) -> web.Application:
    attempts = attempts if attempts is not None else {}
    attempts["count"] = 0

    async def handler(request: web.Request) -> web.Response:
        attempts["count"] += 1
        if attempts["count"] <= failures_before_success:
            return web.Response(status=503, text="overloaded")

        payload = await request.json()
        if received is not None:
            received.append(payload)

        answer = answers[payload["method"]]
        if answer == "<garbage>":
            return web.Response(text="not json")
        if isinstance(answer, dict) and "error" in answer:
            return web.json_response({"jsonrpc": "2.0", "id": payload["id"], "error": answer["error"]})
        return web.json_response({"jsonrpc": "2.0", "id": payload["id"], "result": answer})

    app = web.Application()
    app.router.add_post("/", handler)
    return app


def run_against(app: web.Application, body, **client_kwargs):
    async def run_case():
        async with TestServer(app) as server:
            client_kwargs.setdefault("retry_stop_delay", 0)
            async with Api.connect(str(server.make_url("/")), **client_kwargs) as api:
                return await body(api)

    return asyncio.run(run_case())


def test_block_time_over_http():
    received = []
    app = make_app({"getBlockTime": 1_700_000_000}, received)

    result = run_against(app, lambda api: api.aget_block_time(100))

    assert result == BlockTimestamp(1_700_000_000)
    assert received[0]["jsonrpc"] == "2.0"
    assert received[0]["method"] == "getBlockTime"
    assert received[0]["params"] == [100]


def test_null_block_time_over_http():
    app = make_app({"getBlockTime": None})
    assert run_against(app, lambda api: api.aget_block_time(42)) is None


def test_json_rpc_error_is_raised_without_retry():
    attempts = {}
    app = make_app({"getBlockTime": {"error": {"code": -32009, "message": "Slot 7 was skipped"}}}, attempts=attempts)

    with pytest.raises(RpcResponseError) as exc_info:
        run_against(app, lambda api: api.aget_block_time(7), retry_stop_delay=1, retry_wait=0.01)

    assert exc_info.value.code == -32009
    assert exc_info.value.message == "Slot 7 was skipped"
    assert attempts["count"] == 1


def test_transport_errors_are_retried():
    attempts = {}
    app = make_app({"getSlot": 300}, failures_before_success=2, attempts=attempts)

    assert run_against(app, lambda api: api.aget_slot(), retry_stop_delay=5, retry_wait=0.01) == 300
    assert attempts["count"] == 3


def test_transport_error_surfaces_after_retries_run_out():
    app = make_app({"getSlot": 300}, failures_before_success=1000)

    with pytest.raises(RpcTransportError) as exc_info:
        run_against(app, lambda api: api.aget_slot(), retry_stop_delay=0.05, retry_wait=0.01)
    assert exc_info.value.status == 503


def test_invalid_json_is_transport_error():
    app = make_app({"getSlot": "<garbage>"})
    with pytest.raises(RpcTransportError):
        run_against(app, lambda api: api.aget_slot())


def test_unexpected_result_shape_is_decode_error():
    app = make_app({"getBlockTime": "yesterday"})
    with pytest.raises(WireDecodeError):
        run_against(app, lambda api: api.aget_block_time(1))


def test_callback_form_over_http_completes_once():
    app = make_app({"getBlockTime": None})

    async def body(api):
        results = []
        done = asyncio.Event()

        def on_complete(result):
            results.append(result)
            done.set()

        api.get_block_time(42, on_complete)
        assert api.router.in_flight == 1
        await done.wait()
        await asyncio.sleep(0.01)
        assert api.router.in_flight == 0
        return results

    assert run_against(app, body) == [Success(None)]


def test_request_without_loop_completes_with_failure():
    api = Api(HttpRouter(AsyncRpcClient("http://127.0.0.1:1")))
    results = []

    api.get_block_time(1, results.append)

    assert len(results) == 1
    assert isinstance(results[0], Failure)
    assert isinstance(results[0].error, RuntimeError)


class HangingRpc:
    async def rpc_valid_request(self, method, params, enable_logging=True):
        await asyncio.Event().wait()

    async def close(self):
        pass


def test_cancelled_call_completes_once_with_failure():
    async def run_case():
        router = HttpRouter(HangingRpc())
        results = []
        done = asyncio.Event()

        def on_complete(result):
            results.append(result)
            done.set()

        Api(router).get_block_time(5, on_complete)
        await asyncio.sleep(0)
        for task in list(router._in_flight):
            task.cancel()
        await done.wait()
        await asyncio.sleep(0.01)
        return router, results

    router, results = asyncio.run(run_case())

    assert len(results) == 1
    assert isinstance(results[0], Failure)
    assert isinstance(results[0].error, asyncio.CancelledError)
    assert router.in_flight == 0


def test_router_dispatches_onto_loop_from_another_thread():
    loop = asyncio.new_event_loop()
    thread = threading.Thread(target=loop.run_forever, daemon=True)
    thread.start()
    try:
        server = TestServer(make_app({"getBlockTime": 1_700_000_000}))
        asyncio.run_coroutine_threadsafe(server.start_server(), loop).result(5)
        rpc = AsyncRpcClient(str(server.make_url("/")), retry_stop_delay=0)
        api = Api(HttpRouter(rpc, loop=loop))

        results = []
        done = threading.Event()

        def on_complete(result):
            results.append(result)
            done.set()

        api.get_block_time(100, on_complete)
        assert done.wait(5)
        assert results == [Success(BlockTimestamp(1_700_000_000))]

        asyncio.run_coroutine_threadsafe(rpc.close(), loop).result(5)
        asyncio.run_coroutine_threadsafe(server.close(), loop).result(5)
    finally:
        loop.call_soon_threadsafe(loop.stop)
        thread.join(5)
        loop.close()
