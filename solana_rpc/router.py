# Python Imports
import asyncio
import logging
from typing import Any, Optional, Protocol, Sequence, Set

# Project Imports
from solana_rpc.result import Completion, Failure, Success
from solana_rpc.rpc_client import AsyncRpcClient
from solana_rpc.wire import decode_wire

logger = logging.getLogger(__name__)


class Router(Protocol):
    """
    Sends one JSON-RPC call and completes with a ``Result`` holding the raw
    result decoded as ``wire_type``.

    ``on_complete`` must be invoked exactly once per request, from whatever
    thread or loop the router runs its I/O on. Errors are delivered as
    ``Failure`` and are never raised out of ``request``.
    """

    def request(self, method: str, parameters: Sequence[Any], wire_type: Any, on_complete: Completion) -> None:
        ...


class HttpRouter:
    def __init__(self, rpc: AsyncRpcClient, loop: Optional[asyncio.AbstractEventLoop] = None,
                 enable_logging: bool = True):
        self.rpc = rpc
        self.loop = loop
        self.enable_logging = enable_logging
        self._in_flight: Set[asyncio.Future] = set()

    async def close(self):
        await self.rpc.close()

    async def _call(self, method: str, parameters: Sequence[Any], wire_type: Any) -> Any:
        response = await self.rpc.rpc_valid_request(method, list(parameters), enable_logging=self.enable_logging)
        return decode_wire(response["result"], wire_type)

    def request(self, method: str, parameters: Sequence[Any], wire_type: Any, on_complete: Completion) -> None:
        logger.debug(f"Dispatching {method} with params {list(parameters)}")
        coro = self._call(method, parameters, wire_type)

        try:
            running = asyncio.get_running_loop()
        except RuntimeError:
            running = None

        if self.loop is not None and self.loop is not running:
            fut = asyncio.run_coroutine_threadsafe(coro, self.loop)
        elif running is not None:
            fut = running.create_task(coro)
        else:
            coro.close()
            logger.error(f"Cannot dispatch {method}: no running event loop and no explicit loop")
            on_complete(Failure(RuntimeError("HttpRouter.request needs a running event loop or an explicit loop")))
            return

        self._in_flight.add(fut)

        def _on_done(f, m=method) -> None:
            self._in_flight.discard(f)
            if f.cancelled():
                logger.debug(f"{m} was cancelled")
                on_complete(Failure(asyncio.CancelledError()))
                return
            error = f.exception()
            if error is not None:
                logger.debug(f"{m} failed: {error!r}")
                on_complete(Failure(error))
            else:
                on_complete(Success(f.result()))

        fut.add_done_callback(_on_done)

    @property
    def in_flight(self) -> int:
        return len(self._in_flight)
