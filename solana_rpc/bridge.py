# Python Imports
import asyncio
import logging
import threading
from typing import Any, Callable

# Project Imports
from solana_rpc.errors import BridgeResumedTwiceError
from solana_rpc.result import Completion, Failure, Result

logger = logging.getLogger(__name__)


class _OneShotResume:
    def __init__(self, future: asyncio.Future):
        self._future = future
        self._loop = future.get_loop()
        self._guard = threading.Lock()
        self._resumed = False

    def __call__(self, result: Result) -> None:
        with self._guard:
            if self._resumed:
                raise BridgeResumedTwiceError(f"Completion delivered more than once; dropped {result!r}")
            self._resumed = True

        try:
            on_loop = asyncio.get_running_loop() is self._loop
        except RuntimeError:
            on_loop = False

        if on_loop:
            self._deliver(result)
        else:
            self._loop.call_soon_threadsafe(self._deliver, result)

    def _deliver(self, result: Result) -> None:
        if self._future.done():
            # The awaiting task went away; nothing left to resume
            return
        if isinstance(result, Failure):
            self._future.set_exception(result.error)
        else:
            self._future.set_result(result.value)


async def await_completion(start: Callable[[Completion], Any]) -> Any:
    """
    Run a callback-style operation and suspend until it completes.

    ``start`` is called immediately with a one-shot ``resume`` callable. The
    value of a ``Success`` is returned; the error of a ``Failure`` is raised
    as the same instance. Calling ``resume`` twice raises
    ``BridgeResumedTwiceError`` at the second call site.
    """
    future = asyncio.get_running_loop().create_future()
    start(_OneShotResume(future))
    return await future
