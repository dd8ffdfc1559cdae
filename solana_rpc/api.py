# Python Imports
import logging
from typing import Any, Optional

# Project Imports
from solana_rpc.bridge import await_completion
from solana_rpc.config import RpcConfig, load_config
from solana_rpc.errors import WireDecodeError
from solana_rpc.result import Completion, Failure, Result, Success
from solana_rpc.router import HttpRouter, Router
from solana_rpc.rpc_client import AsyncRpcClient
from solana_rpc.wire import BlockTimestamp, decode_wire, timestamp_from_wire, value_from_context

logger = logging.getLogger(__name__)


class Api:
    def __init__(self, router: Router):
        self.router = router

    @classmethod
    def connect(cls, rpc_url: str, **kwargs) -> "Api":
        return cls(HttpRouter(AsyncRpcClient(rpc_url, **kwargs)))

    @classmethod
    def from_config(cls, config: Optional[RpcConfig] = None) -> "Api":
        config = config or load_config()
        logger.info(f"Using Solana RPC endpoint {config.rpc_url}")
        return cls(HttpRouter(AsyncRpcClient.from_config(config)))

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any):
        await self.close()

    async def close(self):
        close = getattr(self.router, "close", None)
        if close is not None:
            await close()

    def _request(self, method: str, params: list, wire_type: Any, on_complete: Completion, transform=None):
        def _complete(result: Result) -> None:
            if transform is not None and isinstance(result, Success):
                try:
                    result = result.map(transform)
                except WireDecodeError as e:
                    result = Failure(e)
            on_complete(result)

        self.router.request(method, params, wire_type, _complete)

    # getBlockTime

    def get_block_time(self, block: int, on_complete: Completion) -> None:
        """
        Returns the estimated production time of a block.

        Each validator reports its UTC time to the ledger at a regular interval
        by adding a timestamp to a Vote for a particular block. A block's time
        is the stake-weighted mean of the Vote timestamps in a set of recent
        blocks recorded on the ledger.

        ``on_complete`` receives ``Success(BlockTimestamp)``, ``Success(None)``
        when no timestamp is available for the block, or ``Failure(error)``.
        """
        self._request("getBlockTime", [block], Optional[int], on_complete, timestamp_from_wire)

    async def aget_block_time(self, block: int) -> Optional[BlockTimestamp]:
        return await await_completion(lambda resume: self.get_block_time(block, resume))

    # getSlot

    def get_slot(self, on_complete: Completion) -> None:
        self._request("getSlot", [], int, on_complete)

    async def aget_slot(self) -> int:
        return await await_completion(self.get_slot)

    # getBlockHeight

    def get_block_height(self, on_complete: Completion) -> None:
        self._request("getBlockHeight", [], int, on_complete)

    async def aget_block_height(self) -> int:
        return await await_completion(self.get_block_height)

    # getFirstAvailableBlock

    def get_first_available_block(self, on_complete: Completion) -> None:
        """Slot of the lowest confirmed block that has not been purged from the ledger."""
        self._request("getFirstAvailableBlock", [], int, on_complete)

    async def aget_first_available_block(self) -> int:
        return await await_completion(self.get_first_available_block)

    # getBalance

    def get_balance(self, account: str, on_complete: Completion) -> None:
        """Lamport balance of ``account`` (base-58 public key)."""
        self._request("getBalance", [account], dict, on_complete, _balance_from_wire)

    async def aget_balance(self, account: str) -> int:
        return await await_completion(lambda resume: self.get_balance(account, resume))


def _balance_from_wire(raw: dict) -> int:
    return decode_wire(value_from_context(raw), int)
