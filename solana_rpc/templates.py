# Python Imports
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Generic, Optional, TypeVar, Union

# Project Imports
from solana_rpc.api import Api
from solana_rpc.bridge import await_completion
from solana_rpc.result import Completion
from solana_rpc.wire import BlockTimestamp

S = TypeVar("S")


class ApiTemplate(ABC, Generic[S]):
    """
    A single RPC call and its parameters, kept as data until it is performed
    against an ``Api``. ``S`` is the value a successful call completes with.
    """

    @abstractmethod
    def perform(self, api: Api, completion: Completion) -> None:
        ...

    async def aperform(self, api: Api) -> S:
        return await await_completion(lambda resume: self.perform(api, resume))


@dataclass(frozen=True)
class GetBlockTime(ApiTemplate[Optional[BlockTimestamp]]):
    block: int

    def perform(self, api: Api, completion: Completion) -> None:
        api.get_block_time(self.block, completion)


@dataclass(frozen=True)
class GetSlot(ApiTemplate[int]):
    def perform(self, api: Api, completion: Completion) -> None:
        api.get_slot(completion)


@dataclass(frozen=True)
class GetBlockHeight(ApiTemplate[int]):
    def perform(self, api: Api, completion: Completion) -> None:
        api.get_block_height(completion)


@dataclass(frozen=True)
class GetFirstAvailableBlock(ApiTemplate[int]):
    def perform(self, api: Api, completion: Completion) -> None:
        api.get_first_available_block(completion)


@dataclass(frozen=True)
class GetBalance(ApiTemplate[int]):
    account: str

    def perform(self, api: Api, completion: Completion) -> None:
        api.get_balance(self.account, completion)


AnyTemplate = Union[GetBlockTime, GetSlot, GetBlockHeight, GetFirstAvailableBlock, GetBalance]
