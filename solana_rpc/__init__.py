from solana_rpc.api import Api
from solana_rpc.bridge import await_completion
from solana_rpc.config import RpcConfig, load_config
from solana_rpc.errors import (BridgeResumedTwiceError, RpcResponseError, RpcTransportError, SolanaRpcError,
                               WireDecodeError)
from solana_rpc.executor import perform_templates
from solana_rpc.result import Failure, Result, Success
from solana_rpc.router import HttpRouter, Router
from solana_rpc.rpc_client import AsyncRpcClient
from solana_rpc.templates import (ApiTemplate, GetBalance, GetBlockHeight, GetBlockTime, GetFirstAvailableBlock,
                                  GetSlot)
from solana_rpc.wire import BlockTimestamp, timestamp_from_wire
