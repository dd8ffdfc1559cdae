# Python Imports
import asyncio
import itertools
import json
import logging
from typing import Any, List, Optional
from aiohttp import ClientSession, ClientTimeout, ClientError, ContentTypeError
from tenacity import AsyncRetrying, stop_after_delay, wait_fixed, retry_if_exception_type

# Project Imports
from solana_rpc.config import RpcConfig
from solana_rpc.errors import RpcResponseError, RpcTransportError, WireDecodeError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (ClientError, asyncio.TimeoutError, RpcTransportError)


class AsyncRpcClient:
    def __init__(self, rpc_url: str, session: Optional[ClientSession] = None, timeout: float = 10,
                 retry_stop_delay: float = 10, retry_wait: float = 0.5):
        self.rpc_url = rpc_url
        self.timeout = timeout
        self.retry_stop_delay = retry_stop_delay
        self.retry_wait = retry_wait
        self._owns_session = session is None
        self._session = session
        self._ids = itertools.count()

    @classmethod
    def from_config(cls, config: RpcConfig, session: Optional[ClientSession] = None) -> "AsyncRpcClient":
        return cls(config.rpc_url, session=session, timeout=config.timeout,
                   retry_stop_delay=config.retry_stop_delay, retry_wait=config.retry_wait)

    @property
    def session(self) -> ClientSession:
        # Created lazily so the session binds to the loop that first uses it
        if self._session is None:
            self._session = ClientSession(timeout=ClientTimeout(total=self.timeout))
        return self._session

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any):
        await self.close()

    async def close(self):
        if self._owns_session and self._session is not None:
            await self._session.close()
            self._session = None

    def _check_key_in_json(self, data: dict, key: str) -> Any:
        if key not in data:
            raise WireDecodeError(f"Key '{key}' missing in response: {data}", raw=data)
        return data[key]

    def verify_is_valid_json_rpc_response(self, data: dict, request_id: Optional[int] = None):
        self._check_key_in_json(data, "result")
        if request_id is not None and str(data.get("id")) != str(request_id):
            raise WireDecodeError(f"Expected ID {request_id}, got {data.get('id')}", raw=data)

    async def _post(self, payload: dict, enable_logging: bool) -> dict:
        async with self.session.post(self.rpc_url, json=payload) as response:
            resp_text = await response.text()

            if response.status != 200:
                raise RpcTransportError(f"Bad HTTP status: {response.status}, body: {resp_text}",
                                        status=response.status, body=resp_text)

            try:
                resp_json = await response.json(content_type=None)
            except (json.JSONDecodeError, ContentTypeError):
                raise RpcTransportError(f"Invalid JSON in response: {resp_text}",
                                        status=response.status, body=resp_text)

            if enable_logging:
                logger.debug(f"Received response: {json.dumps(resp_json, sort_keys=True)}")

            if not isinstance(resp_json, dict):
                raise WireDecodeError(f"Expected a JSON-RPC object, got: {resp_text}", raw=resp_json)

            return resp_json

    async def rpc_request(self, method: str, params: Optional[List] = None, request_id: Optional[int] = None,
                          enable_logging: bool = True) -> dict:
        if request_id is None:
            request_id = next(self._ids)

        payload = {"jsonrpc": "2.0", "method": method, "id": request_id, "params": params or []}

        if enable_logging:
            logger.debug(f"Sending async POST to {self.rpc_url} with data: {json.dumps(payload, sort_keys=True)}")

        retrying = AsyncRetrying(stop=stop_after_delay(self.retry_stop_delay), wait=wait_fixed(self.retry_wait),
                                 reraise=True, retry=retry_if_exception_type(RETRYABLE_ERRORS))
        async for attempt in retrying:
            with attempt:
                if attempt.retry_state.attempt_number > 1:
                    logger.debug(f"Retrying {method} (attempt {attempt.retry_state.attempt_number})")
                resp_json = await self._post(payload, enable_logging)

        # JSON-RPC errors are answers from the node, not transport failures, so they are not retried
        if "error" in resp_json:
            raise RpcResponseError.from_json(resp_json["error"])

        return resp_json

    async def rpc_valid_request(self, method: str, params: Optional[List] = None, request_id: Optional[int] = None,
                                enable_logging: bool = True) -> dict:
        if request_id is None:
            request_id = next(self._ids)
        resp_json = await self.rpc_request(method, params, request_id, enable_logging=enable_logging)
        self.verify_is_valid_json_rpc_response(resp_json, request_id)
        return resp_json
