# Python Imports
from typing import Any, Optional

# Project Imports


class SolanaRpcError(Exception):
    pass


class RpcTransportError(SolanaRpcError):
    def __init__(self, message: str, status: Optional[int] = None, body: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.body = body


class RpcResponseError(SolanaRpcError):
    def __init__(self, code: int, message: str, data: Any = None):
        super().__init__(f"JSON-RPC Error {code}: {message}")
        self.code = code
        self.message = message
        self.data = data

    @classmethod
    def from_json(cls, error: Any) -> "RpcResponseError":
        if not isinstance(error, dict):
            return cls(code=0, message=str(error))
        return cls(code=error.get("code", 0), message=error.get("message", ""), data=error.get("data"))


class WireDecodeError(SolanaRpcError):
    def __init__(self, message: str, raw: Any = None, expected: Any = None):
        super().__init__(message)
        self.raw = raw
        self.expected = expected


class BridgeResumedTwiceError(RuntimeError):
    """Raised when a bridge's resume callback is invoked after it already delivered an outcome."""
