# Python Imports
import types
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Optional, Union, get_args, get_origin

# Project Imports
from solana_rpc.errors import WireDecodeError

INT64_MIN = -(2 ** 63)
INT64_MAX = 2 ** 63 - 1

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _is_union(wire_type: Any) -> bool:
    return get_origin(wire_type) in (Union, types.UnionType)


def _matches(raw: Any, wire_type: Any) -> bool:
    if wire_type is None or wire_type is type(None):
        return raw is None
    if wire_type is Any:
        return True
    if _is_union(wire_type):
        return any(_matches(raw, member) for member in get_args(wire_type))

    origin = get_origin(wire_type) or wire_type
    if origin is int:
        # JSON booleans decode to bool, which is an int subclass
        return isinstance(raw, int) and not isinstance(raw, bool)
    if origin is float:
        return isinstance(raw, (int, float)) and not isinstance(raw, bool)
    if origin in (str, bool, dict, list):
        return isinstance(raw, origin)
    raise TypeError(f"Unsupported wire type: {wire_type!r}")


def decode_wire(raw: Any, wire_type: Any) -> Any:
    """Check a decoded JSON value against the wire type the call site asked for."""
    if not _matches(raw, wire_type):
        raise WireDecodeError(f"Expected {wire_type!r}, got {type(raw).__name__}: {raw!r}",
                              raw=raw, expected=wire_type)
    return raw


@dataclass(frozen=True, order=True)
class BlockTimestamp:
    """Whole seconds since the Unix epoch, as reported for a block."""
    epoch_seconds: int

    def to_datetime(self) -> datetime:
        # Raises OverflowError outside the range datetime can represent
        return _EPOCH + timedelta(seconds=self.epoch_seconds)

    def __int__(self) -> int:
        return self.epoch_seconds


def timestamp_from_wire(value: Optional[int]) -> Optional[BlockTimestamp]:
    if value is None:
        return None
    if not INT64_MIN <= value <= INT64_MAX:
        raise WireDecodeError(f"Timestamp {value} does not fit a signed 64-bit integer", raw=value, expected="int64")
    return BlockTimestamp(value)


def value_from_context(raw: dict) -> Any:
    # Solana wraps some results as {"context": {"slot": ...}, "value": ...}
    if "value" not in raw:
        raise WireDecodeError(f"Key 'value' missing in response: {raw}", raw=raw)
    return raw["value"]
