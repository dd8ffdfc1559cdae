# Python Imports
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar, Union

# Project Imports

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Success(Generic[T]):
    value: T

    @property
    def is_success(self) -> bool:
        return True

    def unwrap(self) -> T:
        return self.value

    def map(self, fn: Callable[[T], U]) -> "Success[U]":
        return Success(fn(self.value))


@dataclass(frozen=True)
class Failure:
    error: BaseException

    @property
    def is_success(self) -> bool:
        return False

    def unwrap(self):
        # Re-raise the very same instance so callers can compare by identity
        raise self.error

    def map(self, fn: Callable) -> "Failure":
        return self


Result = Union[Success[T], Failure]
Completion = Callable[[Result], None]
