"""
Pytest bootstrap and router test doubles.
"""

import sys
import threading
from pathlib import Path
from typing import Any, Callable, Optional

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from solana_rpc.api import Api  # noqa: E402
from solana_rpc.result import Failure, Result, Success  # noqa: E402
from solana_rpc.wire import decode_wire  # noqa: E402


class NetworkError(Exception):
    pass


class ScriptedRouter:
    """
    Router double that answers every request with a scripted outcome.

    ``script`` maps a method name to either a raw wire value, an exception
    (delivered as ``Failure``) or a callable ``params -> value``. Wire values
    go through ``decode_wire`` like a real router would.
    """

    def __init__(self, script: Optional[dict] = None, threaded: bool = False, completions: int = 1):
        self.script = dict(script or {})
        self.threaded = threaded
        self.completions = completions
        self.calls = []

    def _outcome(self, method: str, parameters: list, wire_type: Any) -> Result:
        answer = self.script[method]
        if callable(answer) and not isinstance(answer, type):
            answer = answer(parameters)
        if isinstance(answer, BaseException):
            return Failure(answer)
        try:
            return Success(decode_wire(answer, wire_type))
        except Exception as e:
            return Failure(e)

    def request(self, method: str, parameters, wire_type: Any, on_complete: Callable[[Result], None]) -> None:
        self.calls.append((method, list(parameters), wire_type))
        outcome = self._outcome(method, list(parameters), wire_type)

        def _deliver():
            for _ in range(self.completions):
                on_complete(outcome)

        if self.threaded:
            threading.Thread(target=_deliver).start()
        else:
            _deliver()


class SilentRouter:
    def __init__(self):
        self.pending = []

    def request(self, method, parameters, wire_type, on_complete):
        self.pending.append(on_complete)


class Recorder:
    def __init__(self):
        self.results = []

    def __call__(self, result: Result) -> None:
        self.results.append(result)

    @property
    def only(self) -> Result:
        assert len(self.results) == 1
        return self.results[0]


@pytest.fixture
def recorder() -> Recorder:
    return Recorder()


@pytest.fixture
def make_api():
    def _make(script: Optional[dict] = None, **kwargs) -> Api:
        return Api(ScriptedRouter(script, **kwargs))
    return _make
