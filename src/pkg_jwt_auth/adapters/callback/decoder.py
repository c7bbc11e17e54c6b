from __future__ import annotations

import inspect
from typing import Any, Callable, Mapping

from ...domain.exceptions import ConfigError, DecodeError
from ...domain.ports import TokenDecoder

DecodeCallback = Callable[[str, Any], Mapping[str, Any]]


class CallbackDecoder(TokenDecoder):
    """
    Adapter implementing TokenDecoder by delegating to an application callback.

    The callback receives `(token, context)` and returns the claims. Any
    exception it raises is reported as a DecodeError carrying its message.
    """

    def __init__(self, callback: DecodeCallback) -> None:
        if not callable(callback):
            raise ConfigError("decode_callback must be callable")
        if inspect.iscoroutinefunction(callback) or inspect.iscoroutinefunction(
            getattr(callback, "__call__", None)
        ):
            raise ConfigError("decode_callback must be a synchronous callable")
        self._callback = callback

    @property
    def callback(self) -> DecodeCallback:
        return self._callback

    def decode(self, token: str, context: Any = None) -> Mapping[str, Any]:
        try:
            return self._callback(token, context)
        except DecodeError:
            raise
        except Exception as exc:
            raise DecodeError(str(exc)) from exc
