from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..adapters.callback.decoder import CallbackDecoder, DecodeCallback
from ..adapters.pyjwt.decoder import PyJWTDecoder
from ..domain.constants import (
    DEFAULT_CLAIMS_KEY,
    DEFAULT_HEADER_SCHEME,
    DEFAULT_QUERY_NAME,
    DEFAULT_TOKEN_KEY,
)
from ..domain.exceptions import ConfigError
from ..domain.ports import TokenDecoder
from ..domain.value_objects import DecodeArgs

_UNSET: Any = object()


@dataclass(frozen=True, slots=True)
class GateConfig:
    """
    Immutable gate configuration.

    Build it with `GateConfig.prepare(...)`, which applies the defaults and
    validates the decode strategy once, before any request is handled.
    """

    decoder: TokenDecoder
    claims_key: str = DEFAULT_CLAIMS_KEY
    token_key: str = DEFAULT_TOKEN_KEY
    token_header_name: Optional[str] = DEFAULT_HEADER_SCHEME
    token_query_name: Optional[str] = DEFAULT_QUERY_NAME
    token_required: bool = False

    @classmethod
    def prepare(
            cls,
            *,
            decode_args: DecodeArgs | Mapping[str, Any] | None = None,
            decode_callback: DecodeCallback | None = None,
            psgix_claims: str | None = None,
            psgix_token: str | None = None,
            token_header_name: Any = _UNSET,
            token_query_name: Any = _UNSET,
            token_required: bool | None = None,
    ) -> "GateConfig":
        """
        Raises:
            ConfigError if no decode strategy, or both strategies, are given,
            or if the given strategy is unusable.
        """
        if decode_callback is not None and decode_args is not None:
            raise ConfigError(
                "Only one of decode_callback or decode_args may be defined"
            )

        decoder: TokenDecoder
        if decode_callback is not None:
            decoder = CallbackDecoder(decode_callback)
        elif decode_args is not None:
            decoder = PyJWTDecoder(decode_args)
        else:
            raise ConfigError(
                "Either decode_callback or decode_args has to be defined"
            )

        if token_header_name is _UNSET:
            token_header_name = DEFAULT_HEADER_SCHEME
        if token_query_name is _UNSET:
            token_query_name = DEFAULT_QUERY_NAME

        return cls(
            decoder=decoder,
            claims_key=psgix_claims or DEFAULT_CLAIMS_KEY,
            token_key=psgix_token or DEFAULT_TOKEN_KEY,
            # any falsy value disables the lookup
            token_header_name=str(token_header_name) if token_header_name else None,
            token_query_name=str(token_query_name) if token_query_name else None,
            token_required=bool(token_required),
        )
