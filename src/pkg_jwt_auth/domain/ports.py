from __future__ import annotations

from typing import Protocol, Mapping, Any


class TokenDecoder(Protocol):
    """
    Port for decoding a bearer token into claims.

    Implementations live in the adapters layer (PyJWT decoder, callback).
    """

    def decode(self, token: str, context: Any = None) -> Mapping[str, Any]:
        """
        Decode and verify the given token.

        `context` is whatever the integration considers the request context
        (the Starlette connection for the ASGI middleware).

        Raises:
          - TokenExpiredError
          - InvalidTokenError
          - or any other DecodeError
        """
        ...
