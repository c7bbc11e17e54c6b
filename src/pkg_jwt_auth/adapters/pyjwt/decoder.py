from __future__ import annotations

from typing import Any, Mapping, Optional

import jwt
from jwt.exceptions import ExpiredSignatureError, PyJWTError

from ...domain.exceptions import InvalidTokenError, TokenExpiredError
from ...domain.ports import TokenDecoder
from ...domain.value_objects import DecodeArgs
from .jwks import JWKSKeyResolver


class PyJWTDecoder(TokenDecoder):
    """
    Adapter implementing TokenDecoder port using PyJWT.

    Infrastructure layer:
    - Knows about JWT structure and verification.
    - Optionally resolves keys from a JWKS endpoint.
    """

    def __init__(
        self,
        args: DecodeArgs | Mapping[str, Any],
        key_resolver: Optional[JWKSKeyResolver] = None,
    ) -> None:
        self._args = DecodeArgs.resolve(args)

        if key_resolver is None and self._args.jwks_uri:
            key_resolver = JWKSKeyResolver(
                self._args.jwks_uri,
                cache_ttl_seconds=self._args.jwks_cache_ttl,
            )
        self._key_resolver = key_resolver

    @property
    def args(self) -> DecodeArgs:
        return self._args

    # ------------------------------------------------------------------ #
    # Port implementation
    # ------------------------------------------------------------------ #

    def decode(self, token: str, context: Any = None) -> Mapping[str, Any]:
        """
        Decode and validate JWT token.

        Returns:
            Mapping of token claims (the payload only).

        Raises:
            TokenExpiredError
            InvalidTokenError
        """
        args = self._args
        key = args.key
        if self._key_resolver is not None:
            key = self._key_resolver.resolve(token)

        options = {
            "verify_signature": True,
            "verify_exp": args.verify_exp,
            "verify_aud": args.audience is not None,
            "verify_iss": args.issuer is not None,
            "require": list(args.require),
        }

        try:
            return jwt.decode(
                token,
                key,
                algorithms=list(args.algorithms),
                options=options,
                audience=args.audience,
                issuer=args.issuer,
                leeway=args.leeway,
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError(str(exc)) from exc
        except (PyJWTError, ValueError, TypeError) as exc:
            # raised by cryptography when the key does not fit the token alg
            raise InvalidTokenError(str(exc)) from exc
