from __future__ import annotations

import threading
import time
from typing import Any, Dict, List, Optional

import jwt
import requests
import structlog
from requests import Session

from ...domain.exceptions import InvalidTokenError

logger = structlog.get_logger(__name__)


class JWKSKeyResolver:
    """
    Looks up verification keys in a JWKS document by `kid`.

    Keys are cached in memory for `cache_ttl_seconds`; an unknown `kid`
    forces one refetch (key rotation) before giving up.
    """

    def __init__(
        self,
        jwks_uri: str,
        cache_ttl_seconds: int = 300,
        session: Optional[Session] = None,
        timeout: float = 10.0,
    ) -> None:
        self._jwks_uri = jwks_uri
        self._cache_ttl = cache_ttl_seconds
        self._timeout = timeout

        self._session = session or Session()
        self._jwks_keys: Optional[List[Dict[str, Any]]] = None
        self._jwks_last_fetched: float = 0.0
        self._lock = threading.Lock()

    @property
    def jwks_uri(self) -> str:
        return self._jwks_uri

    def resolve(self, token: str) -> Any:
        """
        Return the key object matching the token's `kid` header.

        Raises:
            InvalidTokenError
        """
        try:
            kid = jwt.get_unverified_header(token).get("kid")
        except jwt.PyJWTError as exc:
            raise InvalidTokenError(f"Invalid token header: {exc}") from exc

        key = self._find(kid, self._fetch_jwks_keys())
        if key is None:
            key = self._find(kid, self._fetch_jwks_keys(force=True))
        if key is None:
            raise InvalidTokenError("No matching key found in JWKS")

        try:
            return jwt.PyJWK(key).key
        except (jwt.PyJWTError, ValueError, TypeError, KeyError) as exc:
            raise InvalidTokenError(f"Unusable JWKS key: {exc}") from exc

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _find(kid: Optional[str], keys: List[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
        if kid is None and len(keys) == 1:
            return keys[0]
        return next((k for k in keys if k.get("kid") == kid), None)

    @staticmethod
    def _parse_keys(body: Any) -> List[Dict[str, Any]]:
        if not isinstance(body, dict) or not isinstance(body.get("keys"), list):
            raise InvalidTokenError("Malformed JWKS document")
        return [k for k in body["keys"] if isinstance(k, dict)]

    def _fetch_jwks_keys(self, force: bool = False) -> List[Dict[str, Any]]:
        """
        Fetch JWKS keys with simple in-memory caching.

        The lock only guards the cache; the HTTP fetch runs outside it.
        """
        with self._lock:
            if (
                not force
                and self._jwks_keys is not None
                and (time.time() - self._jwks_last_fetched) < self._cache_ttl
            ):
                return self._jwks_keys

        try:
            response = self._session.get(self._jwks_uri, timeout=self._timeout)
            response.raise_for_status()
            body = response.json()
        except (requests.RequestException, ValueError) as exc:
            raise InvalidTokenError(f"Cannot fetch JWKS: {exc}") from exc

        keys = self._parse_keys(body)

        with self._lock:
            self._jwks_keys = keys
            self._jwks_last_fetched = time.time()

        logger.debug(
            "jwks_keys_fetched",
            jwks_uri=self._jwks_uri,
            key_count=len(keys),
        )
        return keys
