# src/pkg_jwt_auth/domain/value_objects.py

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Iterable, Mapping, Optional, Tuple

from .constants import DEFAULT_LEEWAY_SECONDS
from .exceptions import ConfigError


def _normalize(values: Iterable[str] | None) -> Tuple[str, ...]:
    """
    Normalize an iterable of strings into a tuple.
    If a plain string is passed, treat it as a single-element collection.
    """
    if values is None:
        return ()
    if isinstance(values, str):
        return (values,)
    return tuple(values)


@dataclass(frozen=True, slots=True)
class DecodeArgs:
    """
    Verification parameters handed to the JWT library.

    - key:       secret or public key material (or None when `jwks_uri` is set)
    - jwks_uri:  JWKS endpoint to look keys up by `kid`
    - algorithms: accepted signing algorithms
    - audience / issuer: optional `aud` / `iss` checks
    - verify_exp / leeway: expiry check and clock-skew tolerance in seconds
    - require:   claims that must be present

    `decode_payload` and `decode_header` are fixed: only the payload is ever
    returned as claims.
    """

    key: Any = None
    algorithms: Tuple[str, ...] = ()
    audience: Optional[str | Tuple[str, ...]] = None
    issuer: Optional[str] = None
    jwks_uri: Optional[str] = None
    jwks_cache_ttl: int = 300
    verify_exp: bool = True
    leeway: float = DEFAULT_LEEWAY_SECONDS
    require: Tuple[str, ...] = ()
    decode_payload: bool = True
    decode_header: bool = False

    @classmethod
    def resolve(cls, args: "DecodeArgs | Mapping[str, Any]") -> "DecodeArgs":
        """
        Build the effective arguments from a mapping (or another DecodeArgs).

        Forces `decode_payload=True` / `decode_header=False`, keeps caller
        values for `verify_exp` / `leeway` and defaults them otherwise.
        """
        if isinstance(args, DecodeArgs):
            raw = {f.name: getattr(args, f.name) for f in fields(cls)}
        elif isinstance(args, Mapping):
            raw = dict(args)
        else:
            raise ConfigError(
                f"decode_args must be a mapping, got {type(args).__name__}"
            )

        known = {f.name for f in fields(cls)}
        unknown = sorted(set(raw) - known)
        if unknown:
            raise ConfigError(f"Unknown decode_args: {', '.join(unknown)}")

        raw["decode_payload"] = True
        raw["decode_header"] = False
        raw.setdefault("verify_exp", True)
        raw.setdefault("leeway", DEFAULT_LEEWAY_SECONDS)

        audience = raw.get("audience")
        if audience is not None and not isinstance(audience, str):
            raw["audience"] = _normalize(audience)
        raw["algorithms"] = _normalize(raw.get("algorithms"))
        raw["require"] = _normalize(raw.get("require"))

        resolved = cls(**raw)

        if resolved.key is None and not resolved.jwks_uri:
            raise ConfigError("decode_args needs either 'key' or 'jwks_uri'")
        if not resolved.algorithms:
            raise ConfigError("decode_args needs a non-empty 'algorithms' list")

        return resolved
