from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, Optional

from .application.config import GateConfig
from .domain.constants import DEFAULT_HEADER_SCHEME, DEFAULT_LEEWAY_SECONDS, DEFAULT_QUERY_NAME
from .domain.exceptions import ConfigError


@dataclass(slots=True)
class JWTAuthSettings:
    """
    Environment-level settings for the gate.

    Host code decides how to construct this (env, config file, etc.);
    `settings_from_env` covers the common case.
    """
    secret: Optional[str] = None
    public_key_file: Optional[str] = None
    jwks_uri: Optional[str] = None
    algorithms: List[str] = field(default_factory=lambda: ["HS256"])
    audience: Optional[str] = None
    issuer: Optional[str] = None
    leeway: float = DEFAULT_LEEWAY_SECONDS
    verify_exp: bool = True

    token_required: bool = False
    header_name: Optional[str] = DEFAULT_HEADER_SCHEME
    query_name: Optional[str] = DEFAULT_QUERY_NAME

    def key(self) -> Any:
        if self.public_key_file:
            return Path(self.public_key_file).read_text(encoding="utf-8")
        return self.secret

    def decode_args(self) -> dict[str, Any]:
        args: dict[str, Any] = {
            "algorithms": list(self.algorithms),
            "leeway": self.leeway,
            "verify_exp": self.verify_exp,
        }
        if self.jwks_uri:
            args["jwks_uri"] = self.jwks_uri
        else:
            args["key"] = self.key()
        if self.audience:
            args["audience"] = self.audience
        if self.issuer:
            args["issuer"] = self.issuer
        return args

    def to_gate_config(self) -> GateConfig:
        return GateConfig.prepare(
            decode_args=self.decode_args(),
            token_header_name=self.header_name,
            token_query_name=self.query_name,
            token_required=self.token_required,
        )


def settings_from_env() -> JWTAuthSettings:
    def _bool(key: str, default: bool) -> bool:
        raw = os.getenv(key)
        if raw is None:
            return default
        return str(raw).strip().lower() in {"1", "true", "yes", "on"}

    def _split_csv(key: str) -> list[str]:
        raw = os.getenv(key)
        if not raw:
            return []
        return [x.strip() for x in raw.split(",") if x and x.strip()]

    secret = os.getenv("JWT_AUTH_SECRET")
    public_key_file = os.getenv("JWT_AUTH_PUBLIC_KEY_FILE")
    jwks_uri = os.getenv("JWT_AUTH_JWKS_URI")
    if not any([secret, public_key_file, jwks_uri]):
        raise ConfigError(
            "Missing JWT key material: set one of "
            "JWT_AUTH_SECRET, JWT_AUTH_PUBLIC_KEY_FILE, JWT_AUTH_JWKS_URI"
        )

    raw_leeway = os.getenv("JWT_AUTH_LEEWAY")
    try:
        leeway = float(raw_leeway) if raw_leeway else DEFAULT_LEEWAY_SECONDS
    except ValueError as exc:
        raise ConfigError(f"JWT_AUTH_LEEWAY is not a number: {raw_leeway!r}") from exc

    return JWTAuthSettings(
        secret=secret,
        public_key_file=public_key_file,
        jwks_uri=jwks_uri,
        algorithms=_split_csv("JWT_AUTH_ALGORITHMS") or ["HS256"],
        audience=os.getenv("JWT_AUTH_AUDIENCE") or None,
        issuer=os.getenv("JWT_AUTH_ISSUER") or None,
        leeway=leeway,
        verify_exp=_bool("JWT_AUTH_VERIFY_EXP", True),
        token_required=_bool("JWT_AUTH_TOKEN_REQUIRED", False),
        # an empty value disables the lookup
        header_name=os.getenv("JWT_AUTH_HEADER_NAME", DEFAULT_HEADER_SCHEME),
        query_name=os.getenv("JWT_AUTH_QUERY_NAME", DEFAULT_QUERY_NAME),
    )


def config_from_env() -> GateConfig:
    """Convenience wrapper: env-configured settings -> GateConfig."""
    return settings_from_env().to_gate_config()
