"""
pkg_jwt_auth

Bearer-token (JWT) authentication gate for ASGI applications, with a
framework-agnostic core that can be reused from other integrations.
"""

__version__ = "0.1.0"

from .domain.constants import Outcome
from .domain.entities import GateDecision, TokenContext
from .domain.exceptions import (
    ConfigError,
    AuthenticationError,
    MissingTokenError,
    DecodeError,
    TokenExpiredError,
    InvalidTokenError,
)
from .domain.value_objects import DecodeArgs
from .domain.ports import TokenDecoder

from .application.config import GateConfig
from .application.use_cases.extract import TokenExtractor
from .application.use_cases.authenticate import AuthenticateRequestUseCase

from .adapters.callback.decoder import CallbackDecoder
from .adapters.pyjwt.decoder import PyJWTDecoder
from .adapters.pyjwt.jwks import JWKSKeyResolver

from .integrations.asgi import JWTAuthMiddleware, unauthorized
from .settings import JWTAuthSettings, settings_from_env, config_from_env

__all__ = [
    "__version__",
    # domain core
    "Outcome",
    "GateDecision",
    "TokenContext",
    "DecodeArgs",
    "TokenDecoder",
    # exceptions
    "ConfigError",
    "AuthenticationError",
    "MissingTokenError",
    "DecodeError",
    "TokenExpiredError",
    "InvalidTokenError",
    # configuration
    "GateConfig",
    "JWTAuthSettings",
    "settings_from_env",
    "config_from_env",
    # use cases
    "TokenExtractor",
    "AuthenticateRequestUseCase",
    # adapters
    "CallbackDecoder",
    "PyJWTDecoder",
    "JWKSKeyResolver",
    # integrations
    "JWTAuthMiddleware",
    "unauthorized",
]
