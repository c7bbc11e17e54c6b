from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from fastapi import HTTPException, Request, status

from ...application.config import GateConfig
from ...application.use_cases.authenticate import AuthenticateRequestUseCase
from ...domain.constants import AUTHORIZATION_REQUIRED, DECODE_FAILURE_PREFIX
from ...domain.entities import TokenContext
from ...domain.exceptions import DecodeError, MissingTokenError


@dataclass(slots=True)
class FastAPIJWTAuth:
    """
    FastAPI dependencies built on the same gate configuration as
    `JWTAuthMiddleware`.

    If the middleware already authenticated the request, the token and
    claims are read back from `request.state`; otherwise the dependency
    runs the gate itself.
    """

    config: GateConfig
    use_case: AuthenticateRequestUseCase = field(init=False)

    def __post_init__(self) -> None:
        self.use_case = AuthenticateRequestUseCase(self.config)

    # ------------------------------------------------------------------ #
    # helpers
    # ------------------------------------------------------------------ #

    def _from_state(self, request: Request) -> Optional[TokenContext]:
        state = request.scope.get("state") or {}
        if self.config.token_key in state and self.config.claims_key in state:
            return TokenContext(
                token=state[self.config.token_key],
                claims=state[self.config.claims_key],
            )
        return None

    def _authenticate(self, request: Request, required: bool) -> Optional[TokenContext]:
        auth = self._from_state(request)
        if auth is not None:
            return auth

        try:
            auth = self.use_case.authenticate(
                request.headers.get("Authorization"),
                request.query_params,
                request,
            )
        except MissingTokenError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=str(exc),
            ) from exc
        except DecodeError as exc:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=DECODE_FAILURE_PREFIX + str(exc),
            ) from exc

        if auth is None and required:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=AUTHORIZATION_REQUIRED,
            )
        return auth

    # ------------------------------------------------------------------ #
    # dependencies
    # ------------------------------------------------------------------ #

    def get_claims(self, request: Request) -> Mapping[str, Any]:
        """Dependency: require a valid token, return its claims."""
        auth = self._authenticate(request, required=True)
        return auth.claims

    def get_optional_claims(self, request: Request) -> Mapping[str, Any] | None:
        """Dependency: claims if a token was sent, None otherwise."""
        auth = self._authenticate(request, required=False)
        return auth.claims if auth is not None else None

    def get_token(self, request: Request) -> str:
        """Dependency: require a valid token, return it raw."""
        auth = self._authenticate(request, required=True)
        return auth.token
