from __future__ import annotations

from typing import Any

from .deps import FastAPIJWTAuth
from ...application.config import GateConfig


def create_fastapi_jwt_auth(**options: Any) -> FastAPIJWTAuth:
    """
    High-level helper for FastAPI apps:

    - Builds a GateConfig from the same options as JWTAuthMiddleware
    - Wraps it in FastAPIJWTAuth, exposing dependencies like:

        jwt_auth.get_claims
        jwt_auth.get_optional_claims
        jwt_auth.get_token

    Example:

        jwt_auth = create_fastapi_jwt_auth(
            decode_args={"key": settings.JWT_SECRET, "algorithms": ["HS256"]},
        )

        @app.get("/me")
        def me(claims: dict = Depends(jwt_auth.get_claims)):
            return {"sub": claims["sub"]}
    """
    return FastAPIJWTAuth(config=GateConfig.prepare(**options))


__all__ = ["FastAPIJWTAuth", "create_fastapi_jwt_auth"]
