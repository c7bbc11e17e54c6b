from __future__ import annotations

from .middleware import JWTAuthMiddleware
from .responses import unauthorized

__all__ = ["JWTAuthMiddleware", "unauthorized"]
