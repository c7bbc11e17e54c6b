from __future__ import annotations

from typing import Any, Optional

import structlog
from starlette import status
from starlette.concurrency import run_in_threadpool
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Receive, Scope, Send
from starlette.websockets import WebSocketClose

from ...application.config import GateConfig
from ...application.use_cases.authenticate import AuthenticateRequestUseCase
from ...domain.entities import TokenContext
from .responses import unauthorized

logger = structlog.get_logger(__name__)


class JWTAuthMiddleware:
    """
    ASGI middleware authenticating requests with a JSON Web Token.

    Usage:

        app = Starlette(routes=routes)
        app.add_middleware(
            JWTAuthMiddleware,
            decode_args={"key": settings.JWT_SECRET, "algorithms": ["HS256"]},
            token_required=True,
        )

        async def me(request):
            return JSONResponse(request.state.claims)

    Options are those of `GateConfig.prepare`; alternatively pass a ready
    `config=GateConfig(...)`.

    On success the downstream app receives a copy of the scope whose
    `state` carries the raw token and the decoded claims (under the
    configured key names). On failure a 401 is answered and the downstream
    app is never called.
    """

    def __init__(
            self,
            app: ASGIApp,
            config: Optional[GateConfig] = None,
            **options: Any,
    ) -> None:
        if config is not None and options:
            raise TypeError("Pass either config or gate options, not both")
        self.app = app
        self.config = config or GateConfig.prepare(**options)
        self.use_case = AuthenticateRequestUseCase(self.config)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket"):
            await self.app(scope, receive, send)
            return

        conn = HTTPConnection(scope)
        decision = await run_in_threadpool(
            self.use_case.execute,
            conn.headers.get("Authorization"),
            conn.query_params,
            conn,
        )

        if not decision.forwarded:
            await self._reject(scope, receive, send, decision.message)
            return

        if decision.auth is not None:
            scope = self.augment_scope(scope, decision.auth)

        await self.app(scope, receive, send)

    def augment_scope(self, scope: Scope, auth: TokenContext) -> Scope:
        """Return a copy of `scope` whose state carries token and claims."""
        state = dict(scope.get("state") or {})
        state[self.config.token_key] = auth.token
        state[self.config.claims_key] = auth.claims
        return {**scope, "state": state}

    async def _reject(
            self,
            scope: Scope,
            receive: Receive,
            send: Send,
            message: Optional[str],
    ) -> None:
        if scope["type"] == "websocket":
            close = WebSocketClose(
                code=status.WS_1008_POLICY_VIOLATION,
                reason=message or "",
            )
            await close(scope, receive, send)
            return

        response = unauthorized(message)
        await response(scope, receive, send)
