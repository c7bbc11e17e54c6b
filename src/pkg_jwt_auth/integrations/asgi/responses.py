from __future__ import annotations

from typing import Optional

from starlette.responses import Response

from ...domain.constants import AUTHORIZATION_REQUIRED


def unauthorized(message: Optional[str] = None) -> Response:
    """
    Build the 401 response sent for every rejected request.

    The Content-Type is exactly `text/plain` (no charset parameter).
    """
    body = (message or AUTHORIZATION_REQUIRED).encode("utf-8")
    return Response(
        content=body,
        status_code=401,
        headers={
            "Content-Type": "text/plain",
            "Content-Length": str(len(body)),
        },
    )
