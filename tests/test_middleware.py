import anyio
import jwt
import pytest
from cryptography.hazmat.primitives.asymmetric import ec
from starlette.applications import Starlette
from starlette.responses import JSONResponse, PlainTextResponse
from starlette.routing import Route, WebSocketRoute
from starlette.testclient import TestClient
from starlette.websockets import WebSocket, WebSocketDisconnect

from pkg_jwt_auth.application.config import GateConfig
from pkg_jwt_auth.integrations.asgi import JWTAuthMiddleware, unauthorized


def _accept_all(token, context):
    return {"sub": "bart"}


async def whoami(request):
    state = request.scope.get("state") or {}
    return JSONResponse(
        {
            "token": state.get("token"),
            "claims": state.get("claims"),
            "jwt": state.get("jwt"),
            "jwt_claims": state.get("jwt_claims"),
            "authenticated": "token" in state or "jwt" in state,
        }
    )


async def teapot(request):
    return PlainTextResponse("short and stout", status_code=418, headers={"X-Pot": "1"})


async def ws_endpoint(websocket: WebSocket):
    await websocket.accept()
    await websocket.send_json({"claims": websocket.state.claims})
    await websocket.close()


def _client(**options) -> TestClient:
    options.setdefault("decode_callback", _accept_all)
    app = Starlette(
        routes=[
            Route("/", whoami),
            Route("/teapot", teapot),
            WebSocketRoute("/ws", ws_endpoint),
        ]
    )
    return TestClient(JWTAuthMiddleware(app, **options))


# --- unauthorized helper --------------------------------------------------


def test_unauthorized_default_body():
    response = unauthorized()
    assert response.status_code == 401
    assert response.body == b"Authorization required"
    assert response.headers["content-type"] == "text/plain"
    assert response.headers["content-length"] == str(len("Authorization required"))


def test_unauthorized_content_length_counts_bytes():
    response = unauthorized("Cannot decode JWT: café")
    assert response.headers["content-length"] == str(len("Cannot decode JWT: café".encode("utf-8")))


# --- no token --------------------------------------------------------------


def test_no_token_not_required_forwards_unmodified():
    response = _client().get("/")
    assert response.status_code == 200
    body = response.json()
    assert body["authenticated"] is False
    assert body["token"] is None
    assert body["claims"] is None


def test_no_token_required_returns_401():
    response = _client(token_required=True).get("/")
    assert response.status_code == 401
    assert response.text == "Authorization required"
    assert response.headers["content-type"] == "text/plain"
    assert response.headers["content-length"] == str(len("Authorization required"))


# --- token extraction ------------------------------------------------------


@pytest.mark.parametrize("scheme", ["Bearer", "bearer", "BEARER"])
def test_header_token_is_attached(scheme):
    response = _client().get("/", headers={"Authorization": f"{scheme} abc.def.ghi"})
    assert response.status_code == 200
    assert response.json()["token"] == "abc.def.ghi"
    assert response.json()["claims"] == {"sub": "bart"}


def test_query_token_is_attached():
    response = _client().get("/", params={"token": "abc.def.ghi"})
    assert response.json()["token"] == "abc.def.ghi"


def test_empty_query_token_counts_as_missing():
    response = _client(token_required=True).get("/?token=")
    assert response.status_code == 401
    assert response.text == "Authorization required"


def test_disabled_header_falls_through_to_query():
    client = _client(token_header_name=0)
    response = client.get(
        "/",
        params={"token": "from-query"},
        headers={"Authorization": "Bearer from-header"},
    )
    assert response.json()["token"] == "from-query"


def test_disabled_query_ignores_parameter():
    response = _client(token_query_name=None, token_required=True).get("/?token=abc")
    assert response.status_code == 401


def test_custom_keys_and_names():
    client = _client(
        psgix_token="jwt",
        psgix_claims="jwt_claims",
        token_header_name="JWT",
        token_query_name="access_token",
    )

    body = client.get("/", headers={"Authorization": "jwt abc"}).json()
    assert body["jwt"] == "abc"
    assert body["jwt_claims"] == {"sub": "bart"}
    assert body["token"] is None

    body = client.get("/", params={"access_token": "xyz"}).json()
    assert body["jwt"] == "xyz"


# --- decoding --------------------------------------------------------------


def test_decode_failure_returns_401_with_diagnostic():
    def decode(token, context):
        raise ValueError("signature verification failed")

    response = _client(decode_callback=decode).get("/", headers={"Authorization": "Bearer abc"})
    assert response.status_code == 401
    assert response.text == "Cannot decode JWT: signature verification failed"
    assert response.headers["content-type"] == "text/plain"


def test_callback_receives_connection():
    seen = {}

    def decode(token, conn):
        seen["path"] = conn.url.path
        seen["header"] = conn.headers.get("x-tenant")
        return {"sub": token}

    _client(decode_callback=decode).get(
        "/", headers={"Authorization": "Bearer abc", "X-Tenant": "acme"}
    )
    assert seen == {"path": "/", "header": "acme"}


def test_pyjwt_round_trip(secret, make_token):
    token = make_token({"scope": "read"})
    client = _client(decode_callback=None, decode_args={"key": secret, "algorithms": ["HS256"]})

    body = client.get("/", headers={"Authorization": f"Bearer {token}"}).json()
    assert body["token"] == token
    assert body["claims"]["scope"] == "read"


def test_pyjwt_expired(secret, make_token):
    token = make_token(expires_in=-60)
    client = _client(decode_callback=None, decode_args={"key": secret, "algorithms": ["HS256"]})

    response = client.get("/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.text == "Cannot decode JWT: Signature has expired"


def test_pyjwt_unusable_key_for_alg_returns_401(secret):
    token = jwt.encode(
        {"sub": "bart"},
        ec.generate_private_key(ec.SECP256R1()),
        algorithm="ES256",
    )
    client = _client(
        decode_callback=None,
        decode_args={"key": secret, "algorithms": ["HS256", "ES256"]},
    )

    response = client.get("/", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
    assert response.text.startswith("Cannot decode JWT: ")


def test_downstream_response_passes_through():
    response = _client().get("/teapot", headers={"Authorization": "Bearer abc"})
    assert response.status_code == 418
    assert response.text == "short and stout"
    assert response.headers["x-pot"] == "1"


# --- construction ----------------------------------------------------------


def test_middleware_without_strategy_fails_at_construction():
    with pytest.raises(ValueError):
        JWTAuthMiddleware(Starlette())


def test_middleware_accepts_prepared_config():
    config = GateConfig.prepare(decode_callback=_accept_all, token_required=True)
    middleware = JWTAuthMiddleware(Starlette(), config=config)
    assert middleware.config is config

    with pytest.raises(TypeError):
        JWTAuthMiddleware(Starlette(), config=config, token_required=False)


# --- scope handling --------------------------------------------------------


def test_caller_scope_is_not_mutated():
    seen = {}

    async def app(scope, receive, send):
        seen.update(scope)

    middleware = JWTAuthMiddleware(app, decode_callback=_accept_all)
    scope = {
        "type": "http",
        "method": "GET",
        "path": "/",
        "headers": [(b"authorization", b"Bearer abc")],
        "query_string": b"",
        "state": {"db": "pool"},
    }

    async def receive():
        return {"type": "http.request", "body": b"", "more_body": False}

    async def send(message):
        pass

    anyio.run(middleware, scope, receive, send)

    assert scope["state"] == {"db": "pool"}
    assert seen["state"] == {"db": "pool", "token": "abc", "claims": {"sub": "bart"}}


def test_lifespan_passes_through():
    seen = []

    async def app(scope, receive, send):
        seen.append(scope["type"])

    middleware = JWTAuthMiddleware(app, decode_callback=_accept_all, token_required=True)

    async def noop(*args):
        pass

    anyio.run(middleware, {"type": "lifespan"}, noop, noop)
    assert seen == ["lifespan"]


# --- websockets ------------------------------------------------------------


def test_websocket_with_token():
    with _client().websocket_connect("/ws?token=abc") as ws:
        assert ws.receive_json() == {"claims": {"sub": "bart"}}


def test_websocket_rejected_is_closed():
    with pytest.raises(WebSocketDisconnect) as exc_info:
        with _client(token_required=True).websocket_connect("/ws"):
            pass
    assert exc_info.value.code == 1008
    assert exc_info.value.reason == "Authorization required"
