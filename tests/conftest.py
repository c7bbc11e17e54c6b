import time

import jwt
import pytest

SECRET = "test-secret-key-with-at-least-32-bytes!!"


@pytest.fixture
def secret() -> str:
    return SECRET


@pytest.fixture
def make_token():
    def _make(claims=None, key=SECRET, algorithm="HS256", expires_in=300, **headers):
        payload = {"sub": "bart", "iat": int(time.time())}
        if expires_in is not None:
            payload["exp"] = int(time.time()) + expires_in
        payload.update(claims or {})
        return jwt.encode(payload, key, algorithm=algorithm, headers=headers or None)

    return _make
