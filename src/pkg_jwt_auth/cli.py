# src/pkg_jwt_auth/cli.py

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Sequence

from .domain.exceptions import AuthenticationError, ConfigError
from .settings import config_from_env


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pkg-jwt-auth",
        description="Decode and verify JSON Web Tokens with the gate's env configuration",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    decode = sub.add_parser(
        "decode",
        help="Verify a token and print its claims "
             "(key material from JWT_AUTH_SECRET / JWT_AUTH_PUBLIC_KEY_FILE / JWT_AUTH_JWKS_URI).",
    )
    decode.add_argument("token", help="The encoded JWT")

    return parser.parse_args(args=argv)


def _decode(token: str) -> dict[str, Any]:
    config = config_from_env()
    claims = config.decoder.decode(token, None)
    return {"claims": dict(claims)}


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)

    try:
        summary = _decode(args.token)
    except (ConfigError, AuthenticationError) as exc:
        json.dump({"ok": False, "error": str(exc)}, sys.stdout, indent=2)
        sys.stdout.write("\n")
        return 1

    json.dump({"ok": True, **summary}, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0


if __name__ == "__main__":
    sys.exit(main())
