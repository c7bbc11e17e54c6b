from enum import Enum


DEFAULT_CLAIMS_KEY = "claims"
DEFAULT_TOKEN_KEY = "token"
DEFAULT_HEADER_SCHEME = "Bearer"
DEFAULT_QUERY_NAME = "token"
DEFAULT_LEEWAY_SECONDS = 5

AUTHORIZATION_REQUIRED = "Authorization required"
DECODE_FAILURE_PREFIX = "Cannot decode JWT: "


class Outcome(Enum):
    FORWARDED = "forwarded"
    REJECTED = "rejected"
