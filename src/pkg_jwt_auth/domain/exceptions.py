class ConfigError(ValueError):
    """Raised when the gate is configured incorrectly."""
    pass


class AuthenticationError(Exception):
    """Raised when a request cannot be authenticated."""
    pass


class MissingTokenError(AuthenticationError):
    """Raised when no token was found but one is required."""
    pass


class DecodeError(AuthenticationError):
    """Raised when a token cannot be decoded or verified."""
    pass


class TokenExpiredError(DecodeError):
    """Raised when token has expired."""
    pass


class InvalidTokenError(DecodeError):
    """Raised when token is malformed or invalid."""
    pass
