from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

import structlog

from ...domain.constants import AUTHORIZATION_REQUIRED, DECODE_FAILURE_PREFIX
from ...domain.entities import GateDecision, TokenContext
from ...domain.exceptions import DecodeError, MissingTokenError
from ..config import GateConfig
from .extract import TokenExtractor

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class AuthenticateRequestUseCase:
    """
    Application use case:
    - Extract a token candidate from the Authorization header / query string
    - Decode it via the configured TokenDecoder
    - Decide whether the request is forwarded (possibly with claims) or
      rejected with a 401 message

    Framework-agnostic: integrations pass in the raw header value, the query
    parameters and their own notion of request context.
    """

    config: GateConfig
    extractor: TokenExtractor = field(init=False)

    def __post_init__(self) -> None:
        self.extractor = TokenExtractor(
            header_scheme=self.config.token_header_name,
            query_name=self.config.token_query_name,
        )

    def authenticate(
            self,
            authorization: Optional[str],
            query_params: Mapping[str, str],
            context: Any = None,
    ) -> Optional[TokenContext]:
        """
        Return the TokenContext for the request, or None when there is no
        token and none is required.

        Raises:
            MissingTokenError
            DecodeError
        """
        token = self.extractor.extract(authorization, query_params)

        if token is None:
            if self.config.token_required:
                raise MissingTokenError(AUTHORIZATION_REQUIRED)
            return None

        claims = self.config.decoder.decode(token, context)
        return TokenContext(token=token, claims=claims)

    def execute(
            self,
            authorization: Optional[str],
            query_params: Mapping[str, str],
            context: Any = None,
    ) -> GateDecision:
        try:
            auth = self.authenticate(authorization, query_params, context)
        except MissingTokenError as exc:
            logger.info("jwt_auth_token_missing")
            return GateDecision.reject(str(exc))
        except DecodeError as exc:
            # 400 vs 401 for malformed tokens is unresolved; always answer 401
            logger.info("jwt_auth_decode_failed", error=str(exc))
            return GateDecision.reject(DECODE_FAILURE_PREFIX + str(exc))

        logger.debug("jwt_auth_forwarded", authenticated=auth is not None)
        return GateDecision.forward(auth)
