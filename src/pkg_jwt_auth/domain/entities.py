from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .constants import Outcome


@dataclass(frozen=True, slots=True)
class TokenContext:
    """
    The raw token and its decoded claims, as handed to the downstream handler.
    """
    token: str
    claims: Mapping[str, Any]


@dataclass(frozen=True, slots=True)
class GateDecision:
    """
    Result of running one request through the gate.

    FORWARDED decisions carry `auth` only when a token was decoded.
    REJECTED decisions carry the message for the 401 body.
    """
    outcome: Outcome
    auth: Optional[TokenContext] = None
    message: Optional[str] = None

    @classmethod
    def forward(cls, auth: Optional[TokenContext] = None) -> "GateDecision":
        return cls(outcome=Outcome.FORWARDED, auth=auth)

    @classmethod
    def reject(cls, message: str) -> "GateDecision":
        return cls(outcome=Outcome.REJECTED, message=message)

    @property
    def forwarded(self) -> bool:
        return self.outcome is Outcome.FORWARDED

    @property
    def authenticated(self) -> bool:
        return self.auth is not None
