from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping, Optional, Pattern


@dataclass(frozen=True, slots=True)
class TokenExtractor:
    """
    Finds the token candidate of a request.

    Lookup order:
      1. `Authorization: <scheme> <token>` (scheme matched case-insensitively)
      2. the `query_name` query parameter

    The query parameter is only consulted when header lookup is disabled or
    the request has no Authorization header at all. Empty strings count as
    "no token".
    """

    header_scheme: Optional[str]
    query_name: Optional[str]
    _pattern: Optional[Pattern[str]] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        pattern = None
        if self.header_scheme:
            pattern = re.compile(
                rf"^\s*{re.escape(self.header_scheme)}\s+(.+)",
                re.IGNORECASE,
            )
        object.__setattr__(self, "_pattern", pattern)

    def extract(
            self,
            authorization: Optional[str],
            query_params: Mapping[str, str],
    ) -> Optional[str]:
        token: Optional[str] = None

        if self._pattern is not None and authorization:
            match = self._pattern.match(authorization)
            if match:
                token = match.group(1)
        elif self.query_name:
            token = query_params.get(self.query_name)

        return token or None
