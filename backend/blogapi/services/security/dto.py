from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class TokenPairOut:
    """
    Output DTO with an access/refresh token pair.

    :param access_token: Encoded access JWT.
    :type access_token: str
    :param refresh_token: Encoded refresh JWT (also persisted server side).
    :type refresh_token: str
    :param expires_in: Access token lifetime in seconds.
    :type expires_in: int
    :param token_type: Authorization scheme clients must use.
    :type token_type: str
    """

    access_token: str
    refresh_token: str
    expires_in: int
    token_type: str = "Bearer"
