# ytwatch/auth.py
# OAuth2 refresh-token exchange against Google's token endpoint.

from __future__ import annotations
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Callable, Optional

import requests

from .errors import AuthError, ConfigError
from .utils.timeutil import utc_now

LOG = logging.getLogger("ytwatch")

GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"


@dataclass(frozen=True)
class TokenResponse:
    access_token: str
    token_type: Optional[str]
    expires_in: Optional[int]
    scope: Optional[str]
    expires_at: Optional[datetime]


def refresh_access_token(
    client_id: str,
    client_secret: str,
    refresh_token: str,
    token_url: str = GOOGLE_TOKEN_URL,
    post: Callable[..., requests.Response] = requests.post,
    now: Optional[datetime] = None,
) -> TokenResponse:
    """Trade a refresh token for a fresh access token.

    Client credentials go in the form body (client_secret_post). Any transport
    or protocol failure is raised as AuthError; nothing is retried.
    """
    for name, value in (("client_id", client_id), ("client_secret", client_secret), ("refresh_token", refresh_token)):
        if not value:
            raise ConfigError(f"OAuth2 {name} is required")

    data = {
        "grant_type": "refresh_token",
        "refresh_token": refresh_token,
        "client_id": client_id,
        "client_secret": client_secret,
    }
    try:
        r = post(token_url, data=data, timeout=20)
        r.raise_for_status()
        body = r.json()
    except (requests.RequestException, ValueError) as e:
        LOG.error("Failed to refresh OAuth2 token: %s", e)
        raise AuthError(f"OAuth2 authentication failed: {e}") from e

    if not isinstance(body, dict):
        raise AuthError(f"OAuth2 authentication failed: expected a JSON object, got {type(body).__name__}")

    access_token = body.get("access_token")
    if not access_token:
        raise AuthError(f"OAuth2 authentication failed: no access_token in response ({body.get('error') or 'unknown'})")

    expires_in = body.get("expires_in")
    if expires_in is not None:
        try:
            expires_in = int(expires_in)
        except (TypeError, ValueError) as e:
            raise AuthError(f"OAuth2 authentication failed: bad expires_in {expires_in!r}") from e
    expires_at = (now or utc_now()) + timedelta(seconds=expires_in) if expires_in is not None else None

    return TokenResponse(
        access_token=access_token,
        token_type=body.get("token_type"),
        expires_in=expires_in,
        scope=body.get("scope"),
        expires_at=expires_at,
    )
