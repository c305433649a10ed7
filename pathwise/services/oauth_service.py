"""
Google OAuth 2.0 authorization-code flow.
"""
import logging
from typing import Dict
from urllib.parse import urlencode

import httpx

from pathwise.core import config

logger = logging.getLogger(__name__)

GOOGLE_AUTH_URL = "https://accounts.google.com/o/oauth2/v2/auth"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_USERINFO_URL = "https://openidconnect.googleapis.com/v1/userinfo"
OAUTH_TIMEOUT = 15.0


class OAuthError(Exception):
    """The OAuth round trip with Google failed."""


def is_google_configured() -> bool:
    return bool(config.GOOGLE_CLIENT_ID and config.GOOGLE_CLIENT_SECRET)


def build_google_auth_url(state: str) -> str:
    params = {
        "client_id": config.GOOGLE_CLIENT_ID,
        "redirect_uri": config.GOOGLE_CALLBACK_URL,
        "response_type": "code",
        "scope": "openid email profile",
        "state": state,
        "prompt": "select_account",
    }
    return f"{GOOGLE_AUTH_URL}?{urlencode(params)}"


def exchange_code_for_userinfo(code: str) -> Dict[str, str]:
    """
    Trade an authorization code for the user's Google identity.

    Returns:
        {"google_id", "email", "name", "avatar"}

    Raises:
        OAuthError: on transport errors, non-2xx replies or a missing email
    """
    try:
        with httpx.Client(timeout=OAUTH_TIMEOUT) as client:
            token_resp = client.post(
                GOOGLE_TOKEN_URL,
                data={
                    "code": code,
                    "client_id": config.GOOGLE_CLIENT_ID,
                    "client_secret": config.GOOGLE_CLIENT_SECRET,
                    "redirect_uri": config.GOOGLE_CALLBACK_URL,
                    "grant_type": "authorization_code",
                },
            )
            token_resp.raise_for_status()
            access_token = token_resp.json().get("access_token")
            if not access_token:
                raise OAuthError("Google did not return an access token")

            info_resp = client.get(
                GOOGLE_USERINFO_URL,
                headers={"Authorization": f"Bearer {access_token}"},
            )
            info_resp.raise_for_status()
            info = info_resp.json()
    except httpx.HTTPStatusError as e:
        logger.warning(f"Google OAuth HTTP error: {e.response.status_code}")
        raise OAuthError("Authentication failed") from e
    except httpx.RequestError as e:
        logger.warning(f"Google OAuth request error: {e}")
        raise OAuthError("Authentication failed") from e

    if not info.get("sub") or not info.get("email"):
        raise OAuthError("Google account has no email address")

    return {
        "google_id": info["sub"],
        "email": info["email"],
        "name": info.get("name") or info["email"].split("@")[0],
        "avatar": info.get("picture"),
    }
