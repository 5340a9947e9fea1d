"""Builds the eBay user-consent URL used to mint a seller refresh token."""
from urllib.parse import quote, urlencode

from flippit.domain.errors import AuthError

CONSENT_STATE = "flippit"


def build_authorize_url(
    auth_base_url: str,
    client_id: str,
    runame: str,
    scope: str,
    state: str = CONSENT_STATE,
) -> str:
    """
    The seller opens this URL, signs in and is sent back to the RuName's
    accept URL with ``?code=...``; exchanging that code yields the refresh
    token the listing flow runs on.
    """
    if not client_id or not runame:
        raise AuthError("Missing EBAY_CLIENT_ID or EBAY_RUNAME")

    params = {
        "client_id": client_id,
        "redirect_uri": runame,
        "response_type": "code",
        "scope": scope,
        "state": state,
    }
    return f"{auth_base_url.rstrip('/')}/oauth2/authorize?{urlencode(params, quote_via=quote)}"
