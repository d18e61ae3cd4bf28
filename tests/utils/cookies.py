"""Token cookie helpers for route tests."""

import httpx

from src.core.config.settings import settings

ACCESS_COOKIE = settings.ACCESS_TOKEN_COOKIE_NAME
REFRESH_COOKIE = settings.REFRESH_TOKEN_COOKIE_NAME


def set_cookie_headers(response: httpx.Response) -> dict:
    """Maps cookie name to its raw ``Set-Cookie`` header."""
    headers = {}
    for value in response.headers.get_list("set-cookie"):
        name = value.split("=", 1)[0]
        headers[name] = value
    return headers
