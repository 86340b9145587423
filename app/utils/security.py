"""
API key helpers shared by the auth middleware and the public report endpoint.
The key arrives as an X-API-Key header or an api_key query parameter.
"""

from fastapi import Request
from app.config import settings


def request_api_key(request: Request):
    return request.headers.get("X-API-Key") or request.query_params.get("api_key")


def has_valid_api_key(request: Request) -> bool:
    """True only when a key is configured and the request carries it."""
    return bool(settings.API_KEY) and request_api_key(request) == settings.API_KEY
