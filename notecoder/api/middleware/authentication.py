"""Bearer-token check guarding the note analysis endpoints.

A single shared key (API_KEY) authorizes callers; health, metrics and the
conditions listing stay public.
"""
import secrets

from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials

from notecoder.config.settings import get_api_key


async def verify_token(credentials: HTTPAuthorizationCredentials) -> str:
    """Compare the presented bearer token with the configured key.

    Raises:
        HTTPException: 401 when the token does not match
    """
    if not secrets.compare_digest(credentials.credentials, get_api_key()):
        raise HTTPException(
            status_code=401,
            detail="Invalid authentication credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return credentials.credentials
