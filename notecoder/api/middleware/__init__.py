"""API middleware components"""
from notecoder.api.middleware.authentication import verify_token
from notecoder.config.settings import get_api_key

__all__ = ["verify_token", "get_api_key"]
