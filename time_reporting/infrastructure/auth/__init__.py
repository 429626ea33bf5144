"""
Authentication module.
"""

from .jwt_handler import JWTHandler
from .dependencies import get_current_context, get_jwt_handler, jwt_handler

__all__ = [
    "JWTHandler",
    "get_current_context",
    "get_jwt_handler",
    "jwt_handler",
]
