"""
Authentication infrastructure module.
Handles JWT validation and owner identification.
"""

from .jwt_handler import JWTHandler
from .dependencies import get_current_user_id, get_jwt_handler

__all__ = [
    "JWTHandler",
    "get_current_user_id",
    "get_jwt_handler",
]
