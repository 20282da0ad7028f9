"""Authentication module for JWT and password handling.

Only the token and password utilities are re-exported here. Import the
service, dependencies, middleware and routes from their submodules, which
depend on the user module.
"""

from gatekeeper.core.auth.backend import (
    create_access_token,
    decode_token,
    get_token_expiration,
    hash_password,
    hash_token,
    verify_password,
)
from gatekeeper.core.auth.schemas import IssuedToken, TokenData


__all__ = [
    # Schemas
    "IssuedToken",
    "TokenData",
    # Token utilities
    "create_access_token",
    "decode_token",
    "get_token_expiration",
    # Password utilities
    "hash_password",
    "hash_token",
    "verify_password",
]
