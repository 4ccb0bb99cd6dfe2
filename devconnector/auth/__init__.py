"""Authentication / authorization helpers.

Auth is kept deliberately small:

- Users table (name/email/password hash + gravatar avatar)
- Stateless JWT session tokens carried in the `x-auth-token` header

Logout is a client-side affair (the token is discarded locally); a token
stays valid until it expires.
"""

from .deps import get_config, get_current_user, get_current_user_id
from .crud import create_user, public_user, verify_user_credentials

__all__ = [
    "get_config",
    "get_current_user",
    "get_current_user_id",
    "create_user",
    "public_user",
    "verify_user_credentials",
]
