"""
Request dependencies: the authenticated user id.

Tokens are issued by the identity service; here we only verify the signature
and read the `id` claim.
"""
import jwt
from fastapi import Header

from booking.config import settings
from booking.core.constants import MAX_DB_INT
from booking.core.errors import MSG_TOKEN_INVALID, MSG_TOKEN_MISSING, AuthorizationError


def decode_user_id(token: str) -> int:
    try:
        claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except jwt.PyJWTError:
        raise AuthorizationError(MSG_TOKEN_INVALID) from None
    user_id = claims.get("id")
    # bool is an int subclass; floats and strings are not truncated into ids
    if not isinstance(user_id, int) or isinstance(user_id, bool) or not 1 <= user_id <= MAX_DB_INT:
        raise AuthorizationError(MSG_TOKEN_INVALID)
    return user_id


def get_current_user_id(authorization: str | None = Header(None)) -> int:
    if not authorization:
        raise AuthorizationError(MSG_TOKEN_MISSING)
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise AuthorizationError(MSG_TOKEN_INVALID)
    return decode_user_id(token.strip())
