"""
User directory: resolve ids to users, provider checks and public profiles.
"""
from sqlalchemy.orm import Session

from booking.config import settings
from booking.core.errors import MSG_NOT_PROVIDER, MSG_USER_NOT_FOUND, AuthorizationError
from booking.models.user import User


def get_user(db: Session, user_id: int) -> User | None:
    return db.get(User, user_id)


def require_user(db: Session, user_id: int) -> User:
    """The token is valid but its user may have been removed since it was issued."""
    user = get_user(db, user_id)
    if user is None:
        raise AuthorizationError(MSG_USER_NOT_FOUND)
    return user


def get_provider(db: Session, user_id: int) -> User | None:
    """Return the user only when flagged as a provider."""
    return db.query(User).filter(User.id == user_id, User.provider.is_(True)).first()


def require_provider(db: Session, user_id: int, message: str = MSG_NOT_PROVIDER) -> User:
    user = get_provider(db, user_id)
    if user is None:
        raise AuthorizationError(message)
    return user


def avatar_url(path: str | None) -> str | None:
    if not path:
        return None
    return f"{settings.files_base_url}/{path}"


def public_profile(user: User) -> dict:
    avatar = None
    if user.avatar_path:
        avatar = {"path": user.avatar_path, "url": avatar_url(user.avatar_path)}
    return {"id": user.id, "name": user.name, "avatar": avatar}


def list_providers(db: Session) -> list[dict]:
    """All providers, by name, with their public profile."""
    rows = db.query(User).filter(User.provider.is_(True)).order_by(User.name.asc(), User.id.asc()).all()
    return [public_profile(r) for r in rows]
