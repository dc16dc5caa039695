# utils/tokenJWT.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Request, Response
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.users import User
from utils.errors import AuthError, TokenExpired, TokenInvalid, AccountSuspended, EcoHubError
from utils.permissions import Action, authorize, is_known_action

# Authorization scheme; missing header is handled here so the cookie can be tried
bearer_scheme = HTTPBearer(auto_error=False)


# Generate a new JWT access token for an account
def create_access_token(user: User, expires_delta: timedelta = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode = {
        "sub": str(user.id),
        "role": user.role,
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_access_token(token: str) -> dict:
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpired()
    except JWTError:
        raise TokenInvalid()

    if not payload.get("sub"):
        raise TokenInvalid()
    return payload


def resolve_token(db: Session, token: str) -> User:
    """Resolve a bearer token to the live account row.

    Status is read from the current row on every call, so a suspension takes
    effect on the next request without any token revocation list.
    """
    payload = decode_access_token(token)
    try:
        user_id = int(payload["sub"])
    except (TypeError, ValueError):
        raise TokenInvalid()

    user = db.get(User, user_id)
    if user is None:
        raise AuthError("User not found")
    if user.is_suspended:
        raise AccountSuspended()
    return user


def extract_token(request: Request, credentials: Optional[HTTPAuthorizationCredentials]) -> Optional[str]:
    # Header first, then the session cookie
    if credentials and credentials.credentials:
        return credentials.credentials
    return request.cookies.get(settings.COOKIE_NAME) or None


def set_auth_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.COOKIE_NAME,
        value=token,
        max_age=settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.COOKIE_SAMESITE,
    )


def clear_auth_cookie(response: Response) -> None:
    response.delete_cookie(
        key=settings.COOKIE_NAME,
        httponly=True,
        secure=settings.cookie_secure,
        samesite=settings.COOKIE_SAMESITE,
    )


# Retrieve the currently authenticated user based on the JWT token
def get_current_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    token = extract_token(request, credentials)
    if not token:
        raise AuthError("Access token required")
    return resolve_token(db, token)


# Same as get_current_user, but never fails the request
def get_optional_user(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> Optional[User]:
    token = extract_token(request, credentials)
    if not token:
        return None
    try:
        return resolve_token(db, token)
    except EcoHubError:
        return None


# Dependency factory for Role-Based Access Control
def role_required(*allowed_roles):
    def _checker(current_user: User = Depends(get_current_user)):
        return authorize(current_user, roles=allowed_roles)
    return _checker


# Dependency factory for permission checks; the action name is validated when the route is declared
def permission_required(action):
    if not is_known_action(action):
        raise ValueError(f"Unknown permission action: {action!r}")
    action = Action(action)

    def _checker(current_user: User = Depends(get_current_user)):
        return authorize(current_user, action=action)
    return _checker
