"""Signup/signin/signout and auth dependencies (get_current_user, require_roles)."""

from collections.abc import Callable
from typing import Annotated

import jwt
from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from atlas.core.config import settings
from atlas.core.database import get_db
from atlas.core.roles import RoleName, authorities_for
from atlas.core.security import decode_access_token, token_lifetime
from atlas.models import User
from atlas.schemas.auth import (
    CurrentUser,
    MessageResponse,
    SigninRequest,
    SigninResponse,
    SignupRequest,
    UserListItem,
    UsersListResponse,
)
from atlas.services.accounts import (
    DuplicateIdentityError,
    InvalidCredentialsError,
    InvalidRoleError,
    InvalidUsernameError,
    UserNotFoundError,
    authenticate_user,
    register_user,
)
from atlas.services.role_catalog import RoleCatalogError

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@router.post("/signup", response_model=MessageResponse, status_code=status.HTTP_201_CREATED)
def signup(
    body: SignupRequest,
    db: Annotated[Session, Depends(get_db)],
) -> MessageResponse:
    """Register a new user. Roles default to ['user'] when omitted."""
    try:
        register_user(db, body.username, body.email, body.password, body.roles)
    except (DuplicateIdentityError, InvalidRoleError, InvalidUsernameError) as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message) from e
    except RoleCatalogError as e:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
        ) from e
    return MessageResponse(message="User was registered successfully!")


@router.post("/signin", response_model=SigninResponse)
def signin(
    body: SigninRequest,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
) -> SigninResponse:
    """
    Authenticate with username and password.

    The session token is set as an HttpOnly cookie and also returned as
    accessToken for clients that send it in a header.
    """
    try:
        result = authenticate_user(db, body.username, body.password)
    except UserNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except InvalidCredentialsError as e:
        raise _unauthorized(e.message) from e

    response.set_cookie(
        key=settings.SESSION_COOKIE_NAME,
        value=result.access_token,
        max_age=int(token_lifetime().total_seconds()),
        httponly=True,
        secure=settings.SESSION_COOKIE_SECURE,
        samesite="lax",
        path="/",
    )
    return SigninResponse(
        id=result.user.id,
        username=result.user.username,
        email=result.user.email,
        roles=result.authorities,
        access_token=result.access_token,
    )


@router.post("/signout", response_model=MessageResponse)
def signout(response: Response) -> MessageResponse:
    """Clear the session cookie. Succeeds whether or not a session exists."""
    response.delete_cookie(key=settings.SESSION_COOKIE_NAME, path="/")
    return MessageResponse(message="You've been signed out!")


def _presented_token(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None,
    x_access_token: str | None,
) -> str | None:
    """Token from Authorization: Bearer, then x-access-token, then the session cookie."""
    if credentials is not None and credentials.credentials:
        return credentials.credentials
    if x_access_token:
        return x_access_token
    return request.cookies.get(settings.SESSION_COOKIE_NAME) or None


def get_current_user(
    request: Request,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    x_access_token: Annotated[str | None, Header()] = None,
) -> CurrentUser:
    """Dependency: require a valid session token and return the current user. Raises 401 if missing or invalid."""
    token = _presented_token(request, credentials, x_access_token)
    if token is None:
        raise _unauthorized("No token provided!")
    try:
        payload = decode_access_token(token)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        user_id = int(payload["sub"])
    except (KeyError, TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _unauthorized("User not found")
    return CurrentUser(
        id=user.id,
        username=user.username,
        email=user.email,
        role_names=user.role_names,
    )


def require_roles(*allowed: RoleName) -> Callable[..., CurrentUser]:
    """Dependency factory: require the current user to hold one of the allowed roles (403 otherwise)."""
    allowed_names = {r.value for r in allowed}
    label = " or ".join(r.value.title() for r in allowed)

    def dependency(
        current_user: Annotated[CurrentUser, Depends(get_current_user)],
    ) -> CurrentUser:
        if not allowed_names.intersection(current_user.role_names):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Require {label} Role!",
            )
        return current_user

    return dependency


@router.get("/users", response_model=UsersListResponse)
def list_users(
    _staff: Annotated[CurrentUser, Depends(require_roles(RoleName.ADMIN, RoleName.MODERATOR))],
    db: Annotated[Session, Depends(get_db)],
) -> UsersListResponse:
    """List all users with their authorities (admin or moderator only)."""
    users = db.query(User).order_by(User.id).all()
    return UsersListResponse(
        users=[
            UserListItem(
                id=u.id,
                username=u.username,
                email=u.email,
                roles=authorities_for(u.role_names),
            )
            for u in users
        ]
    )
