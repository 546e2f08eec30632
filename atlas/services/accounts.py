"""Account flows: registration and authentication against the credential store."""

import logging
from collections.abc import Sequence
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from atlas.core.roles import UnknownRoleError, authorities_for, parse_role_names
from atlas.core.security import (
    create_access_token,
    hash_password,
    normalize_username,
    verify_password,
)
from atlas.models import User
from atlas.services.role_catalog import resolve_roles

logger = logging.getLogger(__name__)


class AccountError(Exception):
    """Base class for registration and authentication failures."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class DuplicateIdentityError(AccountError):
    """Username or email is already registered."""


class InvalidUsernameError(AccountError):
    """Username is empty or too long once surrounding whitespace is removed."""


class InvalidRoleError(AccountError):
    """A requested role name is not in the catalog."""


class UserNotFoundError(AccountError):
    """No user with the given username."""


class InvalidCredentialsError(AccountError):
    """Password does not match the stored hash."""


@dataclass(frozen=True)
class SigninResult:
    """Outcome of a successful authentication."""

    user: User
    access_token: str
    authorities: list[str]


def register_user(
    session: Session,
    username: str,
    email: str,
    password: str,
    role_names: Sequence[str] | None = None,
) -> User:
    """
    Create a user with hashed password and resolved roles.

    Steps run in order and stop at the first failure: username uniqueness,
    email uniqueness, role validation (default 'user'), hashing, then a single
    commit of the user together with its role links. Nothing is persisted on
    failure.
    """
    try:
        username = normalize_username(username)
    except ValueError as e:
        raise InvalidUsernameError(str(e)) from e
    email = email.strip().lower()

    if session.query(User.id).filter(User.username == username).first() is not None:
        raise DuplicateIdentityError("Username is already in use!")
    if session.query(User.id).filter(User.email == email).first() is not None:
        raise DuplicateIdentityError("Email is already in use!")

    try:
        requested = parse_role_names(role_names)
    except UnknownRoleError as e:
        raise InvalidRoleError(e.message) from e
    roles = resolve_roles(session, requested)

    user = User(
        username=username,
        email=email,
        password_hash=hash_password(password),
        roles=roles,
    )
    session.add(user)
    try:
        session.commit()
    except IntegrityError as e:
        # Lost a race with a concurrent signup for the same username or email.
        session.rollback()
        raise DuplicateIdentityError("Username or email is already in use!") from e
    session.refresh(user)
    logger.info(
        "User registered: id=%s roles=%s",
        user.id,
        ",".join(user.role_names),
    )
    return user


def authenticate_user(session: Session, username: str, password: str) -> SigninResult:
    """
    Verify credentials and issue a session token.

    Raises UserNotFoundError for an unknown username and InvalidCredentialsError
    for a wrong password (or an unreadable stored hash).
    """
    try:
        username = normalize_username(username)
    except ValueError as e:
        raise UserNotFoundError("User Not found.") from e
    user = session.query(User).filter(User.username == username).first()
    if user is None:
        logger.info("Signin failed: unknown username=%s", username)
        raise UserNotFoundError("User Not found.")
    if not verify_password(password, user.password_hash):
        logger.info("Signin failed: bad password for username=%s", username)
        raise InvalidCredentialsError("Invalid Password!")
    token = create_access_token(sub=user.id)
    return SigninResult(
        user=user,
        access_token=token,
        authorities=authorities_for(user.role_names),
    )
