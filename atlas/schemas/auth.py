"""Request/response schemas for auth endpoints."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from atlas.core.roles import RoleName
from atlas.core.security import PASSWORD_MAX_LEN, PASSWORD_MIN_LEN, normalize_username


class SignupRequest(BaseModel):
    """New account details; roles default to ['user'] when omitted."""

    username: str = Field(..., description="Username (surrounding whitespace is ignored)")
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    roles: list[str] | None = Field(
        default=None,
        description=f"Requested role names ({', '.join(r.value for r in RoleName)})",
    )

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return normalize_username(v)


class SigninRequest(BaseModel):
    """Credentials for signin."""

    username: str = Field(..., description="Username (surrounding whitespace is ignored)")
    password: str = Field(..., min_length=1, max_length=PASSWORD_MAX_LEN, description="Password")

    @field_validator("username")
    @classmethod
    def validate_username(cls, v: str) -> str:
        return normalize_username(v)


class MessageResponse(BaseModel):
    """Plain acknowledgment or error message."""

    message: str


class SigninResponse(BaseModel):
    """Identity summary returned after successful signin. Never carries the password hash."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    username: str
    email: str
    roles: list[str] = Field(..., description="Authority labels, e.g. ROLE_USER")
    access_token: str = Field(
        ...,
        alias="accessToken",
        description="Session token for the Authorization or x-access-token header",
    )


class CurrentUser(BaseModel):
    """Authenticated user (id, username, email, role names) for dependency injection."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    role_names: list[str]


class UserListItem(BaseModel):
    """User entry for the staff list (no password)."""

    id: int
    username: str
    email: str
    roles: list[str]


class UsersListResponse(BaseModel):
    """Response for GET /auth/users (admin or moderator only)."""

    users: list[UserListItem]
