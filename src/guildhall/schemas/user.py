"""User and authentication Pydantic schemas."""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from guildhall.schemas.common import UTCDateTime


class UserRegister(BaseModel):
    """Registration payload. Presence and length rules live in the accounts service."""

    username: str | None = None
    email: EmailStr | None = None
    password: str | None = None
    display_name: str | None = None


class UserLogin(BaseModel):
    username: str | None = None
    password: str | None = None


class UserResponse(BaseModel):
    """Public view of an account."""

    id: int
    username: str
    email: str
    display_name: str | None
    bio: str | None
    avatar_url: str | None
    is_active: bool
    roles: list[str] = Field(default_factory=list, validation_alias="role_names")
    last_login: UTCDateTime | None = None
    created_at: UTCDateTime

    model_config = ConfigDict(from_attributes=True, populate_by_name=True)


class AuthResponse(BaseModel):
    """Token issued on register/login."""

    token: str
    token_type: str = "bearer"
    user: UserResponse


class ProfileUpdate(BaseModel):
    display_name: str | None = Field(None, max_length=100)
    bio: str | None = Field(None, max_length=2000)
    avatar_url: str | None = Field(None, max_length=500)


class ProfileStats(BaseModel):
    post_count: int
    comment_count: int
    likes_received: int
    bookmark_count: int


class ProfileResponse(BaseModel):
    user: UserResponse
    stats: ProfileStats


class AdminUserUpdate(BaseModel):
    """Fields an administrator may change on an account."""

    is_active: bool | None = None
    display_name: str | None = Field(None, max_length=100)
    bio: str | None = None
    roles: list[str] | None = None
