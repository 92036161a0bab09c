"""Pydantic schemas for registration, login, and user profiles.

None of these carry the password hash: services hand back these models,
not ORM rows, so the hash can't leak through a response.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from messagely.auth.password import MAX_PASSWORD_BYTES, password_too_long


# ─── Auth ───────────────────────────────────────────────

class RegisterRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(..., min_length=8)
    first_name: str = Field(..., min_length=1)
    last_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, v: str) -> str:
        if password_too_long(v):
            raise ValueError(f"must be at most {MAX_PASSWORD_BYTES} bytes")
        return v


class LoginRequest(BaseModel):
    username: str
    password: str


class TokenResponse(BaseModel):
    token: str


# ─── Profiles ───────────────────────────────────────────

class UserSummary(BaseModel):
    username: str
    first_name: str
    last_name: str

    model_config = {"from_attributes": True}


class UserProfile(UserSummary):
    phone: str
    join_at: datetime
    last_login_at: Optional[datetime] = None


class UserList(BaseModel):
    users: list[UserSummary]


class UserDetail(BaseModel):
    user: UserProfile
