"""Pydantic schemas for the users API.

Learn: Pydantic v2 models validate request/response data. Separate
request schemas (input) from response envelopes (output). Every
response carries a "status" field, "success" or "error".
"""

from typing import Optional

from pydantic import BaseModel, Field


# ─── Requests ───────────────────────────────────────────

class UserCreate(BaseModel):
    account: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    mail: str = Field(..., min_length=3, max_length=254, pattern=r"^[^@\s]+@[^@\s]+$")
    head: Optional[str] = None


class UserUpdate(BaseModel):
    """Full replacement of the mutable fields.

    Omitting head (or sending null) clears the avatar; it is not merged
    with the stored value.
    """
    password: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1, max_length=100)
    head: Optional[str] = None


class LoginRequest(BaseModel):
    account: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ─── Responses ──────────────────────────────────────────

class UserRead(BaseModel):
    id: str
    account: str
    name: str
    mail: str
    head: Optional[str] = None

    model_config = {"from_attributes": True}


class UserList(BaseModel):
    status: str = "success"
    users: list[UserRead]


class UserDetail(BaseModel):
    status: str = "success"
    user: UserRead


class UserSearchResult(BaseModel):
    status: str = "success"
    message: str
    user: UserRead


class UserCreated(BaseModel):
    status: str = "success"
    id: str
    message: str


class TokenResponse(BaseModel):
    status: str = "success"
    token: str


class MessageResponse(BaseModel):
    status: str = "success"
    message: str


class DeletedResponse(BaseModel):
    status: str = "success"
    message: str
    token: str
