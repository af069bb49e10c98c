"""Auth schemas."""
from typing import Literal

from pydantic import BaseModel, EmailStr, Field


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: str
    # admin is granted out of band (seed script), never through self-registration
    roles: list[Literal["farm_owner", "manager", "staff", "customer"]] = ["farm_owner"]


class UserLogin(BaseModel):
    email: str  # str to allow dev/internal emails like admin@farmledger.local
    password: str


class UserResponse(BaseModel):
    id: int
    email: str
    full_name: str
    is_active: bool
    farm_id: int | None = None
    roles: list[str] = []

    class Config:
        from_attributes = True


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse
