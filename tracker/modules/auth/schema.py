from pydantic import BaseModel, EmailStr, Field
from typing import Optional
from datetime import datetime


# ---------------- Request Schemas ----------------
class RegisterRequest(BaseModel):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=6)


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class RefreshRequest(BaseModel):
    refresh_token: str


# ---------------- Response Schemas ----------------
class UserResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    role: str
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class UserMinimalResponse(BaseModel):
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str

    model_config = {"from_attributes": True}


class TokenResponse(BaseModel):
    access_token: str
    refresh_token: str
    token_type: str = "bearer"
