from __future__ import annotations
from pydantic import BaseModel, EmailStr, Field
from typing import Literal
from uuid import UUID
from datetime import datetime

# Admins are provisioned out of band; self-registration picks one of these
RegistrableRole = Literal["student", "creator"]
VerificationStatus = Literal["pending", "approved", "rejected"]

class RegisterRequest(BaseModel):
    email: EmailStr
    username: str = Field(min_length=3, max_length=50, pattern=r"^[A-Za-z0-9_.-]+$")
    password: str = Field(min_length=8, max_length=72)
    full_name: str | None = Field(default=None, max_length=120)
    role: RegistrableRole = "student"

class LoginRequest(BaseModel):
    email: EmailStr
    password: str

class UserPublic(BaseModel):
    id: UUID
    email: EmailStr
    username: str
    role: str
    verification_status: str
    created_at: datetime

class TokenPair(BaseModel):
    access: str
    refresh: str

class VerificationUpdate(BaseModel):
    status: VerificationStatus
