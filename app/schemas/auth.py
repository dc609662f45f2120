"""
Pydantic schemas for registration and login
"""
from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1, max_length=100)
    password: str = Field(..., min_length=1)


class RegisterRequest(LoginRequest):
    # bcrypt only hashes the first 72 bytes
    password: str = Field(..., min_length=1, max_length=72)
    role: str = Field(..., pattern="^(teacher|student)$")


class UserOut(BaseModel):
    id: int
    username: str
    role: str
    
    class Config:
        from_attributes = True
