# backend/comprebem/schemas/auth_schema.py
"""
Esquemas Pydantic para el inicio y cierre de sesión de la consola.
"""

from datetime import datetime
from pydantic import BaseModel, EmailStr, Field


class SignInRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    email: EmailStr
    created_at: datetime
    expires_at: datetime
