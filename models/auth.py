from typing import Optional
from pydantic import BaseModel, EmailStr

from models.profile import ProfileRead


# -----------------------------------------------------
# LOGIN REQUEST (Supabase email/password)
# -----------------------------------------------------
class LoginRequest(BaseModel):
    email: EmailStr
    password: str


# -----------------------------------------------------
# TOKEN RESPONSE (Supabase session JWT)
# -----------------------------------------------------
class TokenResponse(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    token_type: str = "bearer"
    profile: Optional[ProfileRead] = None


# -----------------------------------------------------
# SIGNUP RESPONSE
# session is None when email confirmation is required
# -----------------------------------------------------
class SignupResponse(BaseModel):
    user_id: str
    needs_confirmation: bool
    session: Optional[TokenResponse] = None


# -----------------------------------------------------
# ROUTING DECISION
# -----------------------------------------------------
class RouteResponse(BaseModel):
    route: str
    role: Optional[str] = None
