from pydantic import BaseModel, EmailStr, Field, model_validator

from typing import Any, Dict, Optional


class RegisterRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.password != self.confirm_password:
            raise ValueError("Password and confirmation do not match")
        return self


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class AuthResponse(BaseModel):
    user_id: str
    email: str
    name: str
    token: str


# Password reset
class ForgotPasswordRequest(BaseModel):
    email: EmailStr


class ForgotPasswordResponse(BaseModel):
    message: str
    # Only populated outside production, for local testing without mail
    debug_code: Optional[str] = None


class ResetPasswordRequest(BaseModel):
    email: EmailStr
    code: str = Field(..., pattern=r"^\d{6}$")
    new_password: str = Field(..., min_length=8)
    confirm_password: str

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Password and confirmation do not match")
        return self


# Protected profile (identity provider claims)
class ProfileResponse(BaseModel):
    message: str
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    claims_raw: Dict[str, Any] = Field(default_factory=dict)
