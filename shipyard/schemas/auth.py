"""
Authentication Schemas

Input models for the sign up, sign in and password flows. GraphQL
arguments are validated through these before any database work.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class SignUpInput(BaseModel):
    """Sign up arguments."""
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    password: str = Field(..., min_length=8, max_length=72)


class SignInInput(BaseModel):
    """Sign in arguments."""
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class ResetPasswordInput(BaseModel):
    """
    Reset password arguments.

    The password is left out when the reset link is first opened.
    """
    uuid: str = Field(..., min_length=1)
    password: Optional[str] = Field(None, min_length=8, max_length=72)


class ChangePasswordInput(BaseModel):
    """Change password arguments."""
    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=8, max_length=72)


class TOTPInput(BaseModel):
    """A six digit code from an authenticator app."""
    token: str = Field(..., pattern=r"^\s*\d{6}\s*$")


class EnableTOTPInput(TOTPInput):
    """A secret from onboardTOTP and the code the authenticator shows for it."""
    secret: str = Field(..., pattern=r"^[A-Z2-7]{16,64}$")
