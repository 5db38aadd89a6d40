"""
User Schemas

Input models for account updates.
"""
from pydantic import BaseModel, EmailStr, Field
from typing import Optional


class AccountUpdate(BaseModel):
    """Schema for updating the signed in account. All fields optional."""
    name: Optional[str] = Field(None, max_length=255)
    email: Optional[EmailStr] = None
