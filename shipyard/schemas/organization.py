"""
Organization Schemas

Input models for organization operations.
"""
from pydantic import BaseModel, EmailStr, Field


class OrganizationCreate(BaseModel):
    """Schema for creating an organization."""
    name: str = Field(..., min_length=1, max_length=255)


class MemberAdd(BaseModel):
    """Schema for adding a member by email."""
    organization_id: str
    email: EmailStr
