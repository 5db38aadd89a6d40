"""
Deployment Schemas

Input models for applications, deployments and container groups.
"""
from pydantic import BaseModel, Field


class ApplicationCreate(BaseModel):
    """Schema for creating an application."""
    organization_id: str
    name: str = Field(..., min_length=1, max_length=255)


class DeploymentCreate(BaseModel):
    """
    Schema for creating a deployment.

    Only the shape of the image reference is checked here.
    """
    application_id: str
    image: str = Field(..., min_length=1, max_length=512, pattern=r"^\S+$")


class ContainerGroupCreate(BaseModel):
    """Schema for adding a container group to a deployment."""
    deployment_id: str
    name: str = Field(..., min_length=1, max_length=255)
    size: int = Field(1, ge=1, le=100)
