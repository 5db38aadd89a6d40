"""
Database Models

Everything a user can reach hangs off an organization they are a member
of: Organization -> Application -> Deployment -> ContainerGroup.
"""
from shipyard.models.organization import Organization, organization_members
from shipyard.models.user import User
from shipyard.models.password_reset import PasswordReset
from shipyard.models.application import Application
from shipyard.models.deployment import Deployment
from shipyard.models.container_group import ContainerGroup

__all__ = [
    "Organization",
    "organization_members",
    "User",
    "PasswordReset",
    "Application",
    "Deployment",
    "ContainerGroup",
]
