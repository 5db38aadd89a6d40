"""
Permission System

Access is decided by organization membership. There are no roles: every
member of an organization can manage its applications and deployments and
invite other users.

Personal organizations are the exception; they always have exactly one
member, so membership changes on them are refused.
"""
from shipyard.core.exceptions import PermissionDenied


def require_shared_organization(organization) -> None:
    """Membership of personal organizations is fixed."""
    if organization.is_personal:
        raise PermissionDenied("Personal organizations cannot be shared.")


def can_leave_organization(user, organization) -> bool:
    """
    Check if user may leave organization.

    Rules:
    - Personal organizations cannot be left
    - The last member cannot leave, or the organization would be orphaned
    """
    if organization.is_personal:
        return False
    if not user.is_member_of(organization):
        return False
    return len(organization.users) > 1
