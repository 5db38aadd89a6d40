"""
Organization Resolvers

Organizations are shared workspaces. Any member can add other users by
email; members may leave as long as someone remains.
"""
import strawberry
from strawberry.types import Info

from shipyard.api.deps import IsAuthenticated, validate
from shipyard.api.types import Organization, Result
from shipyard.core.exceptions import NotFoundError, PermissionDenied
from shipyard.core.permissions import require_shared_organization, can_leave_organization
from shipyard.models.organization import Organization as OrganizationModel
from shipyard.models.user import User as UserModel
from shipyard.schemas.organization import OrganizationCreate, MemberAdd
from shipyard.utils.logging import get_logger

logger = get_logger(__name__)


@strawberry.type
class OrganizationQuery:

    @strawberry.field(permission_classes=[IsAuthenticated])
    def organization(self, info: Info, id: strawberry.ID) -> Organization:
        return OrganizationModel.find_for_user(info.context.db, info.context.user, id)


@strawberry.type
class OrganizationMutation:

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def create_organization(self, info: Info, name: str) -> Organization:
        data = validate(OrganizationCreate, name=name)
        db = info.context.db
        user = info.context.user

        organization = OrganizationModel(name=data.name, is_personal=False)
        organization.users.append(user)

        db.add(organization)
        db.commit()

        logger.info(f"Organization created: {organization.id} by {user.id}")

        return organization

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def add_organization_member(
        self,
        info: Info,
        organization_id: strawberry.ID,
        email: str
    ) -> Organization:
        """Add an existing account to an organization. Adding a member twice is a no-op."""
        data = validate(MemberAdd, organization_id=organization_id, email=email)
        db = info.context.db

        organization = OrganizationModel.find_for_user(db, info.context.user, data.organization_id)
        require_shared_organization(organization)

        member = UserModel.find_by_email(db, data.email)
        if not member:
            raise NotFoundError("No user found.")

        if not member.is_member_of(organization):
            organization.users.append(member)
            db.commit()
            logger.info(
                f"Member added: user={member.id} organization={organization.id} "
                f"by {info.context.user.id}"
            )

        return organization

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def leave_organization(self, info: Info, organization_id: strawberry.ID) -> Result:
        db = info.context.db
        user = info.context.user

        organization = OrganizationModel.find_for_user(db, user, organization_id)

        if not can_leave_organization(user, organization):
            raise PermissionDenied("You cannot leave this organization.")

        organization.users.remove(user)
        db.commit()

        logger.info(f"Member left: user={user.id} organization={organization.id}")

        return Result()
