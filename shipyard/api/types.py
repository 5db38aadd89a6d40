"""
GraphQL Object Types

Resolvers return ORM rows directly and these types read them through
attribute access, so a field with no resolver maps to the model column
of the same name. For method fields, `self` is the ORM row being
resolved, not an instance of the strawberry type.
"""
from datetime import datetime
from typing import List, Optional

import strawberry
from strawberry.types import Info

from shipyard.core.exceptions import ApiError, PermissionDenied
from shipyard.core.security import generate_totp_secret, totp_provisioning_uri
from shipyard.models import Deployment as DeploymentModel


@strawberry.type(description="A named set of identical containers of a deployment.")
class ContainerGroup:
    id: strawberry.ID
    name: str
    size: int
    created_at: datetime


@strawberry.type
class Deployment:
    id: strawberry.ID
    image: str
    created_at: datetime
    updated_at: datetime
    container_groups: List[ContainerGroup]


@strawberry.type
class Application:
    id: strawberry.ID
    name: str
    created_at: datetime
    deployments: List[Deployment]

    @strawberry.field
    def deployment(self, info: Info, id: strawberry.ID) -> Deployment:
        return DeploymentModel.find_by_application_and_id(info.context.db, self, id)


@strawberry.type(description="Another user as seen by a fellow organization member.")
class Member:
    id: strawberry.ID
    name: str
    email: str


@strawberry.type
class Organization:
    id: strawberry.ID
    name: str
    is_personal: bool
    created_at: datetime
    users: List[Member]
    applications: List[Application]


@strawberry.type
class User:
    id: strawberry.ID
    name: str
    email: str
    created_at: datetime
    personal_organization: Optional[Organization]
    has_totp: bool = strawberry.field(name="hasTOTP")

    @strawberry.field
    def organizations(self) -> List[Organization]:
        """Shared organizations; the personal one is exposed on its own."""
        return [organization for organization in self.organizations if not organization.is_personal]

    @strawberry.field(
        name="onboardTOTP",
        description="A new TOTP secret to confirm with enableTOTP. Nothing is stored until then.",
    )
    def onboard_totp(self, info: Info) -> str:
        viewer = info.context.user
        if viewer is None or viewer.id != self.id:
            raise PermissionDenied("You can only set up two factor auth for yourself.")

        if self.totp_secret:
            raise ApiError("TOTP Already Enabled")

        return generate_totp_secret()

    @strawberry.field(name="totpProvisioningURI")
    def totp_provisioning_uri(self, secret: str) -> str:
        return totp_provisioning_uri(secret, self.email)


@strawberry.type
class Result:
    ok: bool = True


@strawberry.type
class SignInResult:
    ok: bool = True
    requires_totp: bool = strawberry.field(name="requiresTOTP", default=False)
