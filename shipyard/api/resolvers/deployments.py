"""
Deployment Resolvers

CRUD over applications, their deployments and container groups. Every
lookup is scoped to the organizations the signed in user belongs to.
"""
import strawberry
from strawberry.types import Info

from shipyard.api.deps import IsAuthenticated, validate
from shipyard.api.types import Application, ContainerGroup, Deployment, Result
from shipyard.models.application import Application as ApplicationModel
from shipyard.models.container_group import ContainerGroup as ContainerGroupModel
from shipyard.models.deployment import Deployment as DeploymentModel
from shipyard.models.organization import Organization as OrganizationModel
from shipyard.schemas.deployment import ApplicationCreate, DeploymentCreate, ContainerGroupCreate
from shipyard.utils.logging import get_logger

logger = get_logger(__name__)


@strawberry.type
class DeploymentQuery:

    @strawberry.field(permission_classes=[IsAuthenticated])
    def application(self, info: Info, id: strawberry.ID) -> Application:
        return ApplicationModel.find_for_user(info.context.db, info.context.user, id)

    @strawberry.field(permission_classes=[IsAuthenticated])
    def deployment(self, info: Info, application_id: strawberry.ID, id: strawberry.ID) -> Deployment:
        db = info.context.db
        application = ApplicationModel.find_for_user(db, info.context.user, application_id)
        return DeploymentModel.find_by_application_and_id(db, application, id)


@strawberry.type
class DeploymentMutation:

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def create_application(self, info: Info, organization_id: strawberry.ID, name: str) -> Application:
        data = validate(ApplicationCreate, organization_id=organization_id, name=name)
        db = info.context.db

        organization = OrganizationModel.find_for_user(db, info.context.user, data.organization_id)

        application = ApplicationModel(organization=organization, name=data.name)
        db.add(application)
        db.commit()

        logger.info(f"Application created: {application.id} in organization {organization.id}")

        return application

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def create_deployment(self, info: Info, application_id: strawberry.ID, image: str) -> Deployment:
        data = validate(DeploymentCreate, application_id=application_id, image=image)
        db = info.context.db

        application = ApplicationModel.find_for_user(db, info.context.user, data.application_id)

        deployment = DeploymentModel(application=application, image=data.image)
        db.add(deployment)
        db.commit()

        logger.info(f"Deployment created: {deployment.id} image={deployment.image}")

        return deployment

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def create_container_group(
        self,
        info: Info,
        application_id: strawberry.ID,
        deployment_id: strawberry.ID,
        name: str,
        size: int = 1
    ) -> ContainerGroup:
        data = validate(ContainerGroupCreate, deployment_id=deployment_id, name=name, size=size)
        db = info.context.db

        application = ApplicationModel.find_for_user(db, info.context.user, application_id)
        deployment = DeploymentModel.find_by_application_and_id(db, application, data.deployment_id)

        container_group = ContainerGroupModel(deployment=deployment, name=data.name, size=data.size)
        db.add(container_group)
        db.commit()

        logger.info(f"Container group created: {container_group.id} in deployment {deployment.id}")

        return container_group

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def delete_deployment(self, info: Info, application_id: strawberry.ID, id: strawberry.ID) -> Result:
        db = info.context.db

        application = ApplicationModel.find_for_user(db, info.context.user, application_id)
        deployment = DeploymentModel.find_by_application_and_id(db, application, id)

        db.delete(deployment)
        db.commit()

        logger.info(f"Deployment deleted: {id} by {info.context.user.id}")

        return Result()
