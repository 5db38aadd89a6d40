"""Tests for applications, deployments and container groups."""

import pytest

from conftest import error_messages, execute


PERSONAL = "query { me { personalOrganization { id } } }"

CREATE_APPLICATION = """
mutation CreateApplication($organizationId: ID!, $name: String!) {
    createApplication(organizationId: $organizationId, name: $name) { id name }
}
"""

CREATE_DEPLOYMENT = """
mutation CreateDeployment($applicationId: ID!, $image: String!) {
    createDeployment(applicationId: $applicationId, image: $image) { id image createdAt containerGroups { id } }
}
"""

CREATE_CONTAINER_GROUP = """
mutation CreateGroup($applicationId: ID!, $deploymentId: ID!, $name: String!, $size: Int!) {
    createContainerGroup(applicationId: $applicationId, deploymentId: $deploymentId, name: $name, size: $size) {
        id name size
    }
}
"""

APPLICATION = """
query Application($id: ID!) {
    application(id: $id) {
        id
        name
        deployments { id image containerGroups { name size } }
    }
}
"""

DEPLOYMENT = """
query Deployment($applicationId: ID!, $id: ID!) {
    deployment(applicationId: $applicationId, id: $id) { id image }
}
"""

DELETE_DEPLOYMENT = """
mutation Delete($applicationId: ID!, $id: ID!) {
    deleteDeployment(applicationId: $applicationId, id: $id) { ok }
}
"""


@pytest.fixture
def application_id(user, client):
    organization_id = execute(client, PERSONAL)["data"]["me"]["personalOrganization"]["id"]
    result = execute(client, CREATE_APPLICATION, organizationId=organization_id, name="web")
    return result["data"]["createApplication"]["id"]


@pytest.fixture
def deployment_id(client, application_id):
    result = execute(client, CREATE_DEPLOYMENT, applicationId=application_id, image="registry.example.com/web:1.0")
    return result["data"]["createDeployment"]["id"]


class TestApplications:

    def test_create_application(self, client, application_id):
        result = execute(client, APPLICATION, id=application_id)

        assert result["data"]["application"] == {"id": application_id, "name": "web", "deployments": []}

    def test_create_in_foreign_organization(self, client, make_client, sign_up, application_id):
        outsider = make_client()
        sign_up(outsider, name="Charles Babbage", email="charles@example.com")
        ada_personal = execute(client, PERSONAL)["data"]["me"]["personalOrganization"]["id"]

        result = execute(outsider, CREATE_APPLICATION, organizationId=ada_personal, name="sneaky")

        assert error_messages(result) == ["No organization found."]

    def test_not_visible_to_non_members(self, make_client, sign_up, application_id):
        outsider = make_client()
        sign_up(outsider, name="Charles Babbage", email="charles@example.com")

        result = execute(outsider, APPLICATION, id=application_id)

        assert error_messages(result) == ["No application found."]


class TestDeployments:

    def test_create_deployment(self, client, application_id, deployment_id):
        result = execute(client, DEPLOYMENT, applicationId=application_id, id=deployment_id)

        assert result["data"]["deployment"] == {"id": deployment_id, "image": "registry.example.com/web:1.0"}

    def test_image_with_whitespace_rejected(self, client, application_id):
        result = execute(client, CREATE_DEPLOYMENT, applicationId=application_id, image="web latest")
        assert error_messages(result)[0].startswith("Invalid image")

    def test_deployment_scoped_to_application(self, client, application_id, deployment_id):
        organization_id = execute(client, PERSONAL)["data"]["me"]["personalOrganization"]["id"]
        other_id = execute(
            client, CREATE_APPLICATION, organizationId=organization_id, name="worker"
        )["data"]["createApplication"]["id"]

        result = execute(client, DEPLOYMENT, applicationId=other_id, id=deployment_id)

        assert error_messages(result) == ["No deployment found."]

    def test_delete_deployment(self, client, application_id, deployment_id):
        execute(
            client, CREATE_CONTAINER_GROUP,
            applicationId=application_id, deploymentId=deployment_id, name="web", size=2,
        )

        result = execute(client, DELETE_DEPLOYMENT, applicationId=application_id, id=deployment_id)

        assert result["data"]["deleteDeployment"]["ok"] is True
        assert execute(client, APPLICATION, id=application_id)["data"]["application"]["deployments"] == []


class TestContainerGroups:

    def test_create_container_group(self, client, application_id, deployment_id):
        result = execute(
            client, CREATE_CONTAINER_GROUP,
            applicationId=application_id, deploymentId=deployment_id, name="web", size=3,
        )
        assert result["data"]["createContainerGroup"]["size"] == 3

        deployments = execute(client, APPLICATION, id=application_id)["data"]["application"]["deployments"]
        assert deployments[0]["containerGroups"] == [{"name": "web", "size": 3}]

    def test_size_must_be_positive(self, client, application_id, deployment_id):
        result = execute(
            client, CREATE_CONTAINER_GROUP,
            applicationId=application_id, deploymentId=deployment_id, name="web", size=0,
        )
        assert error_messages(result)[0].startswith("Invalid size")
