"""
GraphQL Schema

Assembles the per-area resolver types into one schema and mounts it on
a FastAPI router.

Errors: ApiError messages reach the client as-is. Any other exception
raised inside a resolver is a bug; it is logged with its traceback and,
outside of debug mode, replaced by a generic message.
"""
from typing import List, Optional

import strawberry
from graphql import GraphQLError
from strawberry.extensions import MaskErrors
from strawberry.fastapi import GraphQLRouter
from strawberry.tools import merge_types
from strawberry.types import ExecutionContext

from shipyard.api.deps import get_context
from shipyard.api.resolvers.auth import AuthMutation
from shipyard.api.resolvers.deployments import DeploymentQuery, DeploymentMutation
from shipyard.api.resolvers.organizations import OrganizationQuery, OrganizationMutation
from shipyard.api.resolvers.users import UserQuery, UserMutation
from shipyard.config import get_settings
from shipyard.core.exceptions import ApiError
from shipyard.utils.logging import get_logger

logger = get_logger(__name__)
settings = get_settings()

Query = merge_types("Query", (UserQuery, OrganizationQuery, DeploymentQuery))
Mutation = merge_types("Mutation", (AuthMutation, UserMutation, OrganizationMutation, DeploymentMutation))


def is_unexpected_error(error: GraphQLError) -> bool:
    """True for errors that come from a bug rather than from the request."""
    original = error.original_error
    if original is None:
        # Parse and validation errors
        return False
    return not isinstance(original, (ApiError, GraphQLError))


def should_mask_error(error: GraphQLError) -> bool:
    if settings.DEBUG:
        return False
    return is_unexpected_error(error)


class Schema(strawberry.Schema):

    def process_errors(
        self,
        errors: List[GraphQLError],
        execution_context: Optional[ExecutionContext] = None
    ) -> None:
        # Runs before MaskErrors, so the original errors are logged
        for error in errors:
            if is_unexpected_error(error):
                logger.error(
                    f"Unhandled exception in resolver: "
                    f"{type(error.original_error).__name__}: {error.original_error}",
                    exc_info=error.original_error,
                    extra={"path": error.path}
                )
            else:
                logger.debug(f"GraphQL error: {error.message}", extra={"path": error.path})


schema = Schema(
    query=Query,
    mutation=Mutation,
    extensions=[
        lambda: MaskErrors(should_mask_error=should_mask_error, error_message="Internal server error"),
    ],
)

graphql_router = GraphQLRouter(
    schema,
    context_getter=get_context,
    graphql_ide="graphiql" if settings.DEBUG else None,
)
