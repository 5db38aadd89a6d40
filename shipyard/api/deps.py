"""
API Dependencies

The GraphQL context and the helpers every resolver module shares.

The context is built by a regular FastAPI dependency, so resolvers get
the same per-request database session the rest of the app would. The
signed in user is resolved lazily: operations that never look at it
never decode the session token.
"""
from functools import cached_property
from typing import Any, Optional, Type, TypeVar

from fastapi import Depends
from pydantic import BaseModel, ValidationError
from sqlalchemy.orm import Session
from strawberry.fastapi import BaseContext
from strawberry.permission import BasePermission
from strawberry.types import Info

from shipyard.database import get_db
from shipyard.models.user import User
from shipyard.core.exceptions import InvalidInputError
from shipyard.core.session import AuthType, user_from_session
import logging

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)


class Context(BaseContext):
    """
    Per-request GraphQL context.

    `request` and `response` are filled in by strawberry's GraphQLRouter
    after get_context returns.
    """

    def __init__(self, db: Session):
        super().__init__()
        self.db = db

    @cached_property
    def user(self) -> Optional[User]:
        """The user of a FULL session, or None."""
        return self.user_from_session(AuthType.FULL)

    def user_from_session(self, auth_type: AuthType) -> Optional[User]:
        if self.request is None:
            return None
        return user_from_session(self.request, self.db, auth_type)


async def get_context(db: Session = Depends(get_db)) -> Context:
    return Context(db)


class IsAuthenticated(BasePermission):
    """
    Require a fully signed in user.

    Sessions that are still waiting for a TOTP code or a new password do
    not count.
    """

    message = "Access denied! You need to be authorized to perform this action."
    error_extensions = {"code": "UNAUTHENTICATED"}

    def has_permission(self, source: Any, info: Info, **kwargs: Any) -> bool:
        return info.context.user is not None


def validate(schema: Type[SchemaT], **values: Any) -> SchemaT:
    """
    Validate resolver arguments against a pydantic schema.

    Raises InvalidInputError naming the first failing field.
    """
    try:
        return schema(**values)
    except ValidationError as exc:
        raise InvalidInputError.from_validation_error(exc) from exc
