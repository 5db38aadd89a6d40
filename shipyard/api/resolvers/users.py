"""
Account Resolvers

Operations on the signed in user's own account. Everything here needs a
FULL session.
"""
import strawberry
from strawberry.types import Info
from typing import Optional

from shipyard.api.deps import IsAuthenticated, validate
from shipyard.api.types import Result, User
from shipyard.core.exceptions import ApiError, AuthenticationError, InvalidInputError
from shipyard.core.security import verify_totp
from shipyard.models.user import User as UserModel, normalize_email
from shipyard.schemas.auth import ChangePasswordInput, EnableTOTPInput
from shipyard.schemas.user import AccountUpdate
from shipyard.utils.logging import log_security_event, get_logger

logger = get_logger(__name__)


@strawberry.type
class UserQuery:

    @strawberry.field(permission_classes=[IsAuthenticated])
    def me(self, info: Info) -> User:
        return info.context.user


@strawberry.type
class UserMutation:

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def update_account(
        self,
        info: Info,
        name: Optional[str] = None,
        email: Optional[str] = None
    ) -> User:
        """Update profile fields. Empty values leave a field unchanged."""
        data = validate(AccountUpdate, name=name or None, email=email or None)
        db = info.context.db
        user = info.context.user

        if data.name:
            user.name = data.name

        if data.email:
            new_email = normalize_email(data.email)
            if new_email != user.email:
                if UserModel.find_by_email(db, new_email):
                    raise InvalidInputError("An account with this email already exists.")
                user.email = new_email

        db.commit()

        logger.info(f"Account updated: user={user.id}")

        return user

    @strawberry.mutation(permission_classes=[IsAuthenticated])
    def change_password(self, info: Info, current_password: str, new_password: str) -> Result:
        data = validate(
            ChangePasswordInput,
            current_password=current_password,
            new_password=new_password
        )
        user = info.context.user

        if not user.check_password(data.current_password):
            log_security_event(
                "failed_password_change",
                {"reason": "invalid_password", "user_id": user.id},
                logger
            )
            raise AuthenticationError("Invalid password.")

        user.set_password(data.new_password)
        info.context.db.commit()

        logger.info(f"Password changed: user={user.id}")

        return Result()

    @strawberry.mutation(name="enableTOTP", permission_classes=[IsAuthenticated])
    def enable_totp(self, info: Info, secret: str, token: str) -> Result:
        """
        Turn on two factor auth.

        `secret` comes from User.onboardTOTP; `token` is the code the
        authenticator app shows for it, proving the app was set up.
        """
        user = info.context.user

        if user.totp_secret:
            raise ApiError("TOTP Already Enabled")

        data = validate(EnableTOTPInput, secret=secret, token=token)

        if not verify_totp(data.secret, data.token):
            raise InvalidInputError("Invalid TOTP token.")

        user.totp_secret = data.secret
        info.context.db.commit()

        logger.info(f"TOTP enabled: user={user.id}")

        return Result()

    @strawberry.mutation(name="disableTOTP", permission_classes=[IsAuthenticated])
    def disable_totp(self, info: Info, password: str) -> Result:
        user = info.context.user

        if not user.totp_secret:
            raise ApiError("TOTP is not enabled.")

        if not user.check_password(password):
            log_security_event(
                "failed_totp_disable",
                {"reason": "invalid_password", "user_id": user.id},
                logger
            )
            raise AuthenticationError("Invalid password.")

        user.totp_secret = None
        info.context.db.commit()

        logger.info(f"TOTP disabled: user={user.id}")

        return Result()
