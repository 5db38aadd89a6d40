"""
Authentication Resolvers

Sign up, sign in (with the optional TOTP step) and the forgotten
password flow. None of these require an existing session.
"""
from datetime import datetime
from typing import Optional

import strawberry
from strawberry.types import Info

from shipyard.api.deps import validate
from shipyard.api.types import Result, SignInResult
from shipyard.config import get_settings
from shipyard.core.exceptions import AuthenticationError, InvalidInputError
from shipyard.core import session
from shipyard.core.session import AuthType
from shipyard.models.organization import Organization
from shipyard.models.password_reset import PasswordReset
from shipyard.models.user import User, normalize_email
from shipyard.schemas.auth import SignUpInput, SignInInput, ResetPasswordInput, TOTPInput
from shipyard.utils.logging import log_security_event, get_logger

logger = get_logger(__name__)
settings = get_settings()


@strawberry.type
class AuthMutation:

    @strawberry.mutation
    def sign_up(self, info: Info, name: str, email: str, password: str) -> Result:
        """
        Create an account and sign in.

        Every account gets a personal organization it is the only member of.
        """
        data = validate(SignUpInput, name=name, email=email, password=password)
        db = info.context.db

        if User.find_by_email(db, data.email):
            raise InvalidInputError("An account with this email already exists.")

        # First create the user's personal organization
        organization = Organization(name="Personal", is_personal=True)

        # Then the user themself, as the organization's only member
        user = User(
            name=data.name,
            email=normalize_email(data.email),
            personal_organization=organization,
        )
        user.set_password(data.password)
        organization.users.append(user)

        db.add_all([organization, user])
        db.commit()

        session.sign_in(info.context.response, user)

        logger.info(f"New user signed up: {user.id}")

        return Result()

    @strawberry.mutation
    def sign_in(self, info: Info, email: str, password: str) -> SignInResult:
        """
        Check email and password.

        Accounts with two factor auth get a TOTP session that must be
        finished with exchangeTOTP.
        """
        data = validate(SignInInput, email=email, password=password)
        db = info.context.db

        user = User.find_by_email(db, data.email)

        if not user:
            log_security_event("failed_sign_in", {"reason": "user_not_found"}, logger)
            raise AuthenticationError("No user found.")

        if not user.check_password(data.password):
            log_security_event(
                "failed_sign_in",
                {"reason": "invalid_password", "user_id": user.id},
                logger
            )
            raise AuthenticationError("Invalid password.")

        # A successful sign in invalidates outstanding reset links
        PasswordReset.remove_for_user(db, user)
        user.last_login_at = datetime.utcnow()
        db.commit()

        if user.has_totp:
            session.sign_in(info.context.response, user, AuthType.TOTP)
            return SignInResult(ok=True, requires_totp=True)

        session.sign_in(info.context.response, user)

        logger.info(f"Successful sign in: user={user.id}")

        return SignInResult(ok=True, requires_totp=False)

    @strawberry.mutation(name="exchangeTOTP")
    def exchange_totp(self, info: Info, token: str) -> Result:
        """Finish a sign in that is waiting for a TOTP code."""
        user = info.context.user_from_session(AuthType.TOTP)

        if not user:
            raise AuthenticationError("Did not find a started sign in.")

        data = validate(TOTPInput, token=token)

        if not user.verify_totp(data.token):
            log_security_event(
                "failed_sign_in",
                {"reason": "invalid_totp", "user_id": user.id},
                logger
            )
            raise AuthenticationError("Invalid TOTP token.")

        session.sign_in(info.context.response, user)

        logger.info(f"Successful sign in with TOTP: user={user.id}")

        return Result()

    @strawberry.mutation
    def sign_out(self, info: Info) -> Result:
        session.sign_out(info.context.response)
        return Result()

    @strawberry.mutation
    def forgot_password(self, info: Info, email: str) -> Result:
        """
        Send a password reset link.

        The result is the same whether or not the account exists, so this
        cannot be used to probe for registered emails.
        """
        reset = PasswordReset.create_for_email(info.context.db, normalize_email(email))

        if reset:
            # Reset links are delivered through the log until email sending exists
            logger.info(f"Password reset requested: user={reset.user_id}")
            logger.info(f"Password reset link: {settings.FRONTEND_URL}/auth/reset/{reset.uuid}")

        return Result()

    @strawberry.mutation
    def reset_password(self, info: Info, uuid: str, password: Optional[str] = None) -> Result:
        """
        Reset a password from an emailed link.

        Called twice: once without a password when the link is opened,
        which starts a PASSWORD_RESET session, then with the new password,
        which consumes the reset and signs the user in.
        """
        data = validate(ResetPasswordInput, uuid=uuid, password=password or None)
        db = info.context.db

        reset = PasswordReset.find_by_uuid(db, data.uuid)

        if not reset or reset.is_expired:
            log_security_event("invalid_password_reset", {"expired": bool(reset)}, logger)
            raise AuthenticationError("Invalid password reset.")

        if data.password:
            user = info.context.user_from_session(AuthType.PASSWORD_RESET)

            if not user or user.id != reset.user_id:
                raise AuthenticationError("Did not find a started password reset.")

            user.set_password(data.password)
            # Resets are single use
            PasswordReset.remove_for_user(db, user)
            db.commit()

            session.sign_in(info.context.response, user)

            logger.info(f"Password reset completed: user={user.id}")

            return Result()

        session.sign_in(info.context.response, reset.user, AuthType.PASSWORD_RESET)

        return Result()
