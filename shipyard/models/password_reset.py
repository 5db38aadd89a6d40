"""
Password Reset Model

A password reset is a random token mailed to the user. Opening the link
starts a reset session; submitting a new password consumes the token.
Only one reset per user is outstanding at a time.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Session
from datetime import datetime, timedelta
from typing import Optional
from shipyard.database import Base
from shipyard.config import get_settings
from uuid import uuid4


class PasswordReset(Base):
    __tablename__ = "password_resets"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))

    # The token that appears in the reset link
    uuid = Column(String(36), unique=True, nullable=False, index=True, default=lambda: str(uuid4()))

    user_id = Column(
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    user = relationship("User", back_populates="password_resets")

    def __repr__(self):
        return f"<PasswordReset user={self.user_id}>"

    @property
    def is_expired(self) -> bool:
        lifetime = timedelta(hours=get_settings().PASSWORD_RESET_EXPIRE_HOURS)
        return self.created_at + lifetime < datetime.utcnow()

    @classmethod
    def create_for_email(cls, db: Session, email: str) -> Optional["PasswordReset"]:
        """
        Start a password reset for the account with this email.

        Returns None when no account uses the email. Any reset the user
        already had is replaced.
        """
        from shipyard.models.user import User

        user = User.find_by_email(db, email)
        if not user:
            return None

        cls.remove_for_user(db, user)
        reset = cls(uuid=str(uuid4()), user=user)
        db.add(reset)
        db.commit()
        return reset

    @classmethod
    def find_by_uuid(cls, db: Session, token: str) -> Optional["PasswordReset"]:
        return db.query(cls).filter(cls.uuid == token).first()

    @classmethod
    def remove_for_user(cls, db: Session, user) -> int:
        """Delete every outstanding reset of the user. Does not commit."""
        removed = db.query(cls).filter(cls.user_id == user.id).delete(synchronize_session="fetch")
        return removed
