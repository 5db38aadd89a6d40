"""
User Model

A user signs in with email and password, optionally protected by a TOTP
second factor. Every user owns exactly one personal organization, created
at sign up, and may be a member of any number of shared organizations.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship, Session
from datetime import datetime
from typing import Optional
from shipyard.database import Base
from shipyard.core.security import get_password_hash, verify_password, verify_totp
from shipyard.models.organization import organization_members
import uuid


def normalize_email(email: str) -> str:
    """Emails are stored and looked up lowercased."""
    return email.strip().lower()


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    # Profile and credentials
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)

    # Base32 TOTP secret; NULL means two factor auth is disabled
    totp_secret = Column(String(64), nullable=True)

    # Nullable only while sign up is in progress
    personal_organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
    last_login_at = Column(DateTime, nullable=True)

    # Relationships
    personal_organization = relationship("Organization", foreign_keys=[personal_organization_id])
    organizations = relationship(
        "Organization",
        secondary=organization_members,
        back_populates="users",
    )
    password_resets = relationship(
        "PasswordReset",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    def __repr__(self):
        return f"<User {self.email}>"

    @classmethod
    def find_by_email(cls, db: Session, email: str) -> Optional["User"]:
        return db.query(cls).filter(cls.email == normalize_email(email)).first()

    @property
    def has_totp(self) -> bool:
        return bool(self.totp_secret)

    def set_password(self, password: str) -> None:
        self.hashed_password = get_password_hash(password)

    def check_password(self, password: str) -> bool:
        return verify_password(password, self.hashed_password)

    def verify_totp(self, token: str) -> bool:
        """Check a code from the user's authenticator app."""
        if not self.totp_secret:
            return False
        return verify_totp(self.totp_secret, token)

    def is_member_of(self, organization) -> bool:
        return any(org.id == organization.id for org in self.organizations)
