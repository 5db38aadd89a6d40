"""
Organization Model

The organization is the tenancy boundary. Applications, and through them
deployments, belong to exactly one organization, and every lookup on
behalf of a user goes through organization membership.

Each user also has a personal organization. Personal organizations have a
single member and are hidden from the user's organization list; the
client shows them separately.
"""
from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship, Session
from datetime import datetime
from shipyard.database import Base
from shipyard.core.exceptions import NotFoundError
import uuid


# Membership association between users and organizations
organization_members = Table(
    "organization_members",
    Base.metadata,
    Column(
        "organization_id",
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "user_id",
        String(36),
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class Organization(Base):
    __tablename__ = "organizations"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    name = Column(String(255), nullable=False)
    is_personal = Column(Boolean, default=False, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    users = relationship(
        "User",
        secondary=organization_members,
        back_populates="organizations",
    )
    applications = relationship(
        "Application",
        back_populates="organization",
        cascade="all, delete-orphan",
        order_by="Application.created_at",
    )

    def __repr__(self):
        return f"<Organization {self.name} personal={self.is_personal}>"

    @classmethod
    def find_for_user(cls, db: Session, user, organization_id: str) -> "Organization":
        """
        Load an organization the user is a member of.

        Organizations the user cannot see are reported exactly like ones
        that do not exist.
        """
        organization = (
            db.query(cls)
            .join(organization_members, organization_members.c.organization_id == cls.id)
            .filter(
                cls.id == organization_id,
                organization_members.c.user_id == user.id,
            )
            .first()
        )
        if not organization:
            raise NotFoundError("No organization found.")
        return organization
