"""
Application Model

An application groups the deployments of one workload inside an
organization. It is the unit the console lists on an organization page.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, Session
from datetime import datetime
from shipyard.database import Base
from shipyard.core.exceptions import NotFoundError
from shipyard.models.organization import organization_members
import uuid


class Application(Base):
    __tablename__ = "applications"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    organization_id = Column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    organization = relationship("Organization", back_populates="applications")
    deployments = relationship(
        "Deployment",
        back_populates="application",
        cascade="all, delete-orphan",
        order_by="desc(Deployment.created_at)",
    )

    __table_args__ = (
        Index('idx_application_organization_name', 'organization_id', 'name'),
    )

    def __repr__(self):
        return f"<Application {self.name} (organization={self.organization_id})>"

    @classmethod
    def find_for_user(cls, db: Session, user, application_id: str) -> "Application":
        """Load an application from one of the user's organizations."""
        application = (
            db.query(cls)
            .join(organization_members, organization_members.c.organization_id == cls.organization_id)
            .filter(
                cls.id == application_id,
                organization_members.c.user_id == user.id,
            )
            .first()
        )
        if not application:
            raise NotFoundError("No application found.")
        return application
