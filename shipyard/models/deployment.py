"""
Deployment Model

A deployment records which container image an application runs. The
container groups hanging off it describe how many copies run where;
placement and lifecycle are handled outside this service.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship, Session
from datetime import datetime
from shipyard.database import Base
from shipyard.core.exceptions import NotFoundError
import uuid


class Deployment(Base):
    __tablename__ = "deployments"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    application_id = Column(
        String(36),
        ForeignKey("applications.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    # Image reference, e.g. "registry.example.com/web:1.4.2"
    # TODO: Resolve the reference against the registry so we know it is launchable.
    image = Column(String(512), nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    application = relationship("Application", back_populates="deployments")
    container_groups = relationship(
        "ContainerGroup",
        back_populates="deployment",
        cascade="all, delete-orphan",
        order_by="ContainerGroup.created_at",
    )

    __table_args__ = (
        Index('idx_deployment_application_created', 'application_id', 'created_at'),
    )

    def __repr__(self):
        return f"<Deployment {self.image} (application={self.application_id})>"

    @classmethod
    def find_by_application_and_id(cls, db: Session, application, deployment_id: str) -> "Deployment":
        deployment = db.query(cls).filter(
            cls.id == deployment_id,
            cls.application_id == application.id,
        ).first()
        if not deployment:
            raise NotFoundError("No deployment found.")
        return deployment
