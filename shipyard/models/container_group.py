"""
Container Group Model

A named set of identical containers belonging to one deployment.
"""
from sqlalchemy import Column, String, DateTime, ForeignKey, Integer, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
from shipyard.database import Base
import uuid


class ContainerGroup(Base):
    __tablename__ = "container_groups"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))

    deployment_id = Column(
        String(36),
        ForeignKey("deployments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    name = Column(String(255), nullable=False)
    size = Column(Integer, default=1, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    deployment = relationship("Deployment", back_populates="container_groups")

    __table_args__ = (
        CheckConstraint('size > 0', name='ck_container_group_size_positive'),
    )

    def __repr__(self):
        return f"<ContainerGroup {self.name} x{self.size} (deployment={self.deployment_id})>"
