"""
Collaboration model: one row per (project, profile) pair carrying the
relation tag and the optional join-request message.
"""

from sqlalchemy import Column, DateTime, Enum, ForeignKey, String, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from collabhive.db.base import Base
from .enums import CollaborationRelationship
from .relationships import utcnow
import uuid


class Collaboration(Base):
    __tablename__ = "collaborations"

    id = Column(
        String(36),
        primary_key=True,
        nullable=False,
        default=lambda: str(uuid.uuid4()),
    )
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    profile_id = Column(
        String,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    relation = Column(
        Enum(
            CollaborationRelationship,
            name="collaboration_relationship",
            values_callable=lambda enum: [member.value for member in enum],
            validate_strings=True,
        ),
        nullable=False,
        index=True,
    )
    request_message = Column(String, nullable=True)

    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    project = relationship("Project", back_populates="collaborations")
    profile = relationship("Profile", back_populates="collaborations")

    __table_args__ = (
        UniqueConstraint("project_id", "profile_id", name="uq_collaboration_pair"),
    )
