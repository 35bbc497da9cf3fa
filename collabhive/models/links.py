from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, String
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from collabhive.db.base import Base
from .relationships import utcnow
import uuid


class AttachmentLink(Base):
    """A titled URL attached to exactly one profile or one project."""

    __tablename__ = "attachment_links"

    id = Column(
        String(36),
        primary_key=True,
        nullable=False,
        default=lambda: str(uuid.uuid4()),
    )
    link_type = Column(String, nullable=False)
    title = Column(String, nullable=False)
    url = Column(String, nullable=False)
    profile_id = Column(
        String, ForeignKey("profiles.id", ondelete="CASCADE"), nullable=True, index=True
    )
    project_id = Column(
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )

    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )

    profile = relationship("Profile", back_populates="links")
    project = relationship("Project", back_populates="links")

    __table_args__ = (
        CheckConstraint(
            "(profile_id IS NULL) <> (project_id IS NULL)",
            name="ck_attachment_link_single_owner",
        ),
    )
