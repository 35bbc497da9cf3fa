"""
Profile model.

Rows are provisioned by the external auth exchange; the primary key is the
opaque user id carried in the bearer token.
"""

from sqlalchemy import Column, String, Integer, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from collabhive.db.base import Base
from .relationships import project_favorites, utcnow


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(String, primary_key=True, index=True, nullable=False)
    name = Column(String, nullable=False, default="")
    email = Column(String, nullable=False, index=True)
    avatar_url = Column(String, nullable=True)
    bio = Column(String, nullable=False, default="")
    active_project_slots = Column(Integer, nullable=False, default=3)

    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    collaborations = relationship(
        "Collaboration",
        back_populates="profile",
        passive_deletes=True,
        order_by="Collaboration.created_at",
    )
    favorites = relationship(
        "Project",
        secondary=project_favorites,
        back_populates="favorited_by",
        order_by=project_favorites.c.created_at,
    )
    links = relationship(
        "AttachmentLink",
        back_populates="profile",
        cascade="all, delete-orphan",
        order_by="AttachmentLink.created_at",
    )
