"""
Project model.

Open roles and technologies are stored as ordered tag rows so that the
match-any search filters stay plain relational predicates.
"""

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
)
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship
from collabhive.db.base import Base
from .relationships import project_favorites, utcnow
import uuid


class ProjectRole(Base):
    __tablename__ = "project_roles"

    project_id = Column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    role = Column(String, primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)


class ProjectTechnology(Base):
    __tablename__ = "project_technologies"

    project_id = Column(
        String(36), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True
    )
    technology = Column(String, primary_key=True, index=True)
    position = Column(Integer, nullable=False, default=0)


def _sync_tags(current, values, factory, attr):
    # Reuse surviving rows so a re-saved tag never collides with its own key
    existing = {getattr(tag, attr): tag for tag in current}
    tags = []
    for position, value in enumerate(dict.fromkeys(values)):
        tag = existing.get(value) or factory(**{attr: value})
        tag.position = position
        tags.append(tag)
    return tags


class Project(Base):
    __tablename__ = "projects"

    id = Column(
        String(36),
        primary_key=True,
        index=True,
        nullable=False,
        default=lambda: str(uuid.uuid4()),
    )
    name = Column(String, nullable=False)
    description = Column(String, nullable=False, default="")
    is_open = Column(Boolean, nullable=False, default=False, index=True)
    complexity = Column(String, nullable=False, index=True)

    created_at = Column(
        DateTime(timezone=True), default=utcnow, server_default=func.now()
    )
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    collaborations = relationship(
        "Collaboration",
        back_populates="project",
        passive_deletes=True,
        order_by="Collaboration.created_at",
    )
    favorited_by = relationship(
        "Profile", secondary=project_favorites, back_populates="favorites"
    )
    links = relationship(
        "AttachmentLink",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="AttachmentLink.created_at",
    )
    role_tags = relationship(
        ProjectRole,
        cascade="all, delete-orphan",
        order_by=ProjectRole.position,
        lazy="selectin",
    )
    technology_tags = relationship(
        ProjectTechnology,
        cascade="all, delete-orphan",
        order_by=ProjectTechnology.position,
        lazy="selectin",
    )

    @property
    def roles_open(self) -> list[str]:
        return [tag.role for tag in self.role_tags]

    @roles_open.setter
    def roles_open(self, roles: list[str]) -> None:
        self.role_tags = _sync_tags(self.role_tags, roles, ProjectRole, "role")

    @property
    def technologies(self) -> list[str]:
        return [tag.technology for tag in self.technology_tags]

    @technologies.setter
    def technologies(self, technologies: list[str]) -> None:
        self.technology_tags = _sync_tags(
            self.technology_tags, technologies, ProjectTechnology, "technology"
        )
