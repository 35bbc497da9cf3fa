"""
Association tables for many-to-many relationships.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, ForeignKey, String, Table
from sqlalchemy.sql import func
from collabhive.db.base import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


# "profile has bookmarked project", independent of collaborations
project_favorites = Table(
    "project_favorites",
    Base.metadata,
    Column(
        "profile_id",
        String,
        ForeignKey("profiles.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "project_id",
        String(36),
        ForeignKey("projects.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "created_at",
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
    ),
)
