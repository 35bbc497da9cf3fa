"""
ORM models. Importing this package registers every table with
``Base.metadata``.
"""

from .enums import CollaborationRelationship as CollaborationRelationship
from .relationships import project_favorites as project_favorites
from .profiles import Profile as Profile
from .projects import (
    Project as Project,
    ProjectRole as ProjectRole,
    ProjectTechnology as ProjectTechnology,
)
from .collaborations import Collaboration as Collaboration
from .links import AttachmentLink as AttachmentLink
