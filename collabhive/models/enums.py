"""
Enumerations for the collaboration domain.
"""

from enum import Enum


class CollaborationRelationship(str, Enum):
    """Relation tag binding one profile to one project.

    Lifecycle for non-creators:
    (none) -> COLLABORATOR_PENDING -> COLLABORATOR_ACCEPTED | COLLABORATOR_DECLINED.
    Accepted rows leave the table when the collaborator is removed or leaves.
    """

    CREATOR = "Creator"
    COLLABORATOR_PENDING = "CollaboratorPending"
    COLLABORATOR_ACCEPTED = "CollaboratorAccepted"
    COLLABORATOR_DECLINED = "CollaboratorDeclined"
