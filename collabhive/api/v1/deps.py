from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from collabhive.api.v1.helpers.authentication import AuthenticatedUser
from collabhive.api.v1.helpers.responses import error_response, forbidden_response
from collabhive.db.session import get_db
from collabhive.db.valkey import ValkeyCache, get_cache
from collabhive.services import CollaborationService, ProfileService, ProjectService


# Database dependency - use get_db directly with FastAPI's Depends()
# DO NOT create helper functions that call next(get_db()) as this breaks
# the generator pattern and causes connection leaks


def get_project_service(
    db: AsyncSession = Depends(get_db),
    cache: ValkeyCache | None = Depends(get_cache),
) -> ProjectService:
    return ProjectService(db, cache)


def get_collaboration_service(
    db: AsyncSession = Depends(get_db),
) -> CollaborationService:
    return CollaborationService(db)


def get_profile_service(db: AsyncSession = Depends(get_db)) -> ProfileService:
    return ProfileService(db)


async def require_project_creator(
    project_id: str,
    user: AuthenticatedUser,
    collaborations: CollaborationService,
) -> None:
    """Raise 403 unless the user created the project, 500 if that is unknown."""
    allowed = await collaborations.validate_user_permission_for_project_edit(
        project_id, user.user_id
    )
    if allowed is None:
        raise error_response("Something went wrong :(", status_code=500)
    if not allowed:
        raise forbidden_response("Forbidden")
