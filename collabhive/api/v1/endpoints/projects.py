from fastapi import APIRouter, Depends, Query, Response, status

from collabhive.api.v1.deps import (
    get_collaboration_service,
    get_project_service,
    require_project_creator,
)
from collabhive.api.v1.helpers.authentication import (
    AuthenticatedUser,
    get_current_user,
    get_optional_user,
)
from collabhive.api.v1.helpers.responses import APIResponse, success_response, unwrap
from collabhive.config import settings
from collabhive.models.pydantic_models.core_models import LinkCreateRequest
from collabhive.models.pydantic_models.project import (
    ProjectCreateRequest,
    ProjectCreateResponse,
    ProjectDetailModel,
    ProjectSearchFilters,
    ProjectSummaryModel,
    ProjectUpdateRequest,
)
from collabhive.services import CollaborationService, ProjectService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=list[ProjectSummaryModel])
async def search_projects(
    roles: list[str] = Query(default=[]),
    complexities: list[str] = Query(default=[]),
    technologies: list[str] = Query(default=[]),
    sort_by: str | None = Query(default=None, alias="sortBy"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(
        default=settings.default_page_size, ge=1, le=settings.max_page_size
    ),
    projects: ProjectService = Depends(get_project_service),
):
    """
    Search open projects. List filters match any of the given values;
    repeat the query parameter to pass several.
    """
    filters = ProjectSearchFilters(
        roles=roles,
        complexities=complexities,
        technologies=technologies,
        sort_by=sort_by,
        page=page,
        limit=limit,
    )
    return unwrap(await projects.find(filters))


@router.post(
    "",
    response_model=ProjectCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_project(
    request: ProjectCreateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    project_id = unwrap(await projects.create_new(current_user.user_id, request.name))
    return ProjectCreateResponse(project_id=project_id)


@router.get("/{project_id}", response_model=ProjectDetailModel)
async def get_project(
    project_id: str,
    current_user: AuthenticatedUser | None = Depends(get_optional_user),
    projects: ProjectService = Depends(get_project_service),
):
    """Project details; collaboration requests are only shown to the creator."""
    user_id = current_user.user_id if current_user else None
    return unwrap(await projects.get_details(project_id, user_id))


@router.patch("/{project_id}", response_model=APIResponse)
async def toggle_favorite(
    project_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
):
    message = unwrap(await projects.toggle_favorite(current_user.user_id, project_id))
    return success_response(message=message)


@router.put("/{project_id}", response_model=APIResponse)
async def update_project(
    project_id: str,
    request: ProjectUpdateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    await require_project_creator(project_id, current_user, collaborations)
    message = unwrap(await projects.update_details(project_id, request))
    return success_response(message=message)


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_project(
    project_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    await require_project_creator(project_id, current_user, collaborations)
    unwrap(await projects.delete(project_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{project_id}/links",
    response_model=APIResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_project_link(
    project_id: str,
    request: LinkCreateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    await require_project_creator(project_id, current_user, collaborations)
    link_id = unwrap(await projects.add_link(project_id, request))
    return success_response(message="Link added", data={"linkId": link_id})


@router.delete(
    "/{project_id}/links/{link_id}", status_code=status.HTTP_204_NO_CONTENT
)
async def remove_project_link(
    project_id: str,
    link_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    projects: ProjectService = Depends(get_project_service),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    await require_project_creator(project_id, current_user, collaborations)
    unwrap(await projects.remove_link(project_id, link_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
