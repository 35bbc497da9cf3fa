from fastapi import APIRouter, Depends, Response, status

from collabhive.api.v1.deps import get_collaboration_service, require_project_creator
from collabhive.api.v1.helpers.authentication import AuthenticatedUser, get_current_user
from collabhive.api.v1.helpers.responses import APIResponse, success_response, unwrap
from collabhive.models.pydantic_models.collaboration import (
    CollaboratorProjectCardModel,
    CreatorProjectCardModel,
    CreatorProjectRequestsModel,
    JoinRequest,
    ManageCollaborationRequest,
)
from collabhive.services import CollaborationService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/creator-requests", response_model=list[CreatorProjectRequestsModel])
async def get_creator_requests(
    current_user: AuthenticatedUser = Depends(get_current_user),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    """Pending join request counts for each project the caller created."""
    return unwrap(
        await collaborations.get_creator_project_requests_for_user(
            current_user.user_id
        )
    )


@router.get("/creator-projects", response_model=list[CreatorProjectCardModel])
async def get_creator_projects(
    current_user: AuthenticatedUser = Depends(get_current_user),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    return unwrap(
        await collaborations.get_creator_project_cards(current_user.user_id)
    )


@router.get(
    "/collaborator-projects", response_model=list[CollaboratorProjectCardModel]
)
async def get_collaborator_projects(
    current_user: AuthenticatedUser = Depends(get_current_user),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    return unwrap(
        await collaborations.get_collaborator_project_cards(current_user.user_id)
    )


@router.post(
    "/{project_id}",
    response_model=APIResponse,
    status_code=status.HTTP_201_CREATED,
)
async def request_to_join(
    project_id: str,
    request: JoinRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    message = unwrap(
        await collaborations.request_to_join(
            project_id, current_user.user_id, request.request_message
        )
    )
    return success_response(message=message)


@router.put("/{project_id}", response_model=APIResponse)
async def manage_collaborations(
    project_id: str,
    request: ManageCollaborationRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    """Accept, decline and remove collaborators in one atomic batch."""
    await require_project_creator(project_id, current_user, collaborations)
    unwrap(
        await collaborations.manage(
            project_id,
            request.requests_accepted,
            request.requests_declined,
            request.collaborators_removed,
        )
    )
    return success_response(message="Collaborations updated")


@router.delete("/{project_id}", status_code=status.HTTP_204_NO_CONTENT)
async def leave_project(
    project_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    collaborations: CollaborationService = Depends(get_collaboration_service),
):
    unwrap(await collaborations.leave(project_id, current_user.user_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)
