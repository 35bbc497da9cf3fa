from fastapi import APIRouter, Depends, Response, status

from collabhive.api.v1.deps import get_profile_service
from collabhive.api.v1.helpers.authentication import AuthenticatedUser, get_current_user
from collabhive.api.v1.helpers.responses import APIResponse, success_response, unwrap
from collabhive.models.pydantic_models.core_models import LinkCreateRequest
from collabhive.models.pydantic_models.profile import (
    ProfileDetailModel,
    ProfileProvisionRequest,
    ProfileUpdateRequest,
)
from collabhive.services import ProfileService
import logging

router = APIRouter()
logger = logging.getLogger(__name__)


@router.post("/me", response_model=APIResponse)
async def provision_profile(
    response: Response,
    request: ProfileProvisionRequest | None = None,
    current_user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    """
    Create the caller's profile on first sign-in. Calling it again is a no-op
    answered with 200 instead of 201. Without a body the profile is built from
    the token claims.
    """
    claims = current_user.claims
    request = request or ProfileProvisionRequest(
        email=claims.get("email") or "",
        name=claims.get("name") or "",
        avatar_url=claims.get("picture"),
    )
    created = unwrap(await profiles.provision(current_user.user_id, request))
    if created:
        response.status_code = status.HTTP_201_CREATED
        return success_response(message="Profile created")
    return success_response(message="Profile already exists")


@router.put("", response_model=APIResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    message = unwrap(await profiles.update_details(current_user.user_id, request))
    return success_response(message=message)


@router.post(
    "/links",
    response_model=APIResponse,
    status_code=status.HTTP_201_CREATED,
)
async def add_profile_link(
    request: LinkCreateRequest,
    current_user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    link_id = unwrap(await profiles.add_link(current_user.user_id, request))
    return success_response(message="Link added", data={"linkId": link_id})


@router.delete("/links/{link_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_profile_link(
    link_id: str,
    current_user: AuthenticatedUser = Depends(get_current_user),
    profiles: ProfileService = Depends(get_profile_service),
):
    unwrap(await profiles.remove_link(current_user.user_id, link_id))
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}", response_model=ProfileDetailModel)
async def get_profile(
    user_id: str,
    profiles: ProfileService = Depends(get_profile_service),
):
    """Public profile with created, collaborated and favorited projects."""
    return unwrap(await profiles.get_details(user_id))
