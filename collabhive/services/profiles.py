"""
Profile service: the aggregated profile view plus profile and link edits.
"""

import logging

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from collabhive.config import settings
from collabhive.db.session import unit_of_work
from collabhive.models import (
    AttachmentLink,
    Collaboration,
    CollaborationRelationship,
    Profile,
    Project,
    project_favorites,
)
from collabhive.models.pydantic_models.core_models import LinkCreateRequest, LinkModel
from collabhive.models.pydantic_models.profile import (
    ProfileDetailModel,
    ProfileProjectCardModel,
    ProfileProvisionRequest,
    ProfileUpdateRequest,
)
from .responses import ServiceResponse

logger = logging.getLogger(__name__)

Relation = CollaborationRelationship


def _with_creator():
    return selectinload(Project.collaborations).selectinload(Collaboration.profile)


def _project_card(project: Project) -> ProfileProjectCardModel:
    """Card for a project, attributed to the project's creator."""
    creator = next(
        (c.profile for c in project.collaborations if c.relation == Relation.CREATOR),
        None,
    )
    return ProfileProjectCardModel(
        id=project.id,
        name=project.name,
        creator_id=creator.id if creator else None,
        creator_name=creator.name if creator else "",
        creator_avatar_url=creator.avatar_url if creator else None,
        updated_at=project.updated_at,
        is_open=project.is_open,
    )


class ProfileService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_details(self, user_id: str) -> ServiceResponse[ProfileDetailModel]:
        logger.info(f"Fetching profile details for {user_id}")

        try:
            profile = await self.db.get(Profile, user_id)
            if profile is None:
                logger.warning(f"No profile found for {user_id}")
                return ServiceResponse.not_found("No user found")

            # one row per (project, relation) this profile holds, oldest first
            memberships = (
                await self.db.execute(
                    select(Project, Collaboration.relation)
                    .join(Collaboration, Collaboration.project_id == Project.id)
                    .where(
                        Collaboration.profile_id == user_id,
                        Collaboration.relation.in_(
                            (Relation.CREATOR, Relation.COLLABORATOR_ACCEPTED)
                        ),
                    )
                    .order_by(Collaboration.created_at)
                    .options(_with_creator())
                    .execution_options(populate_existing=True)
                )
            ).all()
            favorites = (
                await self.db.execute(
                    select(Project)
                    .join(
                        project_favorites,
                        project_favorites.c.project_id == Project.id,
                    )
                    .where(project_favorites.c.profile_id == user_id)
                    .order_by(project_favorites.c.created_at)
                    .options(_with_creator())
                    .execution_options(populate_existing=True)
                )
            ).scalars().all()
            links = (
                await self.db.execute(
                    select(AttachmentLink)
                    .where(AttachmentLink.profile_id == user_id)
                    .order_by(AttachmentLink.created_at)
                )
            ).scalars().all()

            creator_projects = []
            collaboration_projects = []
            for project, relation in memberships:
                if relation == Relation.CREATOR:
                    creator_projects.append(_project_card(project))
                else:
                    collaboration_projects.append(_project_card(project))

            details = ProfileDetailModel(
                id=profile.id,
                email=profile.email,
                name=profile.name,
                avatar_url=profile.avatar_url,
                bio=profile.bio,
                active_project_slots=profile.active_project_slots,
                favorites=[_project_card(project) for project in favorites],
                creator_projects=creator_projects,
                collaboration_projects=collaboration_projects,
                links=[LinkModel.from_model(link) for link in links],
            )
        except Exception as e:
            logger.error(f"Error fetching profile {user_id}: {e}")
            return ServiceResponse.internal_error()

        return ServiceResponse.success(details)

    async def provision(
        self, user_id: str, details: ProfileProvisionRequest
    ) -> ServiceResponse[bool]:
        """
        Create the profile row for a freshly authenticated user.

        Idempotent: returns False when the profile already existed.
        """
        try:
            if await self.db.get(Profile, user_id) is not None:
                return ServiceResponse.success(False)

            async with unit_of_work(self.db):
                self.db.add(
                    Profile(
                        id=user_id,
                        email=details.email,
                        name=details.name,
                        avatar_url=details.avatar_url,
                        bio="",
                        active_project_slots=settings.default_active_project_slots,
                    )
                )
        except Exception as e:
            logger.error(f"Error provisioning profile {user_id}: {e}")
            return ServiceResponse.internal_error()

        logger.info(f"Provisioned profile {user_id}")
        return ServiceResponse.success(True)

    async def update_details(
        self, user_id: str, changes: ProfileUpdateRequest
    ) -> ServiceResponse[str]:
        """
        Sparse update. An explicit null clears ``avatar_url``; name and bio
        cannot be cleared.
        """
        patch = changes.model_dump(exclude_unset=True)
        logger.info(f"Updating profile {user_id} fields {sorted(patch)}")

        for field in ("name", "bio"):
            if field in patch and patch[field] is None:
                return ServiceResponse.bad_request(f"{field} cannot be null")

        try:
            profile = await self.db.get(Profile, user_id, populate_existing=True)
            if profile is None:
                return ServiceResponse.not_found("No user found")

            async with unit_of_work(self.db):
                for field, value in patch.items():
                    setattr(profile, field, value)
        except Exception as e:
            logger.error(f"Error updating profile {user_id}: {e}")
            return ServiceResponse.internal_error()

        return ServiceResponse.success("User details updated")

    async def add_link(
        self, user_id: str, link: LinkCreateRequest
    ) -> ServiceResponse[str]:
        logger.info(f"Adding {link.link_type} link to profile {user_id}")
        try:
            if await self.db.get(Profile, user_id) is None:
                return ServiceResponse.not_found("No user found")

            async with unit_of_work(self.db):
                record = AttachmentLink(
                    link_type=link.link_type,
                    title=link.link_title,
                    url=link.link_url,
                    profile_id=user_id,
                )
                self.db.add(record)
        except Exception as e:
            logger.error(f"Error adding link to profile {user_id}: {e}")
            return ServiceResponse.internal_error()

        return ServiceResponse.success(record.id)

    async def remove_link(self, user_id: str, link_id: str) -> ServiceResponse[str]:
        logger.info(f"Removing link {link_id} from profile {user_id}")
        try:
            async with unit_of_work(self.db):
                result = await self.db.execute(
                    delete(AttachmentLink).where(
                        AttachmentLink.id == link_id,
                        AttachmentLink.profile_id == user_id,
                    )
                )
        except Exception as e:
            logger.error(f"Error removing link {link_id}: {e}")
            return ServiceResponse.internal_error()

        if result.rowcount == 0:
            return ServiceResponse.not_found("Link not found")
        return ServiceResponse.success("Link removed successfully")
