"""
Collaboration service. Owns the relationship state machine.

    (none) ──request_to_join──▶ Pending ──manage(accepted)──▶ Accepted
                                   │                             │
                                   └──manage(declined)──▶ Declined
    Accepted ──manage(removed) / leave──▶ (row deleted)

Declines are permanent: a declined profile cannot re-request. Creator rows
are never touched by any transition here.
"""

import logging

from sqlalchemy import and_, delete, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased, selectinload

from collabhive.db.session import unit_of_work
from collabhive.models import (
    Collaboration,
    CollaborationRelationship,
    Profile,
    Project,
)
from collabhive.models.mappings import PROJECT_TECHNOLOGIES
from collabhive.models.pydantic_models.collaboration import (
    CollaboratorProjectCardModel,
    CreatorProjectCardModel,
    CreatorProjectRequestsModel,
)
from .responses import ServiceResponse

logger = logging.getLogger(__name__)

Relation = CollaborationRelationship


def join_names(names: list[str]) -> str:
    """Render names as a sentence fragment: "A, B, C, and 2 more"."""
    match len(names):
        case 0:
            return ""
        case 1:
            return names[0]
        case 2:
            return f"{names[0]} and {names[1]}"
        case 3:
            return f"{names[0]}, {names[1]}, and {names[2]}"
        case _:
            return f"{names[0]}, {names[1]}, {names[2]}, and {len(names) - 3} more"


def technology_stack_text(technologies: list[str]) -> str:
    return join_names([PROJECT_TECHNOLOGIES.get(key, key) for key in technologies])


class CollaborationService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def _find_relation(
        self, project_id: str, user_id: str
    ) -> Collaboration | None:
        result = await self.db.execute(
            select(Collaboration)
            .where(
                Collaboration.project_id == project_id,
                Collaboration.profile_id == user_id,
            )
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def get_creator_project_requests_for_user(
        self, user_id: str
    ) -> ServiceResponse[list[CreatorProjectRequestsModel]]:
        """Pending request counts for every project the user created."""
        logger.info(f"Fetching creator project requests for user {user_id}")

        creator = aliased(Collaboration)
        pending = aliased(Collaboration)
        stmt = (
            select(Project.id, Project.name, func.count(pending.id))
            .join(
                creator,
                and_(
                    creator.project_id == Project.id,
                    creator.profile_id == user_id,
                    creator.relation == Relation.CREATOR,
                ),
            )
            .outerjoin(
                pending,
                and_(
                    pending.project_id == Project.id,
                    pending.relation == Relation.COLLABORATOR_PENDING,
                ),
            )
            .group_by(Project.id, Project.name, Project.created_at)
            .order_by(Project.created_at)
        )
        try:
            rows = (await self.db.execute(stmt)).all()
        except Exception as e:
            logger.error(f"Error fetching creator project requests: {e}")
            return ServiceResponse.internal_error()

        requests = [
            CreatorProjectRequestsModel(
                project_id=project_id,
                project_name=name,
                number_of_requests=count,
            )
            for project_id, name, count in rows
        ]
        logger.info(f"{len(requests)} creator projects found for user {user_id}")
        return ServiceResponse.success(requests)

    async def validate_user_permission_for_project_edit(
        self, project_id: str, user_id: str
    ) -> bool | None:
        """
        True if the user created the project, False if not.

        None means the lookup itself failed; callers must treat it as
        "could not determine", never as a denial.
        """
        try:
            result = await self.db.execute(
                select(Collaboration.id).where(
                    Collaboration.project_id == project_id,
                    Collaboration.profile_id == user_id,
                    Collaboration.relation == Relation.CREATOR,
                )
            )
            return result.first() is not None
        except Exception as e:
            logger.error(f"Error validating edit permission on {project_id}: {e}")
            return None

    async def _projects_for_user(
        self, user_id: str, relation: CollaborationRelationship
    ) -> list[Project]:
        result = await self.db.execute(
            select(Collaboration)
            .where(
                Collaboration.profile_id == user_id,
                Collaboration.relation == relation,
            )
            .options(
                selectinload(Collaboration.project)
                .selectinload(Project.collaborations)
                .selectinload(Collaboration.profile)
            )
            .execution_options(populate_existing=True)
        )
        return [row.project for row in result.scalars().all()]

    async def get_creator_project_cards(
        self, user_id: str
    ) -> ServiceResponse[list[CreatorProjectCardModel]]:
        logger.info(f"Fetching creator project cards for user {user_id}")
        try:
            projects = await self._projects_for_user(user_id, Relation.CREATOR)
        except Exception as e:
            logger.error(f"Error fetching creator project cards: {e}")
            return ServiceResponse.internal_error()

        if not projects:
            return ServiceResponse.not_found("No projects found")

        cards = []
        for project in projects:
            names = [
                c.profile.name
                for c in project.collaborations
                if c.relation == Relation.COLLABORATOR_ACCEPTED
            ]
            cards.append(
                CreatorProjectCardModel(
                    id=project.id,
                    name=project.name,
                    technology_stack_text=technology_stack_text(project.technologies),
                    collaborators_text=f"With {join_names(names)}" if names else "",
                    is_open=project.is_open,
                )
            )
        return ServiceResponse.success(cards)

    async def get_collaborator_project_cards(
        self, user_id: str
    ) -> ServiceResponse[list[CollaboratorProjectCardModel]]:
        logger.info(f"Fetching collaborator project cards for user {user_id}")
        try:
            projects = await self._projects_for_user(
                user_id, Relation.COLLABORATOR_ACCEPTED
            )
        except Exception as e:
            logger.error(f"Error fetching collaborator project cards: {e}")
            return ServiceResponse.internal_error()

        if not projects:
            return ServiceResponse.not_found("No projects found")

        cards = []
        for project in projects:
            members = [
                c
                for c in project.collaborations
                if c.relation in (Relation.CREATOR, Relation.COLLABORATOR_ACCEPTED)
            ]
            creator_name = next(
                (c.profile.name for c in members if c.relation == Relation.CREATOR),
                "",
            )
            cards.append(
                CollaboratorProjectCardModel(
                    id=project.id,
                    name=project.name,
                    technology_stack_text=technology_stack_text(project.technologies),
                    creator_name=creator_name,
                    collaborators_text=join_names([c.profile.name for c in members]),
                )
            )
        return ServiceResponse.success(cards)

    async def request_to_join(
        self, project_id: str, user_id: str, request_message: str
    ) -> ServiceResponse[str]:
        logger.info(f"User {user_id} requesting to join project {project_id}")
        try:
            project = await self.db.get(Project, project_id)
            if project is None:
                return ServiceResponse.not_found("Project not found")
            if await self.db.get(Profile, user_id) is None:
                return ServiceResponse.not_found("Profile not found")

            existing = await self._find_relation(project_id, user_id)
            if existing is not None:
                return self._reject_join(existing.relation)

            async with unit_of_work(self.db):
                self.db.add(
                    Collaboration(
                        project_id=project_id,
                        profile_id=user_id,
                        relation=Relation.COLLABORATOR_PENDING,
                        request_message=request_message,
                    )
                )
        except IntegrityError:
            # a concurrent request for the same pair won the unique constraint
            logger.info(f"Duplicate join request from {user_id} on {project_id}")
            return ServiceResponse.bad_request(
                "You have already requested to join this project",
                code="duplicate_request",
            )
        except Exception as e:
            logger.error(f"Error creating join request: {e}")
            return ServiceResponse.internal_error()

        logger.info(f"Join request from {user_id} on {project_id} created")
        return ServiceResponse.success("Request sent")

    @staticmethod
    def _reject_join(relation: CollaborationRelationship) -> ServiceResponse[str]:
        match relation:
            case Relation.COLLABORATOR_PENDING:
                logger.info("User has already requested to join the project")
                return ServiceResponse.bad_request(
                    "You have already requested to join this project",
                    code="duplicate_request",
                )
            case Relation.COLLABORATOR_DECLINED:
                logger.info("Creator has previously declined the join request")
                return ServiceResponse.bad_request(
                    "The creator has previously declined your request to join this project",
                    code="previously_declined",
                )
            case Relation.COLLABORATOR_ACCEPTED:
                logger.info("User is already a collaborator on the project")
                return ServiceResponse.bad_request(
                    "You are already a collaborator on this project",
                    code="already_collaborator",
                )
            case Relation.CREATOR:
                logger.info("Creator tried to join their own project")
                return ServiceResponse.bad_request(
                    "You are the creator of this project",
                    code="already_creator",
                )

    async def manage(
        self,
        project_id: str,
        requests_accepted: list[str],
        requests_declined: list[str],
        collaborators_removed: list[str],
    ) -> ServiceResponse[None]:
        """
        Apply the three batches in order: accept, decline, remove.

        Accept and decline overwrite whatever non-creator relation the
        profile currently holds; remove deletes the row. Empty batches are
        skipped. All batches commit together or not at all.
        """
        logger.info(
            f"Managing collaborations on {project_id}: "
            f"accepted={requests_accepted} declined={requests_declined} "
            f"removed={collaborators_removed}"
        )

        def scoped(profile_ids: list[str]):
            return (
                Collaboration.project_id == project_id,
                Collaboration.profile_id.in_(list(dict.fromkeys(profile_ids))),
                Collaboration.relation != Relation.CREATOR,
            )

        try:
            async with unit_of_work(self.db):
                if requests_accepted:
                    await self.db.execute(
                        update(Collaboration)
                        .where(*scoped(requests_accepted))
                        .values(relation=Relation.COLLABORATOR_ACCEPTED)
                    )
                if requests_declined:
                    await self.db.execute(
                        update(Collaboration)
                        .where(*scoped(requests_declined))
                        .values(relation=Relation.COLLABORATOR_DECLINED)
                    )
                if collaborators_removed:
                    await self.db.execute(
                        delete(Collaboration).where(*scoped(collaborators_removed))
                    )
        except Exception as e:
            logger.error(f"Error managing collaborations on {project_id}: {e}")
            return ServiceResponse.internal_error(
                "Internal server error with managing collaborations"
            )

        logger.info(f"Collaborations on {project_id} updated")
        return ServiceResponse.success(None)

    async def leave(self, project_id: str, user_id: str) -> ServiceResponse[None]:
        """Drop the user's relation to the project; a missing row is not an error."""
        logger.info(f"User {user_id} leaving project {project_id}")
        try:
            existing = await self._find_relation(project_id, user_id)
            if existing is not None and existing.relation == Relation.CREATOR:
                return ServiceResponse.bad_request(
                    "The creator cannot leave their own project",
                    code="creator_cannot_leave",
                )
            async with unit_of_work(self.db):
                await self.db.execute(
                    delete(Collaboration).where(
                        Collaboration.project_id == project_id,
                        Collaboration.profile_id == user_id,
                        Collaboration.relation != Relation.CREATOR,
                    )
                )
        except Exception as e:
            logger.error(f"Error leaving project {project_id}: {e}")
            return ServiceResponse.internal_error()

        return ServiceResponse.success(None)
