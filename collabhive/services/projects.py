"""
Project service: search, search caching, detail derivation and the
owner-side project mutations.

Search results are cached (see ``search_cache``); project details are always
read from the store. Every project-mutating write (create, update, delete)
invalidates the whole search cache namespace after it commits.
"""

import logging

from sqlalchemy import delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from collabhive.db.session import unit_of_work
from collabhive.models import (
    AttachmentLink,
    Collaboration,
    CollaborationRelationship,
    Profile,
    Project,
    ProjectRole,
    ProjectTechnology,
    project_favorites,
)
from collabhive.models.relationships import utcnow
from collabhive.models.mappings import (
    PROJECT_COMPLEXITIES,
    PROJECT_SEARCH_SORT_BY,
    default_complexity,
)
from collabhive.models.pydantic_models.core_models import (
    LinkCreateRequest,
    LinkModel,
    PersonModel,
)
from collabhive.models.pydantic_models.project import (
    CollaborationRequestModel,
    ProjectDetailModel,
    ProjectSearchFilters,
    ProjectSummaryModel,
    ProjectUpdateRequest,
)
from .responses import ServiceResponse
from .search_cache import CacheClient, ProjectSearchCache

logger = logging.getLogger(__name__)

Relation = CollaborationRelationship

# scalar favorite count, usable both as a result column and as a sort key
favorite_count = (
    select(func.count())
    .select_from(project_favorites)
    .where(project_favorites.c.project_id == Project.id)
    .correlate(Project)
    .scalar_subquery()
)


def _person(profile: Profile) -> PersonModel:
    return PersonModel(id=profile.id, name=profile.name, avatar_url=profile.avatar_url)


def derive_members(
    collaborations: list[Collaboration],
) -> tuple[PersonModel | None, list[PersonModel], list[CollaborationRequestModel]]:
    """
    Partition a project's relationship rows in one pass.

    Returns (creator, accepted collaborators, pending + declined requests).
    """
    creator = None
    collaborators = []
    requests = []
    for collaboration in collaborations:
        relation = collaboration.relation
        if relation == Relation.CREATOR:
            creator = _person(collaboration.profile)
        elif relation == Relation.COLLABORATOR_ACCEPTED:
            collaborators.append(_person(collaboration.profile))
        elif relation in (
            Relation.COLLABORATOR_PENDING,
            Relation.COLLABORATOR_DECLINED,
        ):
            requests.append(
                CollaborationRequestModel(
                    id=collaboration.profile.id,
                    sender=_person(collaboration.profile),
                    message=collaboration.request_message or "",
                    is_declined=relation == Relation.COLLABORATOR_DECLINED,
                )
            )
    return creator, collaborators, requests


def _sort_clauses(sort_by: str | None) -> list:
    # accepts either the vocabulary key ("most-favorites") or its label
    match PROJECT_SEARCH_SORT_BY.get(sort_by or "", sort_by):
        case "Newest":
            return [Project.created_at.desc(), Project.id]
        case "Oldest":
            return [Project.created_at.asc(), Project.id]
        case "Most favorites":
            return [favorite_count.desc(), Project.id]
        case _:
            return []


class ProjectService:
    def __init__(self, db: AsyncSession, cache: CacheClient | None = None):
        self.db = db
        self.search_cache = ProjectSearchCache(cache)

    def _search_statement(self, filters: ProjectSearchFilters):
        # closed projects never appear in search
        stmt = select(Project, favorite_count.label("favorite_count")).where(
            Project.is_open.is_(True)
        )
        if filters.roles:
            stmt = stmt.where(
                Project.id.in_(
                    select(ProjectRole.project_id).where(
                        ProjectRole.role.in_(filters.roles)
                    )
                )
            )
        if filters.complexities:
            stmt = stmt.where(Project.complexity.in_(filters.complexities))
        if filters.technologies:
            stmt = stmt.where(
                Project.id.in_(
                    select(ProjectTechnology.project_id).where(
                        ProjectTechnology.technology.in_(filters.technologies)
                    )
                )
            )

        order_by = _sort_clauses(filters.sort_by)
        if not order_by and filters.limit is not None:
            # store order is not stable across LIMIT/OFFSET pages
            order_by = [Project.id]
        if order_by:
            stmt = stmt.order_by(*order_by)

        if filters.limit is not None:
            page = filters.page or 1
            stmt = stmt.limit(filters.limit).offset((page - 1) * filters.limit)

        return stmt.options(
            selectinload(Project.collaborations).selectinload(Collaboration.profile)
        ).execution_options(populate_existing=True)

    async def find(
        self, filters: ProjectSearchFilters
    ) -> ServiceResponse[list[ProjectSummaryModel]]:
        """Search open projects, serving repeated queries from the cache."""
        logger.info(f"Searching projects with filters {filters.model_dump()}")

        cached = await self.search_cache.get(filters)
        if cached is not None:
            logger.info(f"{len(cached)} projects served from search cache")
            return ServiceResponse.success(cached)

        try:
            rows = (await self.db.execute(self._search_statement(filters))).all()
        except Exception as e:
            logger.error(f"Error fetching projects: {e}")
            return ServiceResponse.internal_error()

        if not rows:
            logger.info("No projects found with given filters")
            return ServiceResponse.not_found("No projects found with given filters")

        summaries = []
        for project, count in rows:
            creator, collaborators, _ = derive_members(project.collaborations)
            summaries.append(
                ProjectSummaryModel(
                    id=project.id,
                    name=project.name,
                    complexity=project.complexity,
                    technologies=project.technologies,
                    roles=project.roles_open,
                    creator=creator,
                    collaborators=collaborators,
                    favorite_count=count,
                    created_at=project.created_at,
                )
            )

        await self.search_cache.set(filters, summaries)
        logger.info(f"{len(summaries)} projects found with given filters")
        return ServiceResponse.success(summaries)

    async def get_details(
        self, project_id: str, user_id: str | None = None
    ) -> ServiceResponse[ProjectDetailModel]:
        """
        Full project view. Collaboration requests are only returned to the
        project's creator; everyone else gets an empty list.
        """
        logger.info(f"Fetching details of project {project_id} for user {user_id}")
        try:
            result = await self.db.execute(
                select(Project)
                .where(Project.id == project_id)
                .options(
                    selectinload(Project.collaborations).selectinload(
                        Collaboration.profile
                    ),
                    selectinload(Project.links),
                )
                .execution_options(populate_existing=True)
            )
            project = result.scalar_one_or_none()
            if project is None:
                return ServiceResponse.not_found("Project not found")

            favorited_by = set(
                (
                    await self.db.execute(
                        select(project_favorites.c.profile_id).where(
                            project_favorites.c.project_id == project_id
                        )
                    )
                ).scalars()
            )
        except Exception as e:
            logger.error(f"Error fetching project {project_id}: {e}")
            return ServiceResponse.internal_error()

        creator, collaborators, requests = derive_members(project.collaborations)

        if creator is None or user_id != creator.id:
            requests = []

        return ServiceResponse.success(
            ProjectDetailModel(
                id=project.id,
                name=project.name,
                description=project.description,
                is_open=project.is_open,
                complexity=project.complexity,
                roles=project.roles_open,
                technologies=project.technologies,
                creator=creator,
                collaborators=collaborators,
                collaboration_requests=requests,
                links=[LinkModel.from_model(link) for link in project.links],
                favorite_count=len(favorited_by),
                user_has_favorited=bool(user_id) and user_id in favorited_by,
                created_at=project.created_at,
                updated_at=project.updated_at,
            )
        )

    async def create_new(self, user_id: str, name: str) -> ServiceResponse[str]:
        """Create a closed, empty project owned by ``user_id``."""
        logger.info(f"Creating project {name!r} for user {user_id}")
        try:
            if await self.db.get(Profile, user_id) is None:
                return ServiceResponse.not_found("Profile not found")

            async with unit_of_work(self.db):
                project = Project(
                    name=name,
                    description="",
                    complexity=default_complexity(),
                    is_open=False,
                )
                self.db.add(project)
                await self.db.flush()

                self.db.add(
                    Collaboration(
                        project_id=project.id,
                        profile_id=user_id,
                        relation=Relation.CREATOR,
                    )
                )
        except Exception as e:
            logger.error(f"Error creating project: {e}")
            return ServiceResponse.internal_error("Project creation failed")

        await self.search_cache.invalidate()
        logger.info(f"Project {project.id} created")
        return ServiceResponse.success(project.id)

    async def toggle_favorite(
        self, user_id: str, project_id: str
    ) -> ServiceResponse[str]:
        """Flip the user's favorite on the project. Creators cannot favorite."""
        logger.info(f"Toggling favorite of project {project_id} for user {user_id}")
        try:
            if await self.db.get(Project, project_id) is None:
                return ServiceResponse.not_found("Project not found")

            creator_id = (
                await self.db.execute(
                    select(Collaboration.profile_id).where(
                        Collaboration.project_id == project_id,
                        Collaboration.relation == Relation.CREATOR,
                    )
                )
            ).scalar_one_or_none()
            if creator_id == user_id:
                logger.warning(f"User {user_id} tried to favorite own project")
                return ServiceResponse.forbidden("You cannot favorite your own project")

            edge = (
                project_favorites.c.profile_id == user_id,
                project_favorites.c.project_id == project_id,
            )
            has_favorited = (
                await self.db.execute(select(project_favorites.c.profile_id).where(*edge))
            ).first() is not None

            async with unit_of_work(self.db):
                if has_favorited:
                    await self.db.execute(delete(project_favorites).where(*edge))
                else:
                    await self.db.execute(
                        insert(project_favorites).values(
                            profile_id=user_id, project_id=project_id
                        )
                    )
        except Exception as e:
            logger.error(f"Error toggling favorite: {e}")
            return ServiceResponse.internal_error()

        if has_favorited:
            logger.info("Favorite removed successfully")
            return ServiceResponse.success("Removed project from favorites")
        logger.info("Favorite added successfully")
        return ServiceResponse.success("Added project to favorites")

    async def update_details(
        self, project_id: str, changes: ProjectUpdateRequest
    ) -> ServiceResponse[str]:
        """Apply only the fields present in ``changes``."""
        patch = changes.model_dump(exclude_unset=True)
        logger.info(f"Updating project {project_id} fields {sorted(patch)}")

        nulls = sorted(field for field, value in patch.items() if value is None)
        if nulls:
            return ServiceResponse.bad_request(f"Fields cannot be null: {nulls}")
        if "complexity" in patch and patch["complexity"] not in PROJECT_COMPLEXITIES:
            return ServiceResponse.bad_request(
                f"Unknown complexity: {patch['complexity']}"
            )

        try:
            project = await self.db.get(Project, project_id, populate_existing=True)
            if project is None:
                return ServiceResponse.not_found("Project not found")

            async with unit_of_work(self.db):
                for field in ("name", "description", "is_open", "complexity"):
                    if field in patch:
                        setattr(project, field, patch[field])
                if "roles" in patch:
                    project.roles_open = patch["roles"]
                if "technologies" in patch:
                    project.technologies = patch["technologies"]
                # tag-only edits touch no projects column, so onupdate never fires
                project.updated_at = utcnow()
        except Exception as e:
            logger.error(f"Error updating project {project_id}: {e}")
            return ServiceResponse.internal_error("Error updating project")

        await self.search_cache.invalidate()
        logger.info(f"Project {project_id} updated successfully")
        return ServiceResponse.success("Project updated")

    async def delete(self, project_id: str) -> ServiceResponse[str]:
        """Delete the project together with everything hanging off it."""
        logger.info(f"Deleting project {project_id}")
        try:
            if await self.db.get(Project, project_id) is None:
                return ServiceResponse.not_found("Project not found")

            async with unit_of_work(self.db):
                await self.db.execute(
                    delete(Collaboration).where(Collaboration.project_id == project_id)
                )
                await self.db.execute(
                    delete(project_favorites).where(
                        project_favorites.c.project_id == project_id
                    )
                )
                for model in (AttachmentLink, ProjectRole, ProjectTechnology):
                    await self.db.execute(
                        delete(model).where(model.project_id == project_id)
                    )
                await self.db.execute(delete(Project).where(Project.id == project_id))
        except Exception as e:
            logger.error(f"Error deleting project {project_id}: {e}")
            return ServiceResponse.internal_error("Project delete failed")

        await self.search_cache.invalidate()
        logger.info(f"Project {project_id} deleted successfully")
        return ServiceResponse.success("Project deleted")

    async def add_link(
        self, project_id: str, link: LinkCreateRequest
    ) -> ServiceResponse[str]:
        logger.info(f"Adding {link.link_type} link to project {project_id}")
        try:
            if await self.db.get(Project, project_id) is None:
                return ServiceResponse.not_found("Project not found")

            async with unit_of_work(self.db):
                record = AttachmentLink(
                    link_type=link.link_type,
                    title=link.link_title,
                    url=link.link_url,
                    project_id=project_id,
                )
                self.db.add(record)
        except Exception as e:
            logger.error(f"Error adding link to project {project_id}: {e}")
            return ServiceResponse.internal_error()

        return ServiceResponse.success(record.id)

    async def remove_link(self, project_id: str, link_id: str) -> ServiceResponse[str]:
        logger.info(f"Removing link {link_id} from project {project_id}")
        try:
            async with unit_of_work(self.db):
                result = await self.db.execute(
                    delete(AttachmentLink).where(
                        AttachmentLink.id == link_id,
                        AttachmentLink.project_id == project_id,
                    )
                )
        except Exception as e:
            logger.error(f"Error removing link {link_id}: {e}")
            return ServiceResponse.internal_error()

        if result.rowcount == 0:
            return ServiceResponse.not_found("Link not found")
        return ServiceResponse.success("Link removed successfully")
