"""
Read-models and request bodies for projects.
"""

from datetime import datetime

from pydantic import Field, field_validator

from .core_models import CamelModel, LinkModel, PersonModel


class CollaborationRequestModel(CamelModel):
    id: str
    sender: PersonModel
    message: str = ""
    is_declined: bool = False


class ProjectSummaryModel(CamelModel):
    """One project search result."""

    id: str
    name: str
    complexity: str
    technologies: list[str]
    roles: list[str]
    creator: PersonModel | None = None
    collaborators: list[PersonModel] = []
    favorite_count: int = 0
    created_at: datetime | None = None


class ProjectDetailModel(CamelModel):
    id: str
    name: str
    description: str
    is_open: bool
    complexity: str
    roles: list[str]
    technologies: list[str]
    creator: PersonModel | None = None
    collaborators: list[PersonModel] = []
    collaboration_requests: list[CollaborationRequestModel] = []
    links: list[LinkModel] = []
    favorite_count: int = 0
    user_has_favorited: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


class ProjectSearchFilters(CamelModel):
    """
    Complete search input. Its canonical JSON form is the search cache key,
    so list filters are de-duplicated and sorted on construction.
    """

    roles: list[str] = []
    complexities: list[str] = []
    technologies: list[str] = []
    sort_by: str | None = None
    page: int | None = Field(default=None, ge=1)
    limit: int | None = Field(default=None, ge=1)

    @field_validator("roles", "complexities", "technologies", mode="before")
    @classmethod
    def _normalise(cls, value):
        if value is None:
            return []
        return sorted(set(value))


class ProjectCreateRequest(CamelModel):
    name: str = Field(min_length=1)


class ProjectCreateResponse(CamelModel):
    project_id: str


class ProjectUpdateRequest(CamelModel):
    """
    Sparse update. Only fields present in the request body are applied;
    ``model_fields_set`` tells absent fields apart from explicit values.
    """

    name: str | None = None
    description: str | None = None
    is_open: bool | None = None
    complexity: str | None = None
    roles: list[str] | None = None
    technologies: list[str] | None = None
