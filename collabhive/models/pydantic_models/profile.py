from datetime import datetime

from .core_models import CamelModel, LinkModel


class ProfileProjectCardModel(CamelModel):
    id: str
    name: str
    creator_id: str | None = None
    creator_name: str = ""
    creator_avatar_url: str | None = None
    updated_at: datetime | None = None
    is_open: bool


class ProfileDetailModel(CamelModel):
    id: str
    email: str
    name: str
    avatar_url: str | None = None
    bio: str = ""
    active_project_slots: int
    favorites: list[ProfileProjectCardModel] = []
    creator_projects: list[ProfileProjectCardModel] = []
    collaboration_projects: list[ProfileProjectCardModel] = []
    links: list[LinkModel] = []


class ProfileUpdateRequest(CamelModel):
    """
    Sparse update. ``avatar_url`` may be sent as null to clear it; the other
    fields are left unchanged when absent.
    """

    name: str | None = None
    avatar_url: str | None = None
    bio: str | None = None


class ProfileProvisionRequest(CamelModel):
    email: str
    name: str = ""
    avatar_url: str | None = None
