from .core_models import CamelModel
from pydantic import Field


class CreatorProjectRequestsModel(CamelModel):
    project_id: str
    project_name: str
    number_of_requests: int


class CreatorProjectCardModel(CamelModel):
    id: str
    name: str
    technology_stack_text: str
    collaborators_text: str
    is_open: bool


class CollaboratorProjectCardModel(CamelModel):
    id: str
    name: str
    technology_stack_text: str
    creator_name: str
    collaborators_text: str


class JoinRequest(CamelModel):
    request_message: str = Field(min_length=1)


class ManageCollaborationRequest(CamelModel):
    requests_accepted: list[str] = []
    requests_declined: list[str] = []
    collaborators_removed: list[str] = []
