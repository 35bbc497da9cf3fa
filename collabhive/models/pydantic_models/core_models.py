"""
Shared pydantic building blocks for the API read-models.

Fields are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class PersonModel(CamelModel):
    id: str
    name: str
    avatar_url: str | None = None


class LinkModel(CamelModel):
    id: str
    link_type: str
    link_title: str
    link_url: str

    @classmethod
    def from_model(cls, link) -> "LinkModel":
        return cls(
            id=link.id,
            link_type=link.link_type,
            link_title=link.title,
            link_url=link.url,
        )


class LinkCreateRequest(CamelModel):
    link_type: str
    link_title: str
    link_url: str
