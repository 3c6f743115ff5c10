"""Document shapes for the ``podcasts`` and ``episodes`` collections.

Every field is optional and unset fields are left out of the stored
document, so a model written with only a title produces ``{"title": ...}``.
"""
from typing import Optional

from bson.objectid import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class _Document(BaseModel):
    model_config = ConfigDict(arbitrary_types_allowed=True, populate_by_name=True)

    id: Optional[ObjectId] = Field(default=None, alias="_id")

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class Podcast(_Document):
    title: Optional[str] = None
    author: Optional[str] = None
    tags: Optional[list[str]] = None
    website: Optional[str] = None


class Episode(_Document):
    podcast: Optional[ObjectId] = None
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None


class PodcastEpisode(_Document):
    """An episode joined with its podcast by ``$lookup`` + ``$unwind``."""

    podcast: Optional[Podcast] = None
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = None
    publish_date: Optional[int] = None
