"""Post record shared by the store adapters, the API and the client."""

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field


class PostFields(BaseModel):
    """Fields the sync job writes. ``likes`` is not one of them."""
    title: str
    date: datetime
    content: str
    tags: List[str] = Field(default_factory=list)


class Post(BaseModel):
    """A blog post as persisted and served."""
    slug: str
    title: str
    date: datetime
    content: str
    tags: List[str] = Field(default_factory=list)
    likes: int = Field(default=0, ge=0)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
