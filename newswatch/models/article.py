"""Article model for stored news articles."""

from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from .base import DBModel


class GeopoliticalTags(BaseModel):
    """Derived tag structure. Only countries is populated today."""

    countries: List[str] = Field(default_factory=list)
    regions: List[str] = Field(default_factory=list)
    organizations: List[str] = Field(default_factory=list)
    events: List[str] = Field(default_factory=list)

    def is_empty(self) -> bool:
        """True when no category has any entry."""
        return not (self.countries or self.regions or self.organizations or self.events)


class Article(DBModel):
    """Article model."""

    url: str = Field(..., description="Canonical article URL, unique across sources")
    title: str = Field(..., description="Article title")
    content: str = Field(
        "",
        description="Inline text: excerpt once the body is offloaded, full body on legacy rows",
    )
    content_key: Optional[str] = Field(None, description="Content store key of the full body")
    source: str = Field(..., description="Originating site label")
    published_at: datetime = Field(..., description="Publication timestamp (crawl time if unknown)")
    geopolitical_tags: GeopoliticalTags = Field(default_factory=GeopoliticalTags)
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Per-source ancillary facts")

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be empty")
        return v
