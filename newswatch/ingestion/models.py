"""Data models for ingestion."""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field


class CandidateArticle(BaseModel):
    """Article extracted from a source page, not yet checked against the store."""

    title: str = Field(..., description="Article title")
    url: str = Field(..., description="Absolute article URL")
    source: str = Field(..., description="Source name")
    body: Optional[str] = Field(None, description="Extracted body text")
    published_at: Optional[datetime] = Field(None, description="Parsed publication date")
    metadata: Dict[str, Any] = Field(default_factory=dict, description="Per-source facts")
