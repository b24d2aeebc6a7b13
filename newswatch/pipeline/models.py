"""Data models for crawl cycles."""

import time
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class PersistOutcome(str, Enum):
    """Result of persisting one candidate article."""

    SAVED = "saved"
    DUPLICATE = "duplicate"
    CONTENT_FAILED = "content_failed"
    RECORD_FAILED = "record_failed"


class SourceStage:
    """Timing and result of one source within a cycle."""

    def __init__(self, name: str):
        self.name = name
        self.start_time: Optional[float] = None
        self.end_time: Optional[float] = None
        self.success = False
        self.found = 0
        self.error: Optional[str] = None

    def start(self):
        """Mark stage as started."""
        self.start_time = time.time()

    def complete(self, found: int):
        """Mark stage as completed successfully."""
        self.end_time = time.time()
        self.success = True
        self.found = found

    def fail(self, error: str):
        """Mark stage as failed."""
        self.end_time = time.time()
        self.success = False
        self.error = error

    @property
    def duration(self) -> float:
        """Get stage duration in seconds."""
        if self.start_time and self.end_time:
            return self.end_time - self.start_time
        return 0.0


class SourceReport(BaseModel):
    """Per-source line of a crawl summary."""

    name: str
    found: int = 0
    success: bool = True
    error: Optional[str] = None
    duration: float = 0.0


class CrawlSummary(BaseModel):
    """Outcome of one crawl cycle. Not persisted."""

    started_at: datetime
    finished_at: Optional[datetime] = None
    total_found: int = Field(0, description="Candidates extracted across all sources")
    total_saved: int = Field(0, description="New articles persisted")
    duplicates: int = Field(0, description="Candidates already stored or repeated in this cycle")
    failed: int = Field(0, description="Candidates whose persistence failed")
    per_source_errors: List[str] = Field(default_factory=list, description="Sources that failed")
    sources: List[SourceReport] = Field(default_factory=list)

    @property
    def per_source_found(self) -> Dict[str, int]:
        return {report.name: report.found for report in self.sources}
