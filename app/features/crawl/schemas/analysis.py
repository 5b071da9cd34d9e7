"""
Analysis Schemas

In-memory shapes produced by the crawl pipeline. Nothing here touches the
database; ``SqlAlchemyResultStore`` maps ``AnalysisResult`` onto rows.
"""
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field, field_validator

HEADING_LEVELS = range(1, 7)
HTML5 = "HTML5"
XHTML = "XHTML"


def empty_heading_counts() -> Dict[int, int]:
    return {level: 0 for level in HEADING_LEVELS}


class BrokenLink(BaseModel):
    """A resolved link that failed its accessibility probe."""
    model_config = ConfigDict(frozen=True)

    url: str
    status_code: int = 0
    reason: str


class DocumentOutline(BaseModel):
    """Everything a single pass over the document yields, before links are checked."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    markup_version: str = HTML5
    heading_counts: Dict[int, int] = Field(default_factory=empty_heading_counts)
    has_login_form: bool = False
    hrefs: List[str] = Field(default_factory=list)


class AnalysisResult(BaseModel):
    """Final record of one analysis, handed to the result store exactly once."""
    model_config = ConfigDict(frozen=True)

    title: str = ""
    markup_version: str = HTML5
    heading_counts: Dict[int, int] = Field(default_factory=empty_heading_counts)
    internal_link_count: int = Field(default=0, ge=0)
    external_link_count: int = Field(default=0, ge=0)
    has_login_form: bool = False
    broken_links: List[BrokenLink] = Field(default_factory=list)

    @field_validator("heading_counts")
    @classmethod
    def _zero_fill_headings(cls, value: Dict[int, int]) -> Dict[int, int]:
        counts = empty_heading_counts()
        for level, count in value.items():
            if level not in counts:
                raise ValueError(f"heading level out of range: {level}")
            counts[level] = count
        return counts

    @property
    def inaccessible_link_count(self) -> int:
        return len(self.broken_links)
