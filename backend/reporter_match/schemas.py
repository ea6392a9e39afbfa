from datetime import datetime

from pydantic import BaseModel, Field, field_validator

from reporter_match.config.outlets import GeographyFilter, OutletType

BRIEF_REQUIRED_MESSAGE = "brief is required and must be a non-empty string"


class HealthResponse(BaseModel):
    status: str = "ok"


class SearchRequest(BaseModel):
    brief: str
    outlet_types: list[OutletType] | None = None
    geography: list[GeographyFilter] | None = None
    focus_publications: str | None = None
    competitors: str | None = None
    refinements: list[str] | None = None

    @field_validator("brief")
    @classmethod
    def brief_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError(BRIEF_REQUIRED_MESSAGE)
        return value

    @field_validator("refinements")
    @classmethod
    def drop_blank_refinements(cls, value: list[str] | None) -> list[str] | None:
        if value is None:
            return None
        return [item.strip() for item in value if item.strip()]


class ReporterInfo(BaseModel):
    id: str = ""
    name: str
    outlet: str
    title: str | None = None
    beat: str | None = None
    email: str | None = None
    email_confidence: float | None = None
    linkedin_url: str | None = None
    twitter_handle: str | None = None


class ReporterArticle(BaseModel):
    title: str
    url: str
    published_at: datetime | None
    similarity: float


class RankedReporter(BaseModel):
    reporter: ReporterInfo
    score: float
    justification: str
    articles: list[ReporterArticle] = Field(max_length=3)


class SearchResponse(BaseModel):
    reporters: list[RankedReporter]
    total: int


class ErrorResponse(BaseModel):
    error: str
    valid: list[str] | None = None
