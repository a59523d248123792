from dataclasses import dataclass
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.config import settings


# --- Article ---

class ArticleCreate(BaseModel):
    """
    Creation request.  The field constraints below are the rule table for
    article validation; ``app.validation`` translates their failures into
    ``Violation`` entries.
    """

    title: str = Field(min_length=1)
    description: str = Field(min_length=1, max_length=settings.MAX_DESCRIPTION_LENGTH)
    expiration_date: datetime = Field(alias="expirationDate")
    model_config = ConfigDict(populate_by_name=True)


class ArticleCreated(BaseModel):
    id: str


class ArticleRecord(BaseModel):
    """Fully populated article as returned by a store lookup."""

    id: str
    title: str
    description: str
    expiration_date: datetime
    images: list[str] = []


# --- Images ---

@dataclass(frozen=True)
class ImagePayload:
    content: bytes
    size: int
    filename: str | None = None
    content_type: str | None = None


class ImageAttached(BaseModel):
    path: str


# --- Errors ---

class ViolationResponse(BaseModel):
    field: str
    rule: str


class ErrorResponse(BaseModel):
    detail: str
    errors: list[ViolationResponse] = []


# --- Metrics ---

class StoreSummary(BaseModel):
    total_articles: int
    total_images: int
    articles_with_images: int


class MetricsResponse(StoreSummary):
    avg_images_per_article: float
    cache_info: dict = {}
