import uuid

from fastapi import Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.database import get_db
from app.services.article_service import ArticleService
from app.storage import ImageStorage
from app.stores import ArticleStore, InMemoryArticleStore, SqlArticleStore

# Shared by every request when STORE_BACKEND=memory.
memory_store = InMemoryArticleStore()


def generate_identifier() -> str:
    return str(uuid.uuid4())


def get_image_storage() -> ImageStorage:
    return ImageStorage(settings.IMAGE_DIRECTORY)


def get_store(db: AsyncSession = Depends(get_db)) -> ArticleStore:
    """
    Return the configured store adapter.

    The SQL adapter is bound to the request-scoped session; an unused
    session never checks out a connection, so the memory backend works
    without a database.
    """
    if settings.STORE_BACKEND == "memory":
        return memory_store
    return SqlArticleStore(db)


def get_article_service(
    store: ArticleStore = Depends(get_store),
    images: ImageStorage = Depends(get_image_storage),
) -> ArticleService:
    return ArticleService(store, images, generate_identifier)


class TitleFilter:
    """
    Parses the ``withImages`` query parameter into a tri-state filter.

    ``"true"`` / ``"false"`` (any case) select articles with / without
    images.  A missing or unrecognised value leaves the filter unset, so
    every article is listed.

    Attributes
    ----------
    with_images:
        ``True``, ``False`` or ``None`` (unspecified).
    """

    def __init__(
        self,
        with_images: str | None = Query(
            None,
            alias="withImages",
            description="'true' for articles with images, 'false' for articles without.",
        ),
    ) -> None:
        value = (with_images or "").strip().lower()
        self.with_images: bool | None = {"true": True, "false": False}.get(value)
