"""Storage contract used by the article service."""
from typing import Protocol, runtime_checkable

from app.database import CommitHook
from app.schemas import ArticleRecord, StoreSummary


@runtime_checkable
class ArticleStore(Protocol):
    """
    The only seam through which the service touches durable state.

    Implementations must make ``append_image_path`` a single atomic
    conditional mutation: the length check and the append may not be
    separated, otherwise two concurrent attachments can both pass a stale
    check and push an article past its image limit.
    """

    async def insert(self, record: ArticleRecord) -> str:
        """Persist *record* (with its pre-generated id) and return the id."""
        ...

    async def find_by_id(self, article_id: str) -> ArticleRecord | None:
        """Return the article, or None when no article has this id."""
        ...

    async def append_image_path(self, article_id: str, path: str, limit: int) -> bool:
        """
        Append *path* to the article's images if it holds fewer than
        *limit* images.

        Returns False, without modifying anything, when the article is
        already full or does not exist.
        """
        ...

    async def list_all_titles(self) -> list[str]:
        """Titles of every article in storage order."""
        ...

    async def list_titles_by_image_presence(self, has_image: bool) -> list[str]:
        """Titles of articles with (or without) at least one image, in storage order."""
        ...

    async def count_summary(self) -> StoreSummary:
        ...

    async def after_commit(self, hook: CommitHook) -> None:
        """
        Run *hook* once the writes made so far are durable and visible to
        other readers.
        """
        ...
