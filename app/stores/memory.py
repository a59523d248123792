"""
Process-local article store.

Backs ``STORE_BACKEND=memory`` (ephemeral hosting without a database) and
the service-level tests.  Records live in an insertion-ordered dict; all
mutations run under one ``asyncio.Lock`` so the image-capacity check and
the append form a single critical section.
"""
import asyncio

from app.database import CommitHook
from app.errors import StorageError
from app.schemas import ArticleRecord, StoreSummary


class InMemoryArticleStore:
    def __init__(self) -> None:
        self._articles: dict[str, ArticleRecord] = {}
        self._lock = asyncio.Lock()

    async def insert(self, record: ArticleRecord) -> str:
        async with self._lock:
            if record.id in self._articles:
                raise StorageError(f"Duplicate article id {record.id!r}")
            # Copy so callers cannot mutate stored state through their reference.
            self._articles[record.id] = record.model_copy(update={"images": list(record.images)})
        return record.id

    async def find_by_id(self, article_id: str) -> ArticleRecord | None:
        record = self._articles.get(article_id)
        if record is None:
            return None
        return record.model_copy(update={"images": list(record.images)})

    async def append_image_path(self, article_id: str, path: str, limit: int) -> bool:
        async with self._lock:
            record = self._articles.get(article_id)
            if record is None or len(record.images) >= limit:
                return False
            record.images.append(path)
            return True

    async def list_all_titles(self) -> list[str]:
        return [a.title for a in self._articles.values()]

    async def list_titles_by_image_presence(self, has_image: bool) -> list[str]:
        return [a.title for a in self._articles.values() if bool(a.images) is has_image]

    async def count_summary(self) -> StoreSummary:
        articles = list(self._articles.values())
        return StoreSummary(
            total_articles=len(articles),
            total_images=sum(len(a.images) for a in articles),
            articles_with_images=sum(1 for a in articles if a.images),
        )

    async def after_commit(self, hook: CommitHook) -> None:
        # Writes are visible as soon as they return.
        await hook()
