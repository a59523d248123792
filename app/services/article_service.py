"""
Article service: business rules for articles and their images.

Design notes
------------
- The service owns no I/O of its own.  Persistence goes through the
  injected ``ArticleStore``, image bytes through the injected
  ``ImageStorage`` and identifiers come from the injected
  ``generate_identifier`` callable, so tests can supply an in-memory store
  and deterministic ids.
- Every failure is raised once as an ``app.errors`` exception and mapped
  to a response by the handlers in ``app.main``.  Nothing is retried.
- The image limit is enforced twice: a cheap pre-check on the fetched
  record (so a full article never causes a file write), and the store's
  atomic conditional append, which is the check that actually holds under
  concurrency.
- When the append fails after the file was written, the file is removed
  before the error propagates, so no orphaned image is left behind.
- Title listings are cached (cache-aside).  Every write schedules the
  invalidation through ``ArticleStore.after_commit`` so it happens only
  once the write is visible to other readers.
"""
import logging
from collections.abc import Callable
from typing import Any

from app.cache import CacheManager, cache as default_cache, titles_key
from app.config import settings
from app.errors import CapacityError, NotFoundError, PayloadTooLargeError, StorageError
from app.schemas import ArticleRecord, ImagePayload, StoreSummary
from app.storage import ImageStorage
from app.stores.base import ArticleStore
from app.validation import parse_article_id, validate_article_create

logger = logging.getLogger(__name__)


class ArticleService:
    def __init__(
        self,
        store: ArticleStore,
        images: ImageStorage,
        generate_identifier: Callable[[], str],
        *,
        max_image_size: int = settings.MAX_IMAGE_SIZE,
        max_images: int = settings.MAX_IMAGES_PER_ARTICLE,
        cache: CacheManager = default_cache,
        collect_all_violations: bool = True,
    ) -> None:
        self._store = store
        self._images = images
        self._generate_identifier = generate_identifier
        self.max_image_size = max_image_size
        self.max_images = max_images
        self._cache = cache
        self.collect_all_violations = collect_all_violations

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    async def create_article(self, payload: Any) -> str:
        """
        Validate *payload* and persist a new article with no images.

        Returns the new article id.  Raises ``ValidationError`` before any
        storage call when a rule fails, ``StorageError`` when the insert
        fails.
        """
        request = validate_article_create(payload, collect_all=self.collect_all_violations)
        record = ArticleRecord(
            id=self._generate_identifier(),
            title=request.title,
            description=request.description,
            expiration_date=request.expiration_date,
            images=[],
        )
        article_id = await self._store.insert(record)
        logger.info("Created article %s", article_id)
        await self._store.after_commit(self._cache.invalidate_titles)
        return article_id

    # ------------------------------------------------------------------
    # Attach image
    # ------------------------------------------------------------------

    async def attach_image(self, article_id: str | None, payload: ImagePayload) -> str:
        """
        Store *payload* as the next image of the article and return its path.

        Checks run in order: id format, existence, capacity, payload size.
        No file is written unless all of them pass.
        """
        article_id = parse_article_id(article_id)

        article = await self._store.find_by_id(article_id)
        if article is None:
            raise NotFoundError(f"Article {article_id} not found")

        if len(article.images) >= self.max_images:
            raise CapacityError(f"Article {article_id} already has {self.max_images} images")

        if payload.size > self.max_image_size:
            raise PayloadTooLargeError(
                f"Image is {payload.size} bytes; the limit is {self.max_image_size} bytes"
            )

        path = self._images.path_for(article_id, self._generate_identifier(), payload.filename)
        stored_path = await self._images.write(path, payload.content)

        try:
            appended = await self._store.append_image_path(article_id, stored_path, self.max_images)
        except StorageError:
            await self._images.remove(stored_path)
            raise

        if not appended:
            # Lost the last slot to a concurrent attachment.
            await self._images.remove(stored_path)
            raise CapacityError(f"Article {article_id} already has {self.max_images} images")

        logger.info("Attached image %s to article %s", stored_path, article_id)
        await self._store.after_commit(self._cache.invalidate_titles)
        return stored_path

    # ------------------------------------------------------------------
    # Find
    # ------------------------------------------------------------------

    async def find_titles(self, with_images: bool | None = None) -> list[str]:
        """
        Return article titles in storage order.

        ``None`` lists every article; ``True`` / ``False`` list only the
        articles with / without at least one image.
        """
        key = titles_key(with_images)
        cached = await self._cache.get(key)
        if cached is not None:
            return cached

        if with_images is None:
            titles = await self._store.list_all_titles()
        else:
            titles = await self._store.list_titles_by_image_presence(with_images)

        await self._cache.set(key, titles, ttl=settings.CACHE_TTL_TITLES)
        return titles

    async def summary(self) -> StoreSummary:
        return await self._store.count_summary()
