"""
SQLAlchemy article store.

Design notes
------------
- The store works inside the caller's ``AsyncSession``; it flushes but
  never commits.  The transaction boundary belongs to the ``get_db``
  dependency, exactly as for the rest of the request, and hooks passed to
  ``after_commit`` wait for that commit.
- ``append_image_path`` is one conditional ``UPDATE ... WHERE image_count
  < :limit RETURNING image_count``.  The row lock taken by the UPDATE
  serializes concurrent appends on the same article, and the second
  writer re-evaluates the WHERE clause against the committed count, so
  the limit holds without any read-modify-write in Python.  The returned
  count doubles as the slot number of the new image row.
- Title listings order by the surrogate ``pk`` so they follow insertion
  order on every backend.
- Every ``SQLAlchemyError`` is re-raised as ``StorageError``.
"""
import logging

from sqlalchemy import case, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import selectinload

from app.database import ArticleSession, CommitHook
from app.errors import StorageError
from app.models import Article, ArticleImage
from app.schemas import ArticleRecord, StoreSummary

logger = logging.getLogger(__name__)


def _article_to_record(article: Article) -> ArticleRecord:
    return ArticleRecord(
        id=article.id,
        title=article.title,
        description=article.description,
        expiration_date=article.expiration_date,
        images=[image.path for image in article.images],
    )


class SqlArticleStore:
    def __init__(self, db: ArticleSession) -> None:
        self._db = db

    async def insert(self, record: ArticleRecord) -> str:
        article = Article(
            id=record.id,
            title=record.title,
            description=record.description,
            expiration_date=record.expiration_date,
            image_count=0,
        )
        try:
            self._db.add(article)
            await self._db.flush()
        except SQLAlchemyError as exc:
            logger.error("Insert of article %s failed: %s", record.id, exc)
            raise StorageError("Failed to insert article") from exc
        return article.id

    async def find_by_id(self, article_id: str) -> ArticleRecord | None:
        q = (
            select(Article)
            .where(Article.id == article_id)
            .options(selectinload(Article.images))
            # appends bypass the identity map, so always refresh
            .execution_options(populate_existing=True)
        )
        try:
            result = await self._db.execute(q)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to look up article") from exc
        article = result.scalar_one_or_none()
        if article is None:
            return None
        return _article_to_record(article)

    async def append_image_path(self, article_id: str, path: str, limit: int) -> bool:
        claim = (
            update(Article)
            .where(Article.id == article_id, Article.image_count < limit)
            .values(image_count=Article.image_count + 1)
            .returning(Article.pk, Article.image_count)
            .execution_options(synchronize_session=False)
        )
        try:
            row = (await self._db.execute(claim)).one_or_none()
            if row is None:
                return False
            article_pk, image_count = row
            self._db.add(ArticleImage(article_pk=article_pk, position=image_count - 1, path=path))
            await self._db.flush()
        except SQLAlchemyError as exc:
            logger.error("Appending image to article %s failed: %s", article_id, exc)
            raise StorageError("Failed to append image path") from exc
        return True

    async def list_all_titles(self) -> list[str]:
        return await self._titles(select(Article.title).order_by(Article.pk))

    async def list_titles_by_image_presence(self, has_image: bool) -> list[str]:
        condition = Article.image_count > 0 if has_image else Article.image_count == 0
        return await self._titles(select(Article.title).where(condition).order_by(Article.pk))

    async def _titles(self, q) -> list[str]:
        try:
            result = await self._db.execute(q)
        except SQLAlchemyError as exc:
            raise StorageError("Failed to list article titles") from exc
        return list(result.scalars().all())

    async def count_summary(self) -> StoreSummary:
        q = select(
            func.count(Article.pk),
            func.coalesce(func.sum(Article.image_count), 0),
            func.coalesce(func.sum(case((Article.image_count > 0, 1), else_=0)), 0),
        )
        try:
            total_articles, total_images, with_images = (await self._db.execute(q)).one()
        except SQLAlchemyError as exc:
            raise StorageError("Failed to summarise articles") from exc
        return StoreSummary(
            total_articles=total_articles,
            total_images=int(total_images),
            articles_with_images=int(with_images),
        )

    async def after_commit(self, hook: CommitHook) -> None:
        self._db.after_commit(hook)
