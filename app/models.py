from __future__ import annotations

from datetime import datetime
from typing import List

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


# ---------------------------------------------------------------------------
# Article
# ---------------------------------------------------------------------------
class Article(Base):
    __tablename__ = "articles"

    __table_args__ = (
        CheckConstraint("image_count >= 0", name="ck_articles_image_count"),
    )

    # Surrogate key; its ordering is the storage order used by title listings.
    pk: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    id: Mapped[str] = mapped_column(String(36), unique=True, nullable=False, index=True)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    expiration_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    image_count: Mapped[int] = mapped_column(Integer, default=0, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    # lazy="raise" forces explicit selectinload in the store
    images: Mapped[List["ArticleImage"]] = relationship(
        "ArticleImage",
        back_populates="article",
        order_by="ArticleImage.position",
        lazy="raise",
    )


# ---------------------------------------------------------------------------
# ArticleImage
# ---------------------------------------------------------------------------
class ArticleImage(Base):
    __tablename__ = "article_images"

    __table_args__ = (
        # One row per slot; concurrent appends can never share a position.
        UniqueConstraint("article_pk", "position", name="uq_article_images_slot"),
        UniqueConstraint("article_pk", "path", name="uq_article_images_path"),
        CheckConstraint("position >= 0", name="ck_article_images_position"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    path: Mapped[str] = mapped_column(String(1024), nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    article_pk: Mapped[int] = mapped_column(
        Integer, ForeignKey("articles.pk", ondelete="CASCADE"), nullable=False, index=True
    )

    article: Mapped["Article"] = relationship("Article", back_populates="images", lazy="raise")
