"""Seed the article database with sample articles and placeholder images."""
import asyncio
import argparse
import random
import time
from datetime import datetime, timezone, timedelta

from app.config import settings
from app.database import engine, async_session, Base
from app.dependencies import generate_identifier
from app.schemas import ImagePayload
from app.services.article_service import ArticleService
from app.storage import ImageStorage
from app.stores import SqlArticleStore

TOPICS = ["bicycle", "sofa", "camera", "guitar", "laptop", "tent",
          "kayak", "desk", "lamp", "drone", "printer", "skates"]

# 1x1 PNG used as placeholder image content.
PLACEHOLDER_PNG = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


async def seed(small: bool = False, reset: bool = False):
    num_articles = 20 if small else 1000

    print(f"Seeding: {num_articles} articles with 0-3 images each")
    start = time.perf_counter()

    async with engine.begin() as conn:
        if reset:
            await conn.run_sync(Base.metadata.drop_all)
        await conn.run_sync(Base.metadata.create_all)

    images = ImageStorage(settings.IMAGE_DIRECTORY)
    total_images = 0

    async with async_session() as session:
        service = ArticleService(SqlArticleStore(session), images, generate_identifier)
        for i in range(num_articles):
            expires = datetime.now(timezone.utc) + timedelta(days=random.randint(1, 90))
            article_id = await service.create_article({
                "title": f"Used {random.choice(TOPICS)} #{i}",
                "description": f"Lightly used, pick-up only. Listing number {i}. " * 5,
                "expirationDate": expires.isoformat(),
            })
            for _ in range(random.randint(0, settings.MAX_IMAGES_PER_ARTICLE)):
                payload = ImagePayload(
                    content=PLACEHOLDER_PNG,
                    size=len(PLACEHOLDER_PNG),
                    filename="placeholder.png",
                    content_type="image/png",
                )
                await service.attach_image(article_id, payload)
                total_images += 1

            if (i + 1) % 250 == 0:
                await session.commit()
                print(f"  {i + 1} articles created")

        await session.commit()

    elapsed = time.perf_counter() - start
    print(f"\nSeeding complete in {elapsed:.1f}s")
    print(f"  Articles: {num_articles}")
    print(f"  Images: {total_images}")


def main():
    parser = argparse.ArgumentParser(description="Seed the article database")
    parser.add_argument("--small", action="store_true", help="Use small dataset (20 articles)")
    parser.add_argument("--reset", action="store_true", help="Drop existing tables first")
    args = parser.parse_args()
    asyncio.run(seed(small=args.small, reset=args.reset))


if __name__ == "__main__":
    main()
