from fastapi import APIRouter, Depends

from app.cache import cache
from app.dependencies import get_article_service
from app.schemas import MetricsResponse
from app.services.article_service import ArticleService

router = APIRouter(prefix="/metrics", tags=["metrics"])

@router.get("", response_model=MetricsResponse)
async def get_metrics(service: ArticleService = Depends(get_article_service)):

    summary = await service.summary()

    avg_images = (
        summary.total_images / summary.total_articles if summary.total_articles > 0 else 0
    )

    return MetricsResponse(
        **summary.model_dump(),
        avg_images_per_article=round(avg_images, 2),
        cache_info=cache.stats,
    )
