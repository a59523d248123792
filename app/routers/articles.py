from typing import Any

from fastapi import APIRouter, Body, Depends

from app.dependencies import TitleFilter, get_article_service
from app.schemas import ArticleCreated, ErrorResponse
from app.services.article_service import ArticleService

router = APIRouter(prefix="/article", tags=["articles"])

@router.post(
    "",
    status_code=201,
    response_model=ArticleCreated,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def create_article(
    payload: Any = Body(..., examples=[{
        "title": "Spring sale",
        "description": "Everything must go.",
        "expirationDate": "2030-01-01T00:00:00Z",
    }]),
    service: ArticleService = Depends(get_article_service),
):
    article_id = await service.create_article(payload)
    return ArticleCreated(id=article_id)

@router.get("", response_model=list[str], responses={500: {"model": ErrorResponse}})
async def find_articles(
    title_filter: TitleFilter = Depends(),
    service: ArticleService = Depends(get_article_service),
):
    return await service.find_titles(title_filter.with_images)
