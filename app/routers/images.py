from fastapi import APIRouter, Depends, File, UploadFile

from app.dependencies import get_article_service
from app.errors import ValidationError, Violation
from app.schemas import ErrorResponse, ImageAttached, ImagePayload
from app.services.article_service import ArticleService

router = APIRouter(prefix="/image", tags=["images"])

_ERRORS = {code: {"model": ErrorResponse} for code in (400, 403, 404, 500)}

@router.post("/{article_id}", response_model=ImageAttached, responses=_ERRORS)
async def attach_image(
    article_id: str,
    file: UploadFile = File(...),
    service: ArticleService = Depends(get_article_service),
):
    # Never buffer more than one byte past the limit; an oversize upload is
    # rejected by the service on its size alone.
    content = await file.read(service.max_image_size + 1)
    payload = ImagePayload(
        content=content,
        size=max(file.size or 0, len(content)),
        filename=file.filename,
        content_type=file.content_type,
    )
    path = await service.attach_image(article_id, payload)
    return ImageAttached(path=path)

@router.post("", include_in_schema=False)
@router.post("/", include_in_schema=False)
async def attach_image_without_id():
    raise ValidationError([Violation("articleId", "required")], "articleId is required")
