import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.cache import cache
from app.config import settings
from app.errors import ArticleError, StorageError, ValidationError
from app.middleware import TimingMiddleware
from app.routers import articles, images, metrics
from app.validation import violations_from_errors

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

VERSION = "1.0.0"

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    Path(settings.IMAGE_DIRECTORY).mkdir(parents=True, exist_ok=True)
    try:
        await cache.connect()
    except Exception as exc:
        logger.warning("Cache unavailable, continuing without it: %s", exc)
    yield
    # Shutdown
    await cache.disconnect()

app = FastAPI(
    title="Article Image Service",
    description="Articles with expiring metadata and up to three attached images",
    version=VERSION,
    lifespan=lifespan,
)

# Middleware
app.add_middleware(TimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Error mapping
@app.exception_handler(ArticleError)
async def article_error_handler(request: Request, exc: ArticleError):
    if isinstance(exc, StorageError):
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc)
        return JSONResponse(status_code=exc.status_code, content={"detail": "Internal server error"})
    logger.info("%s %s rejected (%d): %s", request.method, request.url.path, exc.status_code, exc.message)
    content: dict = {"detail": exc.message}
    if isinstance(exc, ValidationError):
        content["errors"] = [v.as_dict() for v in exc.violations]
    return JSONResponse(status_code=exc.status_code, content=content)

@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed JSON, missing multipart field, ...; reported like any other validation failure.
    violations = violations_from_errors(list(exc.errors()), skip_loc_prefix=1)
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation failed", "errors": [v.as_dict() for v in violations]},
    )

# Routers
app.include_router(articles.router)
app.include_router(images.router)
app.include_router(metrics.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": VERSION}
