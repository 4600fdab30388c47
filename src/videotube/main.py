import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from videotube.config import settings
from videotube.db.session import init_db
from videotube.errors import RemoteDeleteError
from videotube.auth.routing import router as auth_router
from videotube.comments.routing import router as comments_router
from videotube.likes.routing import router as likes_router
from videotube.playlists.routing import router as playlists_router
from videotube.responses import api_response
from videotube.tweets.routing import router as tweets_router
from videotube.videos.routing import router as videos_router

# Logging
_level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(
    level=_level,
    format='%(asctime)s %(levelname)s %(name)s %(message)s',
)
for _logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
    logging.getLogger(_logger_name).setLevel(_level)

logger = logging.getLogger("videotube")

# CORS
origins = [origin for origin in settings.CORS_ORIGINS if origin]


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    yield


limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT],
    storage_uri=settings.RATE_LIMIT_STORAGE_URI,
)


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - {e}")
            raise
        process_time = time.time() - start_time
        logger.info(f"{request.method} {request.url.path} -> {response.status_code} in {process_time:.3f}s")
        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


app = FastAPI(
    title="VideoTube API",
    description=(
        "VideoTube is a backend for a video-sharing platform: users publish videos, "
        "comment, like, tweet short posts and curate playlists."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)
app.state.limiter = limiter


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    response = api_response(exc.status_code, None, str(exc.detail))
    if exc.headers:
        response.headers.update(exc.headers)
    return response


@app.exception_handler(RemoteDeleteError)
async def remote_delete_exception_handler(request: Request, exc: RemoteDeleteError):
    return api_response(exc.status_code, {"orphanedUrls": exc.orphaned_urls}, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = f"Invalid input: {field} {first.get('msg', '')}".strip()
    logger.warning(f"Validation error on {request.method} {request.url.path}: {errors}")
    return api_response(status.HTTP_400_BAD_REQUEST, None, message)


@app.exception_handler(RateLimitExceeded)
async def rate_limit_handler(request: Request, exc: RateLimitExceeded):
    return api_response(
        status.HTTP_429_TOO_MANY_REQUESTS,
        None,
        f"Too many requests: limit is {exc.detail}.",
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    return api_response(status.HTTP_500_INTERNAL_SERVER_ERROR, None, "Internal server error")


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(LoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Prometheus metrics
Instrumentator().instrument(app).expose(app, endpoint="/metrics")

app.include_router(auth_router, prefix='/api/auth')
app.include_router(videos_router, prefix='/api/videos')
app.include_router(comments_router, prefix='/api/comments')
app.include_router(tweets_router, prefix='/api/tweets')
app.include_router(likes_router, prefix='/api/likes')
app.include_router(playlists_router, prefix='/api/playlists')


@app.get("/healthChecker")
def read_api_health():
    return api_response(status.HTTP_200_OK, {"status": "ok"}, "Service is healthy")
