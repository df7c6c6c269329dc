# api/main.py
import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from api.schemas.common import ErrorResponse
from api.routes import authors, discover, editions, ingests, links, search, works
from core.config import Settings, configure_logging
from core.errors import CatalogError
from core.providers.google_books import GoogleBooksClient, MetadataProvider
from core.sa.database import Database
from core.utils.cooldown import CooldownCache, DatabaseCooldownCache, InMemoryCooldownCache

logger = logging.getLogger(__name__)


def build_cooldown(settings: Settings, database: Database) -> CooldownCache:
    if settings.cooldown_backend == "database":
        return DatabaseCooldownCache.from_engine(database.engine)
    return InMemoryCooldownCache()


def create_app(
    settings: Optional[Settings] = None,
    database: Optional[Database] = None,
    provider: Optional[MetadataProvider] = None,
    cooldown: Optional[CooldownCache] = None
) -> FastAPI:
    """
    Build the API application.

    Anything not passed in is built from settings, which default to the environment.
    """
    settings = settings or Settings()
    configure_logging(settings.log_level)

    database = database or Database(settings.database_url)
    provider = provider or GoogleBooksClient(
        base_url=settings.google_books_url,
        api_key=settings.google_books_api_key,
        timeout=settings.provider_timeout,
    )

    app = FastAPI(title="BookFrame API")
    app.state.settings = settings
    app.state.database = database
    app.state.provider = provider
    app.state.cooldown = cooldown or build_cooldown(settings, database)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(CatalogError)
    async def catalog_error_handler(request: Request, exc: CatalogError):
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail), headers=getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return error_response(status.HTTP_400_BAD_REQUEST, "Invalid request.", detail=jsonable_errors(exc))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc) or "Internal server error.")

    # Initialize database on startup
    @app.on_event("startup")
    async def startup_event():
        app.state.database.init_db()

    @app.get("/")
    async def root():
        return {"message": "BookFrame API is live"}

    for module in (authors, works, links, editions, search, discover, ingests):
        app.include_router(module.router)

    return app


def error_response(status_code: int, message: str, detail=None, headers=None) -> JSONResponse:
    """Every error leaves the API in the same {"error": ...} shape"""
    body = ErrorResponse(error=message, detail=detail)
    return JSONResponse(status_code=status_code, content=body.model_dump(exclude_none=True), headers=headers)


def jsonable_errors(exc: RequestValidationError):
    """Validation errors, reduced to location and message"""
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg")}
        for error in exc.errors()
    ]


app = create_app()
