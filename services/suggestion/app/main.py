from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel

from app.database import init_db
from app.dependencies import get_settings
from app.suggestions.internal_router import router as suggestions_internal_router
from app.suggestions.router import router as suggestions_router
from shared.database.redis_client import close_redis_client, get_redis_client
from shared.logging import configure_logging
from shared.middleware.error_handler import install_error_handlers
from shared.middleware.request_id import request_id_middleware

_DESCRIPTION = """
## Kinfeed Suggestion Service

Decides when and which accounts to suggest to follow:

* **Feed views**: every feed view is counted per account in Redis.
* **Feed injection**: after enough views and a cool-down, the feed service asks this
  service to splice a "for-you" block of suggested accounts into the feed it built.
* **Suggestion pages**: a dedicated, cursor-paginated listing of suggested accounts,
  stable for the session until a fresh ranking replaces it.

Rankings come from the data-science predictor; profiles come from the identity database.
"""

_OPENAPI_TAGS = [
    {
        "name": "Suggestions",
        "description": (
            "Feed-view tracking, follow-suggestion injection into assembled feeds, "
            "and cursor-paginated suggestion listings."
        ),
    },
]


class HealthResponse(BaseModel):
    status: str
    service: str


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    init_db(settings.suggestion_database_url)
    app.state.redis = get_redis_client(settings.redis_url)
    yield
    await close_redis_client()


def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title="Kinfeed Suggestion Service",
        version="1.0.0",
        description=_DESCRIPTION,
        openapi_tags=_OPENAPI_TAGS,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    # Middleware is applied in reverse-registration order (last added = outermost).
    install_error_handlers(app)
    app.middleware("http")(request_id_middleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        max_age=600,
    )

    app.include_router(suggestions_router, prefix="/api/v1")
    app.include_router(suggestions_internal_router, prefix="/api/v1")

    @app.get("/health", response_model=HealthResponse, tags=["health"])
    async def health() -> HealthResponse:
        return HealthResponse(status="ok", service="suggestion")

    return app


app = create_app()
