"""Main FastAPI application.

Entry point for the Busuanzi counter sync service.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse

from src.api.dependencies import close_busuanzi_client, get_settings, get_store
from src.api.routes import domains
from src.shared.logging_config import configure_logging

settings = get_settings()
configure_logging(settings.log_level)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Validates critical configuration, opens the store at startup and closes
    the Busuanzi HTTP client at shutdown.
    """
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")

    errors: list[str] = []

    if not settings.busuanzi_base_url:
        errors.append("BUSUANZI_BASE_URL is not set")
    if not settings.data_file:
        errors.append("DATA_FILE is not set")

    if errors:
        error_msg = "CRITICAL CONFIGURATION ERRORS:\n" + "\n".join(f"  - {e}" for e in errors)
        logger.critical(error_msg)
        raise RuntimeError(error_msg)

    store = get_store()
    logger.info(f"Using store file: {store.path}")
    logger.info(f"Using Busuanzi endpoint: {settings.busuanzi_base_url}")

    yield

    logger.info(f"Shutting down {settings.api_title}")
    await close_busuanzi_client()


app = FastAPI(
    lifespan=lifespan,
    title=settings.api_title,
    version=settings.api_version,
    description="""
# Busuanzi Counter Sync

Keep the visitor and page-view counters of your registered domains in line with
[Busuanzi](https://busuanzi.ibruce.info/).

## How It Works

```
    caller ──► session check ──► ownership check ──► verified?
                                                        │
                                                        ▼
               stored counters ◄── write ◄── Busuanzi (siteUv, sitePv)
```

A sync that Busuanzi only partly answers is still a successful request: the response
carries `synced: false` and the counters that could be obtained. Re-issue the request
to try again.

## Documentation

- **Swagger UI**: Interactive API documentation and testing
- **ReDoc**: Alternative documentation view
- **Health Check**: Service status at `/health`
    """,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_tags=[
        {"name": "Domains", "description": "Counter management for registered domains"},
        {"name": "Health & Status", "description": "Service health check and status endpoints"},
    ],
)

# Note: allow_credentials=False is required when using allow_origins=["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(domains.router)


@app.get("/", include_in_schema=False)
async def root():
    """Redirect root to API documentation."""
    return RedirectResponse(url="/docs")


@app.get(
    "/health",
    status_code=200,
    summary="Service health check",
    responses={
        200: {
            "description": "Service is healthy and operational",
            "content": {
                "application/json": {
                    "example": {
                        "status": "healthy",
                        "service": "Busuanzi Counter Sync",
                        "version": "0.1.0",
                    }
                }
            },
        }
    },
    tags=["Health & Status"],
)
async def health_check():
    """Service health check endpoint.

    Returns:
        Dictionary containing service health status and metadata
    """
    return {
        "status": "healthy",
        "service": settings.api_title,
        "version": settings.api_version,
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "src.main:app", host="0.0.0.0", port=8000, reload=True, log_level=settings.log_level.lower()
    )
