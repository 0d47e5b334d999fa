"""
AI Humanizer Backend - Main Application

Rewrites AI-generated text so it reads as human-written, metered by a
per-user credit balance.

Run with: uvicorn humanizer.main:app --reload
"""

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, get_settings
from .logging import configure_logging, get_logger
from .routes import (
    auth_router,
    rewrite_router,
    humanize_router,
    documents_router,
    payments_router,
    contact_router,
)


settings = get_settings()
configure_logging(settings.log_level)
logger = get_logger(__name__)


# Create FastAPI app
app = FastAPI(
    title="AI Humanizer API",
    description="""
## AI Humanizer Backend

Turns AI-sounding text into natural, human-sounding writing.

### Pipeline

1. **Input gate**: text must be at least 50 characters
2. **Credit gate**: one credit per successful humanization
3. **Rewrite chain**: async provider → chat completion → local rules
4. **Bookkeeping**: record saved first, then the credit is charged

### Features

- Readability, purpose and strength controls
- Humanization history
- Document upload (.txt, .pdf, .docx) with text extraction
- Plans with simulated checkout
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


# Called straight from browser origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Include API routers
app.include_router(auth_router)
app.include_router(rewrite_router)
app.include_router(humanize_router)
app.include_router(documents_router)
app.include_router(payments_router)
app.include_router(contact_router)


@app.get("/")
async def root():
    """Health check endpoint."""
    return {
        "service": "AI Humanizer API",
        "status": "healthy",
        "version": "1.0.0",
        "docs": "/docs"
    }


@app.get("/health")
async def health(settings: Settings = Depends(get_settings)):
    """Detailed health check. Reports which strategies are configured, never the keys."""
    strategies = []
    if settings.undetectable_api_key:
        strategies.append("async_job")
    if settings.openai_api_key:
        strategies.append("chat_completion")
    strategies.append("local")

    return {
        "status": "healthy",
        "supabase_configured": bool(settings.supabase_url),
        "rewrite_strategies": strategies,
        "rewrite_service": "http" if settings.rewrite_service_url else "in_process",
        "min_text_length": settings.min_text_length
    }


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    # Log the traceback, but NOT to the client
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal Server Error"}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "humanizer.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug
    )
