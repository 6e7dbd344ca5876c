import logging
import sys
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from uvicorn.middleware.proxy_headers import ProxyHeadersMiddleware

from app.api.router import api_router
from app.config import settings
from app.core.database import init_db
from app.services.github import close_github_client


def setup_logging() -> None:
    """Configure application logging."""
    # Format: timestamp - level - logger name - message
    log_format = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"
    date_format = "%H:%M:%S"

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format=log_format,
        datefmt=date_format,
        stream=sys.stdout,
        force=True,
    )

    # Reduce noise from third-party libraries
    for name in ("httpx", "httpcore", "hpack", "anthropic"):
        logging.getLogger(name).setLevel(logging.WARNING)

    # Requests are logged by log_requests below
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Application lifespan: startup and shutdown events."""
    setup_logging()
    logger.info("Repo Storyteller API starting up")
    if settings.debug:
        await init_db()
    yield
    await close_github_client()
    logger.info("Repo Storyteller API shutting down")


app = FastAPI(
    title="Repo Storyteller API",
    description="Turns public GitHub repositories into narrative stories",
    version="0.1.0",
    lifespan=lifespan,
)

# Trust X-Forwarded-Proto from the TLS-terminating reverse proxy
app.add_middleware(ProxyHeadersMiddleware, trusted_hosts=["*"])

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["Content-Disposition"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log failed requests and story generation, skipping preflight and health checks."""
    if request.method == "OPTIONS" or request.url.path == "/health":
        return await call_next(request)

    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000

    # Story runs wait on GitHub and Claude; always logged, with timing
    path = request.url.path
    if response.status_code >= 400 or (request.method == "POST" and path.endswith("/stories")):
        logger.info(f"{request.method} {path} -> {response.status_code} ({elapsed_ms:.0f}ms)")

    return response


app.include_router(api_router)


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}
