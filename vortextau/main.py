"""
VortexTau - chat front end for locally hosted models
FastAPI service: streaming chat, model listing, web search, chat sharing
"""

from contextlib import asynccontextmanager
from pathlib import Path
import asyncio
import logging

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import __version__
from .config import runtime_config
from .errors import install_exception_handlers
from .logging_config import setup_logging
from .middleware import RequestLoggingMiddleware, RequestSizeLimitMiddleware
from .routers import chat, models, search, share
from .services.llm_client import LLMClient
from .utils.deps import get_llm_client
from .validation import validate_startup

setup_logging(runtime_config.log_level, runtime_config.log_file or None)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown events"""
    Path(runtime_config.data_dir).mkdir(parents=True, exist_ok=True)
    runtime_config.shared_chats_dir.mkdir(parents=True, exist_ok=True)

    validate_startup()
    logger.info(f"VortexTau {__version__} ready (backend {runtime_config.ollama_url})")

    yield

    logger.info("VortexTau signing off")


app = FastAPI(
    title="VortexTau",
    description="Chat with locally hosted models",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(RequestSizeLimitMiddleware)
app.add_middleware(RequestLoggingMiddleware)

# CORS - browser front end on localhost or a private network address
app.add_middleware(
    CORSMiddleware,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1|192\.168\.\d+\.\d+|10\.\d+\.\d+\.\d+)(:\d+)?$",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_exception_handlers(app)

app.include_router(chat.router, prefix="/api", tags=["chat"])
app.include_router(models.router, prefix="/api", tags=["models"])
app.include_router(search.router, prefix="/api", tags=["search"])
app.include_router(share.router, prefix="/api", tags=["share"])


@app.get("/health")
async def health(client: LLMClient = Depends(get_llm_client)):
    """Health check - pings the model backend."""
    backend_ok = await asyncio.to_thread(client.is_healthy)
    return {
        "status": "healthy" if backend_ok else "degraded",
        "service": "vortextau",
        "version": __version__,
        "checks": {
            "llm": "ok" if backend_ok else "down",
            "search": "configured" if runtime_config.serp_api_key else "unconfigured",
        },
    }
