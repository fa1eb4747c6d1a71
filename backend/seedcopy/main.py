import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from seedcopy.auth.provider import close_auth_provider
from seedcopy.config import settings
from seedcopy.middleware.exceptions import register_exception_handlers
from seedcopy.middleware.request_log import RequestLoggingMiddleware
from seedcopy.middleware.security import SecurityHeadersMiddleware
from seedcopy.routers import auth, compliance, feedback, generate, health, library, profile, style
from seedcopy.services.ai_client import close_ai_client
from seedcopy.utils.kv_store import close_kv_store

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("seedcopy")


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "SeedCopy starting (env=%s, kv=%s, ai=%s)",
        settings.environment,
        settings.kv_backend,
        settings.ai_model,
    )
    yield
    await close_ai_client()
    await close_auth_provider()
    await close_kv_store()


app = FastAPI(
    title="SeedCopy",
    description="Marketing copy generation wizard backend",
    version=settings.version,
    lifespan=lifespan,
)

# ── Exception Handlers ───────────────────────────────────────
register_exception_handlers(app)

# ── Middleware ───────────────────────────────────────────────
app.add_middleware(SecurityHeadersMiddleware)
app.add_middleware(RequestLoggingMiddleware)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins.split(","),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── Routers ──────────────────────────────────────────────────
prefix = settings.service_prefix

# Public
app.include_router(health.router, prefix=prefix)
app.include_router(auth.router, prefix=f"{prefix}/auth", tags=["auth"])

# Bearer-protected
app.include_router(generate.router, prefix=prefix, tags=["generate"])
app.include_router(library.router, prefix=prefix, tags=["library"])
app.include_router(feedback.router, prefix=prefix, tags=["feedback"])
app.include_router(style.router, prefix=prefix, tags=["style"])
app.include_router(profile.router, prefix=prefix, tags=["profile"])
app.include_router(compliance.router, prefix=prefix, tags=["compliance"])


if __name__ == "__main__":
    uvicorn.run(
        "seedcopy.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.debug,
    )
