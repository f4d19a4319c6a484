import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import engine, init_models
from app.errors import install_exception_handlers
from app.middleware import ExceptionHandlerMiddleware, RequestResponseLoggingMiddleware
from app.routers import errors, users

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.AUTO_CREATE_SCHEMA:
        await init_models()
    logger.info("User Management API started (env=%s)", settings.APP_ENV)
    yield
    # Shutdown
    await engine.dispose()

app = FastAPI(
    title="User Management API",
    description="A simple user management API",
    version="1.0.0",
    debug=settings.DEBUG,
    lifespan=lifespan,
)

install_exception_handlers(app)

# Middleware (last added runs outermost)
if not settings.is_development:
    app.add_middleware(ExceptionHandlerMiddleware, error_path="/error")
app.add_middleware(RequestResponseLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers
app.include_router(users.router)
app.include_router(errors.router)

@app.get("/health")
async def health():
    return {"status": "healthy", "version": "1.0.0"}
