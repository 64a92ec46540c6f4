"""
Main FastAPI application entry point
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from virtual_doctor.api.routes import (auth, auth_pages, chat, health, metrics,
                                       pages)
from virtual_doctor.core.config import get_settings
from virtual_doctor.core.database import init_db
from virtual_doctor.core.logging_config import LoggingConfig
from virtual_doctor.core.middleware import LoggingContextMiddleware
from virtual_doctor.core.middleware_metrics import MetricsMiddleware
from virtual_doctor.core.templates import STATIC_DIR

# Configure logging first
LoggingConfig.configure()

logger = LoggingConfig.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan events for FastAPI app"""
    settings = get_settings()
    logger.info(f"Starting {settings.app_name} in {settings.app_env} mode...")
    init_db()

    yield

    logger.info(f"Shutting down {settings.app_name}...")


_settings = get_settings()
app = FastAPI(
    title=_settings.app_name,
    description="Virtual doctor chatbot with patient and doctor accounts",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(LoggingContextMiddleware)
app.add_middleware(MetricsMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=_settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Global exception handler to log all unhandled errors"""
    logger.error(
        "Unhandled exception",
        exc_info=exc,
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
        }
    )

    return JSONResponse(
        status_code=500,
        content={
            "detail": str(exc),
            "type": type(exc).__name__
        }
    )


app.mount("/css", StaticFiles(directory=str(STATIC_DIR / "css")), name="css")
app.mount("/js", StaticFiles(directory=str(STATIC_DIR / "js")), name="js")
app.mount("/images", StaticFiles(directory=str(STATIC_DIR / "images")), name="images")

app.include_router(pages.router)
app.include_router(auth_pages.router)
app.include_router(auth.router)
app.include_router(chat.router)
app.include_router(health.router)
app.include_router(metrics.router)


@app.get("/api")
async def root():
    """Root API endpoint"""
    settings = get_settings()
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
        "environment": settings.app_env,
    }


def run():
    """Console entry point: serve the app with uvicorn"""
    import uvicorn
    settings = get_settings()
    uvicorn.run(
        "virtual_doctor.main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.app_env == "development",
        # Conversations live in process memory
        workers=1,
    )


if __name__ == "__main__":
    run()
