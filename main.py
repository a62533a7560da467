from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Core
from core.config import settings
from core.errors import ComplaintsError
from core.logging_config import logger

# -------------------------------------------------
# Routers
# -------------------------------------------------
from routers.complaints import router as complaints_router
from routers.stats import router as stats_router
from routers.types import router as types_router
from routers.users import router as users_router
from routers.health import router as health_router


# -------------------------------------------------
# Create the Application
# -------------------------------------------------
def create_app() -> FastAPI:
    app = FastAPI(
        title=settings.PROJECT_NAME,
        version="1.0.0",
        description="Citizen complaints portal API (Supabase-powered)",
    )

    # -------------------------------------------------
    # CORS
    # -------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.BACKEND_CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -------------------------------------------------
    # Error handling
    # -------------------------------------------------
    @app.exception_handler(ComplaintsError)
    async def handle_domain(request: Request, exc: ComplaintsError):
        if exc.status_code in (401, 403) or exc.status_code >= 500:
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        headers = {"WWW-Authenticate": "Bearer"} if exc.status_code == 401 else None
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=headers,
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (401, 403, 500):
            logger.warning(
                f"HTTP {exc.status_code} at {request.url}: {exc.detail}"
            )
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unhandled(request: Request, exc: Exception):
        logger.error("Unhandled error at %s", request.url, exc_info=exc)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    # -------------------------------------------------
    # Register Routers
    # -------------------------------------------------
    app.include_router(complaints_router)
    app.include_router(stats_router)
    app.include_router(types_router)
    app.include_router(users_router)
    app.include_router(health_router)

    logger.info(f"{settings.PROJECT_NAME} ready ({settings.ENV})")
    return app


# Create the global FastAPI instance
app = create_app()
