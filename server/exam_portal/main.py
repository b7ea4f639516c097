import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from exam_portal.config import Settings, get_settings
from exam_portal.database import init_db, make_engine, make_session_factory
from exam_portal.dependencies import build_services
from exam_portal.exceptions import ExamNotFound, InvalidExamType, InvalidSection
from exam_portal.middleware import LoggingMiddleware

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its own database engine and service container"""
    settings = settings or get_settings()
    configure_logging(settings.log_level)

    engine = make_engine(settings.database_url)
    session_factory = make_session_factory(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        init_db(engine)
        logger.info("%s is starting...", settings.app_name)
        logger.info("Database: %s", settings.database_url)
        yield
        engine.dispose()

    app = FastAPI(
        title=settings.app_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.services = build_services(settings, session_factory)

    app.add_middleware(LoggingMiddleware)
    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(ExamNotFound)
    async def exam_not_found_handler(request: Request, exc: ExamNotFound):
        return JSONResponse(status_code=404, content={"detail": str(exc)})

    @app.exception_handler(InvalidExamType)
    async def invalid_exam_type_handler(request: Request, exc: InvalidExamType):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(InvalidSection)
    async def invalid_section_handler(request: Request, exc: InvalidSection):
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "message": f"Welcome to {settings.app_name}",
            "version": settings.api_version,
            "status": "running",
        }

    @app.get("/health")
    async def health_check():
        """Health check endpoint"""
        return {"status": "healthy"}

    # Import and include routers
    from exam_portal.routes import admin, student

    app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])
    app.include_router(student.router, prefix="/api/student", tags=["Student"])

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.host, port=app.state.settings.port)
