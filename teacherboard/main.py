# /teacherboard/main.py

# --- Core FastAPI Imports ---
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# --- Application-specific Imports ---
from .config import get_settings
from .core.logging_config import setup_logging
from .db.base import Base
from .db.database import engine
from .routers import (
    auth_router,
    chalkboard_router,
    classroom_router,
    prompts_router,
    schedule_router,
    sessions_router,
    student_router,
    timetable_router,
    tools_router,
)
from .routers.content_router import book_contents_router, class_content_router, links_router, notices_router
from .services.document_store import SubscriptionHub

logger = logging.getLogger(__name__)


# --- Application Lifecycle Management ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    if get_settings().auto_create_tables:
        # Development convenience; production schemas come from Alembic.
        Base.metadata.create_all(bind=engine)
    logger.info("Teacher Board backend started")
    yield
    logger.info("Teacher Board backend stopped (%d live subscriptions)", app.state.subscriptions.count())


def create_app() -> FastAPI:
    settings = get_settings()
    setup_logging(settings.log_level)

    app = FastAPI(
        title="Teacher Board API",
        description="Classroom portal backend: teacher workspace, student sharing sessions and AI tools.",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.subscriptions = SubscriptionHub()

    # --- Middleware Configuration ---
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # --- API Router Inclusion ---
    # Authenticated teacher routes under the /api prefix
    app.include_router(auth_router.router, prefix="/api/auth", tags=["Auth"])
    app.include_router(sessions_router.router, prefix="/api/sessions", tags=["Student Sessions"])
    app.include_router(notices_router, prefix="/api/notices", tags=["Notices"])
    app.include_router(links_router, prefix="/api/links", tags=["Links"])
    app.include_router(book_contents_router, prefix="/api/book-contents", tags=["Book Contents"])
    app.include_router(class_content_router, prefix="/api/class-content", tags=["Class Content"])
    app.include_router(chalkboard_router.router, prefix="/api/chalkboard", tags=["Chalkboard"])
    app.include_router(schedule_router.router, prefix="/api/schedule", tags=["Schedule"])
    app.include_router(timetable_router.router, prefix="/api/timetable", tags=["Timetable"])
    app.include_router(classroom_router.router, prefix="/api/classroom", tags=["Classroom Tools"])
    app.include_router(tools_router.router, prefix="/api/tools", tags=["AI Tools"])
    app.include_router(prompts_router.router, prefix="/api/prompts", tags=["Prompts"])

    # Unauthenticated student routes: /student/{code} and /public/student/{code}
    app.include_router(student_router.router, tags=["Student View"])

    # --- Root / Health Check Endpoint ---
    @app.get("/", tags=["Health Check"])
    async def read_root():
        """A simple health check endpoint to confirm the API is online."""
        return {"status": "Teacher Board is running!", "version": app.version}

    return app


app = create_app()
