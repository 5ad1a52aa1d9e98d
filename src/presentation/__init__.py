import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .logging_setup import setup_logging
from .user_api import router as user_router
from .task_api import router as task_router
from Data.database import init_db, make_engine, make_session_factory
from services.errors import ServiceError

logger = logging.getLogger(__name__)

CORS_ORIGINS = os.getenv("TASKDESK_CORS_ORIGINS", "*").split(",")


async def _service_error_handler(request: Request, exc: ServiceError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


def create_app(database_url: str | None = None) -> FastAPI:
    """Build the API with its own engine and session factory."""
    engine = make_engine(database_url)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup: create DB tables
        init_db(engine)
        logger.info("Database ready at %s", engine.url.render_as_string())
        yield
        # Shutdown: release pooled connections
        engine.dispose()

    app = FastAPI(title="Taskdesk", version="0.1.0", lifespan=lifespan)
    app.state.engine = engine
    app.state.session_factory = make_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(ServiceError, _service_error_handler)

    app.include_router(user_router, prefix="/users", tags=["Users"])
    app.include_router(task_router, prefix="/tasks", tags=["Tasks"])

    @app.get("/health", tags=["Health"])
    async def health():
        return {"status": "ok"}

    return app


setup_logging()
app = create_app()
