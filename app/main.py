from contextlib import asynccontextmanager
import logging
import time

from fastapi import Depends, FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.orm import Session
from starlette.middleware.base import BaseHTTPMiddleware

from app.core.config import settings
from app.core.database import Base, engine

# Import models so SQLAlchemy registers tables for create_all().
import app.models.question  # noqa: F401
import app.models.answer  # noqa: F401

# Routes
from app.api.dependencies import get_db
from app.api.routes import answers, capture, questions, trends
from app.mcp.server import build_mcp_server

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)


class RequestLogMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response = await call_next(request)
        elapsed = (time.perf_counter() - start) * 1000
        logger.info('"%s %s" %s (%.0fms)', request.method, request.url.path, response.status_code, elapsed)
        return response


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": "Invalid request", "errors": jsonable_encoder(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    # Internal details stay in the log, never in the response.
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Something went wrong"})


def read_root():
    return {"status": "success", "message": f"Welcome to {settings.PROJECT_NAME} API"}


def health(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
        return {"ok": True}
    except Exception as e:
        logger.warning("Health check failed: %s", e)
        return {"ok": False}


def create_app() -> FastAPI:
    mcp_server = build_mcp_server()
    # Builds the server's session manager; must happen before the lifespan runs it.
    mcp_app = mcp_server.streamable_http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Starting up: initializing database...")
        try:
            Base.metadata.create_all(bind=engine)
            logger.info("Database initialized successfully.")
        except Exception:
            logger.exception("Database initialization failed")

        # A session manager runs once; create_app() again for a second lifespan.
        async with mcp_server.session_manager.run():
            yield
        logger.info("Shutting down...")

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        openapi_url=f"{settings.API_V1_STR}/openapi.json",
        lifespan=lifespan,
    )

    app.add_middleware(RequestLogMiddleware)
    # Allow dashboard/IDE access (tighten allow_origins in production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)

    app.include_router(questions.router, prefix=f"{settings.API_V1_STR}/questions", tags=["Questions"])
    app.include_router(answers.router, prefix=f"{settings.API_V1_STR}/answers", tags=["Answers"])
    app.include_router(trends.router, prefix=f"{settings.API_V1_STR}/trends", tags=["Trends"])
    app.include_router(capture.router, prefix=f"{settings.API_V1_STR}/capture", tags=["Chat Turn Capture"])
    # Served as a route, not a mount, so POST /mcp answers without a redirect.
    app.router.routes.extend(mcp_app.routes)

    app.add_api_route("/", read_root, methods=["GET"])
    app.add_api_route("/health", health, methods=["GET"])
    return app


app = create_app()
