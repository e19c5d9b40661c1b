import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from workspot.config import Settings
from workspot.db import Database, get_database, init_database
from workspot.routers import bookings, spots, users
from workspot.utils.errors import WorkspotError

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings):
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    root.setLevel(settings.LOG_LEVEL.upper())


@asynccontextmanager
async def lifespan(app: FastAPI):
    "lifespan for initing database"
    init_database(app.state.database)
    yield


async def workspot_error_handler(_: Request, exc: WorkspotError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=exc.headers)


async def request_validation_handler(_: Request, exc: RequestValidationError):
    errors = exc.errors()
    first = errors[0] if errors else {}
    field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
    message = first.get("msg", "Invalid request")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": f"{field}: {message}" if field else message},
    )


def create_app(settings: Settings = None) -> FastAPI:
    settings = settings or Settings()
    configure_logging(settings)

    app = FastAPI(
        lifespan=lifespan,
        title="Workspot",
        description="Workspace marketplace: hosts list spots, guests book date ranges.",
        version="0.1.0",
        license_info={
            "name": "MIT",
            "url": "https://opensource.org/licenses/MIT",
        },
    )
    app.state.settings = settings
    app.state.database = Database(settings.DATABASE_URL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(WorkspotError, workspot_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)

    app.include_router(users.router)
    app.include_router(spots.router)
    app.include_router(bookings.router)

    @app.get("/health", tags=["health"])
    def health(database: Database = Depends(get_database)):
        try:
            database.ping()
        except SQLAlchemyError as e:
            logger.error(f"Database ping failed: {e}")
            return JSONResponse(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                content={"status": "error", "message": "Failed to connect to the database"},
            )
        return {"status": "ok", "timestamp": datetime.now(timezone.utc).isoformat()}

    return app


app = create_app()
