import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from app.core.config import settings
from app.core.database import engine, Base
from app.core.errors import PageError
from app.core.logging_config import configure_logging
from app.models import notification, page, user, workspace  # noqa: F401  (tables)
from app.routers import health, auth, pages, trash, workspace as workspace_router

configure_logging(settings.DEBUG)
logger = logging.getLogger(__name__)

# Init DB
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Knowledge Base API",
    version="0.4.0"
)

@app.exception_handler(PageError)
async def page_error_handler(request: Request, exc: PageError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})

@app.exception_handler(SQLAlchemyError)
async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Unhandled storage error", exc_info=exc, extra={"error": str(exc)})
    return JSONResponse(status_code=500, content={"detail": "Storage failure"})

# Routes
app.include_router(health.router, prefix="/health")
app.include_router(auth.router)
app.include_router(workspace_router.router)
app.include_router(pages.router)
app.include_router(trash.router)
