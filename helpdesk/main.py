# helpdesk/main.py
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from helpdesk.core.config import get_settings
from helpdesk.core.database import Base, SessionLocal, engine
from helpdesk.core.errors import HelpdeskError
from helpdesk.core.logging import setup_logging
from helpdesk.feedback.routes import router as feedback_router
from helpdesk.legacy import import_legacy_data
from helpdesk.ticket.routes import router as ticket_router
from helpdesk.ticket.uploads import upload_dir
from helpdesk.user.routes import router as user_router

Base.metadata.create_all(bind=engine)

logger = structlog.get_logger(__name__)

settings = get_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging()
    if settings.LEGACY_DATA_DIR:
        with SessionLocal() as db:
            import_legacy_data(db, settings.LEGACY_DATA_DIR)
    logger.info("startup", app=settings.APP_NAME, version=settings.APP_VERSION)
    yield


app = FastAPI(
    title=settings.APP_NAME,
    description=settings.APP_DESC,
    version=settings.APP_VERSION,
    lifespan=lifespan,
)

origins = settings.cors_origins or ["*"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=origins != ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HelpdeskError)
async def helpdesk_error_handler(request: Request, exc: HelpdeskError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.info
    log("request_failed", path=request.url.path, status=exc.status_code, detail=exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


# Routers
app.include_router(user_router)
app.include_router(ticket_router)
app.include_router(feedback_router)

# Stored attachments, addressed by the /uploads/<name> paths kept on tickets
app.mount("/uploads", StaticFiles(directory=upload_dir()), name="uploads")


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
