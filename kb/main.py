import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from kb.api.router import router as api_router
from kb.core.config import settings
from kb.core.errors import install_error_handlers
from kb.core.http_hardening import install_http_hardening
from kb.core.log_config import configure_logging
from kb.db.session import SessionLocal, ensure_sqlite_directory, init_db
from kb.services.record_store import RecordStore

_LOG = logging.getLogger("kb.main")


def check_record_store() -> None:
    """Load one snapshot; FatalStoreError propagates and aborts startup."""
    with SessionLocal() as db:
        snapshot = RecordStore(db).load()
    _LOG.info(
        "record store ready topics=%s users=%s resources=%s",
        len(snapshot.topics),
        len(snapshot.users),
        len(snapshot.resources),
    )


@asynccontextmanager
async def lifespan(_: FastAPI):
    configure_logging()
    if settings.DB_AUTO_CREATE:
        ensure_sqlite_directory(settings.DATABASE_URL)
        init_db()
    check_record_store()
    yield


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
install_http_hardening(app)
install_error_handlers(app)

app.include_router(api_router, prefix="/api")

@app.get("/", include_in_schema=False)
def landing():
    return JSONResponse({"service": settings.APP_NAME, "status": "ok"})

@app.get("/health")
def health():
    return {"status": "ok"}


def run() -> None:
    import uvicorn

    uvicorn.run("kb.main:app", host=settings.HOST, port=settings.PORT)
