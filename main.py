# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
MailChimp List Member Sync Service
==================================
Keeps a local mirror of MailChimp list members and pushes every accepted
change to the MailChimp API.

Member lifecycle:
    subscribed ⇄ unsubscribed ⇄ cleaned ⇄ pending ⇄ transactional
    any of the above ─► archived           (DELETE, soft remove)
    any status       ─► gone               (actions/delete-permanent)

Writes are local-first: the database commit happens before the MailChimp
call and survives its failure.

Port: 8000
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from member_sync.controllers import member_controller, system_controller
from member_sync.core.config import settings
from member_sync.core.dependencies import get_member_repo, get_member_service
from member_sync.core.exceptions import MemberSyncError
from member_sync.core.logging import get_logger
from member_sync.middleware import MetricsMiddleware, RequestIDMiddleware

logger = get_logger(__name__)


# ── Lifespan ──────────────────────────────────────────────────────────────
@asynccontextmanager
async def lifespan(application: FastAPI):
    repo = get_member_repo()
    try:
        repo.init_schema()
        get_member_service().seed_gauges()
    except Exception:
        logger.warning("Could not initialise schema — DB may not be ready yet", exc_info=True)
    yield
    repo.dispose()
    logger.info("Shutting down — connection pool disposed")


# ── FastAPI App ───────────────────────────────────────────────────────────
app = FastAPI(
    title="MailChimp List Member Sync",
    description="Local mirror of MailChimp list members, synchronised on every write.",
    version=settings.SERVICE_VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(MetricsMiddleware)
app.add_middleware(RequestIDMiddleware)


@app.exception_handler(MemberSyncError)
async def member_sync_exception_handler(request: Request, exc: MemberSyncError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_response())


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception")
    return JSONResponse(status_code=500, content={"error": "internal_server_error", "detail": str(exc)})


app.include_router(system_controller.router)
app.include_router(member_controller.router)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=settings.SERVICE_PORT, log_level="info")
