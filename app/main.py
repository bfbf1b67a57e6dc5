from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from app.api.audit_logs import router as audit_logs_router
from app.api.deps import require_user_auth
from app.api.documents import router as documents_router
from app.api.users import router as users_router
from app.db import SessionLocal
from app.errors import register_error_handlers
from app.logging import configure_logging
from app.observability import ObservabilityMiddleware
from app.services.registry_numbering import allocator


@asynccontextmanager
async def lifespan(app: FastAPI):
    db = SessionLocal()
    try:
        allocator.seed_sequence(db)
    finally:
        db.close()
    yield


configure_logging()
app = FastAPI(title="Document Registry API", lifespan=lifespan)
app.add_middleware(ObservabilityMiddleware)
register_error_handlers(app)


def _include_api_router(router, dependencies=None):
    app.include_router(router, dependencies=dependencies)
    app.include_router(router, prefix="/api/v1", dependencies=dependencies)


_include_api_router(documents_router, dependencies=[Depends(require_user_auth)])
_include_api_router(users_router, dependencies=[Depends(require_user_auth)])
_include_api_router(audit_logs_router, dependencies=[Depends(require_user_auth)])


@app.get("/health")
def health_check():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
