from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response

from portal_auth.api.cors import apply_cors_headers
from portal_auth.api.deps import close_idp_provider
from portal_auth.api.routers.auth import router as auth_router
from portal_auth.config import settings
from portal_auth.core.logging import configure_logging

@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)
    yield
    # Only a provider that was actually created gets scrubbed and closed
    close_idp_provider()

app = FastAPI(title="Observability Portal Auth", version="1.0.0", lifespan=lifespan)

app.include_router(auth_router)

@app.middleware("http")
async def cors_headers(request: Request, call_next):
    response = await call_next(request)
    apply_cors_headers(request, response)
    return response

@app.options("/{path:path}")
async def preflight(path: str):
    return Response(status_code=200)

@app.get("/health")
async def health_check():
    return {"status": "ok"}
