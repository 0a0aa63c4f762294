import logging
import os
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from dispatch_api.core.errors import DataSourceError
from dispatch_api.core.logging import setup_logging
from dispatch_api.routers.auth import router as auth_router
from dispatch_api.routers.schedule import router as schedule_router
from dispatch_api.routers.time_off import router as time_off_router

setup_logging()
logger = logging.getLogger(__name__)

app = FastAPI(title="Dispatch Scheduler API")

# Comma-separated list, e.g.:
# CORS_ORIGINS="http://localhost:8081,http://127.0.0.1:8081"
cors_origins = os.getenv("CORS_ORIGINS", "")
allow_origins = [o.strip() for o in cors_origins.split(",") if o.strip()]

# Local dev fallback when the env var is not set
if not allow_origins:
  allow_origins = [
    "http://localhost:8081",
    "http://127.0.0.1:8081",
  ]

app.add_middleware(
  CORSMiddleware,
  allow_origins=allow_origins,
  allow_credentials=True,
  allow_methods=["*"],
  allow_headers=["*"],
)


@app.exception_handler(DataSourceError)
def data_source_error_handler(request: Request, exc: DataSourceError):
  logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
  return JSONResponse(status_code=503, content=exc.to_dict())


app.include_router(auth_router, prefix="/auth", tags=["auth"])
app.include_router(schedule_router, prefix="/schedules", tags=["schedules"])
app.include_router(time_off_router, prefix="/time-off", tags=["time-off"])

@app.get("/health")
def health():
  return {"status": "ok"}
