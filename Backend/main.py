import os
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, LOGS_DIR, SERVICE_NAME, SERVICE_VERSION
from migrate import migrate as run_migrations
from routers import (
    medicines_router,
    doses_router,
    calendar_router,
    stats_router,
)
from services import clock
from services.errors import TrackerError


try:
    run_migrations()
except Exception as e:
    print(f"⚠ Migration warning at startup: {e}")

app = FastAPI(
    title=SERVICE_NAME,
    description="Medicine schedules and dose adherence tracking backend API",
    version=SERVICE_VERSION,
)

os.makedirs(LOGS_DIR, exist_ok=True)
error_log_file = os.path.join(LOGS_DIR, "errors.log")
error_logger = logging.getLogger("medtrack.errors")
if not error_logger.handlers:
    error_logger.setLevel(logging.ERROR)
    fh = logging.FileHandler(error_log_file, encoding="utf-8")
    fh.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))
    error_logger.addHandler(fh)
    error_logger.propagate = False

cors_origins = [o.strip() for o in CORS_ORIGINS.split(",") if o.strip()]
allow_any_origin = "*" in cors_origins
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"] if allow_any_origin else cors_origins,
    allow_origin_regex=r"^https?://(localhost|127\.0\.0\.1)(:\d+)?$",
    # Browsers reject wildcard+credentials.
    allow_credentials=False if allow_any_origin else True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["*"],
)

# Routers
app.include_router(medicines_router)
app.include_router(doses_router)
app.include_router(calendar_router)
app.include_router(stats_router)


@app.exception_handler(TrackerError)
async def _tracker_error_handler(request: Request, exc: TrackerError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


@app.middleware("http")
async def _capture_unhandled_errors(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception as exc:  # pragma: no cover
        error_logger.exception("Unhandled server error on %s %s: %s", request.method, request.url.path, exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/", tags=["Health"])
@app.get("/api/health", tags=["Health"])
def health_check():
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "timestamp": clock.now().isoformat(),
        "today": clock.today_string(),
    }
