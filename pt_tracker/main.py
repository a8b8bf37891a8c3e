import logging
import time
import traceback
import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path

from dotenv import load_dotenv

# .env is loaded from the project root wherever uvicorn is started from
_PROJ_ROOT = Path(__file__).resolve().parent.parent
load_dotenv(_PROJ_ROOT / ".env")

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from sqlmodel import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from pt_tracker.api.analytics import router as analytics_router
from pt_tracker.api.auth import router as auth_router
from pt_tracker.api.clients import router as clients_router
from pt_tracker.api.exercises import router as exercises_router
from pt_tracker.api.measurements import router as measurements_router
from pt_tracker.api.messages import router as messages_router
from pt_tracker.api.notifications import router as notifications_router
from pt_tracker.api.progress_photos import router as progress_photos_router
from pt_tracker.api.sessions import router as sessions_router
from pt_tracker.api.templates import router as templates_router
from pt_tracker.api.workout_logs import router as workout_logs_router
from pt_tracker.core.config import cors_origins_list, is_trainer_login_configured, settings
from pt_tracker.core.database import engine, init_db, ping_db
from pt_tracker.core.rate_limit import client_ip, limiter
from pt_tracker.logging import setup_logging
from pt_tracker.models import ErrorLog, SecurityLog
from pt_tracker.services.scheduler import ReminderScheduler
from pt_tracker.services.storage import UPLOADS_URL_PREFIX, upload_root

setup_logging(level=logging.INFO)
log = logging.getLogger("pt_tracker")


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    log.info("Trainer login configured: %s", "yes" if is_trainer_login_configured() else "NO (set TRAINER_PASSWORD)")
    scheduler = None
    if settings.scheduler_enabled:
        scheduler = ReminderScheduler(settings.reminder_interval_seconds)
        scheduler.start()
    app.state.reminder_scheduler = scheduler
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()


app = FastAPI(
    title="PT Tracker API",
    description="Personal training backend: clients, sessions, workouts, messages and push reminders",
    lifespan=lifespan,
)
app.state.limiter = limiter


def _error_response(request: Request, status_code: int, detail: str, headers: dict | None = None) -> JSONResponse:
    rid = getattr(request.state, "request_id", None)
    body = {"error": detail, "status_code": status_code}
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=status_code, content=body, headers=headers)


def _rate_limit_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    try:
        with Session(engine) as db:
            db.add(SecurityLog(event="rate_limit", ip=client_ip(request), endpoint=request.url.path, detail=str(exc.detail)))
            db.commit()
    except Exception as e:
        log.warning("SecurityLog rate_limit write failed: %s", e)
    return _error_response(request, 429, "Too many requests. Please wait a minute and try again.")


app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)


def _jsonable_errors(errs: list[dict]) -> list[dict]:
    # ctx may hold exception instances raised by field validators
    return [{k: (v if k != "ctx" else {ck: str(cv) for ck, cv in v.items()}) for k, v in e.items() if k != "input"} for e in errs]


@app.exception_handler(RequestValidationError)
def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errs = exc.errors()
    log.info("Request validation error (422): path=%s method=%s detail=%s", request.url.path, request.method, errs)
    first = errs[0] if errs else {}
    loc = [str(p) for p in (first.get("loc") or []) if p != "body"]
    message = first.get("msg") or "Invalid request."
    if loc:
        message = f"{'.'.join(loc)}: {message}"
    rid = getattr(request.state, "request_id", None)
    body = {"error": message, "status_code": 422, "detail": _jsonable_errors(errs)}
    if rid:
        body["request_id"] = rid
    return JSONResponse(status_code=422, content=body)


@app.exception_handler(StarletteHTTPException)
def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    detail = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _error_response(request, exc.status_code, detail, getattr(exc, "headers", None))


@app.exception_handler(Exception)
def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    log.exception("Unhandled exception: path=%s %s", request.url.path, exc)
    try:
        with Session(engine) as db:
            db.add(ErrorLog(
                endpoint=request.url.path,
                method=request.method,
                request_id=getattr(request.state, "request_id", None),
                error_message=str(exc)[:2000],
                stack_trace=traceback.format_exc()[:10000],
            ))
            db.commit()
    except Exception as e:
        log.warning("ErrorLog write failed: %s", e)
    return _error_response(request, 500, "Unexpected server error.")


@app.middleware("http")
async def request_id_and_latency(request: Request, call_next):
    request.state.request_id = str(uuid.uuid4())
    start = time.perf_counter()
    response = await call_next(request)
    latency_ms = (time.perf_counter() - start) * 1000
    response.headers["X-Request-ID"] = request.state.request_id
    log.info(
        "request_id=%s method=%s path=%s status=%s latency_ms=%.2f",
        request.state.request_id,
        request.method,
        request.url.path,
        response.status_code,
        latency_ms,
    )
    return response


app.add_middleware(SlowAPIMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins_list(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(clients_router)
app.include_router(measurements_router)
app.include_router(progress_photos_router)
app.include_router(sessions_router)
app.include_router(workout_logs_router)
app.include_router(templates_router)
app.include_router(exercises_router)
app.include_router(messages_router)
app.include_router(notifications_router)
app.include_router(analytics_router)

_uploads = upload_root()
_uploads.mkdir(parents=True, exist_ok=True)
app.mount(UPLOADS_URL_PREFIX, StaticFiles(directory=str(_uploads)), name="uploads")


@app.get("/api/health")
@limiter.exempt
def health():
    db_ok = ping_db()
    return {
        "status": "ok",
        "timestamp": datetime.utcnow().isoformat() + "Z",
        "database": "ok" if db_ok else "error",
    }
