"""FastAPI application entrypoint and HTTP controllers.

Controllers are intentionally thin: they accept requests, delegate to
`StudentService`, and turn its exceptions into JSON error bodies
locally. Validation and lookup failures answer with `{"message": ...}`,
storage failures with `{"error": ...}`.

Endpoints implemented:
- GET /students
- GET /student/{student_id}
- POST /student
- PUT /student/{student_id}/pay
- GET /health
- GET /metrics
"""

import logging
import sys
import time
import uuid
from contextlib import asynccontextmanager
from typing import List, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from fastapi.staticfiles import StaticFiles
from sqlmodel import Session

from . import services
from .config import Settings, get_settings
from .database import Database, get_session
from .errors import ServiceError
from .logging_setup import configure_logging
from .metrics import RequestMetrics
from .schemas import ErrorOut, MessageOut, PaymentIn, StudentIn, StudentOut

logger = logging.getLogger("school_fees.api")

router = APIRouter()

_NOT_FOUND = {404: {"model": MessageOut}}
_BAD_REQUEST = {400: {"model": MessageOut}}
_STORAGE = {500: {"model": ErrorOut}}


def _error_response(exc: ServiceError) -> JSONResponse:
    key = "error" if exc.status_code >= 500 else "message"
    return JSONResponse(status_code=exc.status_code, content={key: exc.message})


@router.get("/students", response_model=List[StudentOut], responses=_STORAGE)
def list_students(db: Session = Depends(get_session)):
    """Return every student."""
    try:
        students = services.StudentService(db).list_students()
    except ServiceError as exc:
        return _error_response(exc)
    return [StudentOut.model_validate(s) for s in students]


@router.get("/student/{student_id}", response_model=StudentOut, responses={**_NOT_FOUND, **_STORAGE})
def get_student(student_id: str, db: Session = Depends(get_session)):
    """Return a single student by id, or 404."""
    try:
        student = services.StudentService(db).get_student(student_id)
    except ServiceError as exc:
        return _error_response(exc)
    return StudentOut.model_validate(student)


@router.post("/student", status_code=201, response_model=StudentOut, responses={**_BAD_REQUEST, **_STORAGE})
def create_student(payload: Optional[StudentIn] = None, db: Session = Depends(get_session)):
    """Create a student with `feePaid` set to 0.

    `name` and `fees` are both required and must be truthy.
    """
    payload = payload or StudentIn()
    try:
        student = services.StudentService(db).create_student(payload.name, payload.fees)
    except ServiceError as exc:
        return _error_response(exc)
    return StudentOut.model_validate(student)


@router.put(
    "/student/{student_id}/pay",
    response_model=StudentOut,
    responses={**_BAD_REQUEST, **_NOT_FOUND, **_STORAGE},
)
def record_payment(student_id: str, payload: Optional[PaymentIn] = None, db: Session = Depends(get_session)):
    """Add a positive `amount` to the student's `feePaid`."""
    payload = payload or PaymentIn()
    try:
        student = services.StudentService(db).record_payment(student_id, payload.amount)
    except ServiceError as exc:
        return _error_response(exc)
    return StudentOut.model_validate(student)


@router.get("/health")
def health():
    """Lightweight health check for uptime monitoring."""
    return {"status": "ok"}


@router.get("/metrics")
def metrics(request: Request):
    """Prometheus request counts and durations by method, route and status."""
    request_metrics = request.app.state.metrics
    return Response(content=request_metrics.render(), media_type=request_metrics.content_type)


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    """Build the application around an explicit `Database` handle.

    The schema is synchronized before the app is returned, so a broken
    database connection surfaces here rather than on the first request.
    """
    settings = settings or get_settings()
    configure_logging(settings)
    owns_database = database is None
    database = database or Database(settings)
    database.create_db_and_tables()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        if owns_database:
            database.dispose()

    app = FastAPI(title="School Fees API", lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.metrics = RequestMetrics()

    if settings.ALLOW_DEV_CORS:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(request: Request, call_next):
        req_id = request.headers.get("X-Request-ID", uuid.uuid4().hex)
        request.state.request_id = req_id
        started = time.perf_counter()
        response: Response
        try:
            response = await call_next(request)
        except Exception:
            elapsed = time.perf_counter() - started
            logger.exception(
                "request_failed",
                extra={"request_id": req_id, "method": request.method, "path": request.url.path,
                       "duration_ms": round(elapsed * 1000.0, 2)},
            )
            raise
        elapsed = time.perf_counter() - started
        route = request.scope.get("route")
        route_path = getattr(route, "path", None)
        request.app.state.metrics.observe(request.method, route_path, response.status_code, elapsed)
        response.headers["X-Request-ID"] = req_id
        logger.info(
            "request_done",
            extra={
                "request_id": req_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": round(elapsed * 1000.0, 2),
                "client": request.client.host if request.client else "unknown",
            },
        )
        return response

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"message": "Invalid request body"})

    app.include_router(router)

    # Front-end assets; registered last so the API routes win.
    if settings.STATIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=settings.STATIC_DIR, html=True), name="static")

    return app


def run() -> int:
    """Sync the schema and serve; skipped entirely under test."""
    settings = get_settings()
    configure_logging(settings)
    if settings.is_test or not settings.AUTO_LISTEN:
        logger.info("listen_skipped")
        return 0
    try:
        app = create_app(settings)
    except Exception:
        logger.exception("Database sync error")
        return 1
    logger.info("Server is running on port %s", settings.PORT)
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_config=None)
    return 0


if __name__ == "__main__":
    sys.exit(run())
