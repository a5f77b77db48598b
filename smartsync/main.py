import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.middleware.sessions import SessionMiddleware

from smartsync import config
from smartsync.database import close_db, init_db
from smartsync.errors import AppError
from smartsync.logging_setup import setup_logging
from smartsync.routers import auth, calendar, finance, tasks, user

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(level=config.LOG_LEVEL, log_dir=config.LOG_DIR)
    init_db()
    yield
    close_db()


app = FastAPI(title="SmartSync Todo", lifespan=lifespan)

# signed cookie session: fallback auth channel and home of the Google grants
app.add_middleware(
    SessionMiddleware,
    secret_key=config.SESSION_SECRET,
    session_cookie=config.SESSION_COOKIE,
    max_age=config.SESSION_MAX_AGE,
    same_site="none",
    https_only=config.SESSION_HTTPS_ONLY,
)

# API routers
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(user.router)
app.include_router(finance.router)
app.include_router(calendar.router)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # missing and malformed fields are both client errors here
    errors = [
        {"loc": list(e.get("loc", ())), "msg": e.get("msg", "")}
        for e in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": errors})


# Generic error handler to return JSON errors for unexpected exceptions
@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})
