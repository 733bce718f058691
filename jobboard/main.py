import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from jobboard.core import config
from jobboard.core.logging_config import setup_logging
from jobboard.api.routes import auth, jobs, health

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if config.RUN_MIGRATIONS:
        from jobboard.db.migrate import run_migrations
        run_migrations()
    yield


# ============================================
# ✅ FASTAPI APP INIT
# ============================================

setup_logging(config.LOG_LEVEL)

app = FastAPI(title="Job Board API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE"],
    allow_headers=["Authorization", "Content-Type"],
)


# ============================================
# ✅ VALIDATION ERRORS AS 400
# ============================================

def format_validation_error(exc: RequestValidationError) -> str:
    """Turn the first validation error into a single readable message."""
    errors = exc.errors()
    if not errors:
        return "Invalid request"

    error = errors[0]
    message = error.get("msg", "Invalid request")
    if message.startswith("Value error, "):
        message = message[len("Value error, "):]

    location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path", "form")]
    return f"{'.'.join(location)}: {message}" if location else message


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": format_validation_error(exc)},
    )


# ============================================
# ✅ REGISTER ALL ROUTERS
# ============================================

app.include_router(auth.router)
app.include_router(jobs.router)
app.include_router(health.router)


@app.get("/")
def root():
    return {"status": "Job Board API running"}
