import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from string_analyzer import database
from string_analyzer.config import settings
from string_analyzer.errors import StringAnalyzerError
from string_analyzer.logging import RequestLoggingMiddleware, init_logging, setup_query_logging
from string_analyzer.routes import router

init_logging()
logger = logging.getLogger("string_analyzer")

# Validation error types that mean the body or a field was absent or unreadable
_BAD_REQUEST_ERRORS = {"missing", "json_invalid", "model_type", "model_attributes_type", "dict_type"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables on startup when records live in a database."""
    if settings.STORE_BACKEND == "sql":
        try:
            database.init_db()
        except Exception as e:
            logger.critical("Database initialization failed: %s", e)
            raise
    else:
        logger.info("Using in-memory record store")
    yield
    if settings.STORE_BACKEND == "sql":
        database.engine.dispose()
        logger.info("Database connection pool closed.")


app = FastAPI(
    title=settings.APP_NAME,
    description="Analyze strings, store their structural properties, and query them.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
setup_query_logging(database.engine)

app.include_router(router)


@app.get("/")
def root():
    return {
        "message": settings.APP_NAME,
        "version": "1.0.0",
        "endpoints": {
            "POST /strings": "Analyze and store a string",
            "GET /strings/{string_value}": "Get specific string analysis",
            "GET /strings": "Get all strings with optional filters",
            "GET /strings/filter-by-natural-language": "Filter using natural language",
            "DELETE /strings/{string_value}": "Delete a string",
        },
    }


def _jsonable_errors(errors):
    """Keep only the JSON-safe parts of pydantic error entries."""
    return [
        {"type": err.get("type"), "loc": list(err.get("loc", ())), "msg": err.get("msg")}
        for err in errors
    ]


# -------------------------------
# Unified error response handlers
# -------------------------------
@app.exception_handler(StringAnalyzerError)
async def string_analyzer_error_handler(request: Request, exc: StringAnalyzerError):
    level = logging.ERROR if exc.status_code >= 500 else logging.INFO
    logger.log(
        level,
        "%s: %s %s -> %s | %s",
        type(exc).__name__,
        request.method,
        request.url.path,
        exc.status_code,
        exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    is_post_strings = request.method == "POST" and request.url.path.rstrip("/").endswith("/strings")

    if is_post_strings:
        # Missing value, null value or unreadable body -> 400, wrong type -> 422
        bad_request = any(
            err.get("type") in _BAD_REQUEST_ERRORS or err.get("input", "") is None
            for err in errors
        )
        status_code = 400 if bad_request else 422
        message = "Invalid request body or missing 'value' field" if bad_request else "'value' must be a string"
    else:
        status_code = 400
        message = "Invalid query parameter values or types"

    logger.info(
        "ValidationError: %s %s -> %s | errors=%s",
        request.method,
        request.url.path,
        status_code,
        errors,
    )
    return JSONResponse(
        status_code=status_code,
        content={"error": message, "details": _jsonable_errors(errors)},
    )


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    body = {"error": exc.detail if isinstance(exc.detail, str) else "Error"}
    return JSONResponse(status_code=exc.status_code, content=body, headers=exc.headers)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled exception: %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def run() -> None:
    uvicorn.run("string_analyzer.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    run()
