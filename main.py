import logging
import time
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from database import engine, Base
import config

# --- IMPORT ROUTERS (APIs) ---
from routers import auth, customers, bills, payments, tariffs, dashboard, cashier, operator
from routers import bulk_import

# --- IMPORT MODELS (registers every table on Base) ---
import models  # noqa: F401
from services.exceptions import ValidationFailed, RecordNotFound

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger("water_billing")

# --- CREATE DATABASE TABLES ---
Base.metadata.create_all(bind=engine)

app = FastAPI(title="Water Billing API")

# ==========================================
# CORS MIDDLEWARE (SPA front end)
# ==========================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ==========================================
# REQUEST LOG MIDDLEWARE
# ==========================================
@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    user_email = getattr(request.state, "user_email", None) or "-"
    logger.info(
        "%s %s -> %s (%.1f ms) user=%s",
        request.method, request.url.path, response.status_code, elapsed_ms,
        user_email,
    )
    return response


# ==========================================
# ERROR HANDLERS
# ==========================================
def _field_key(loc) -> str:
    parts = [str(p) for p in loc]
    # Drop the "body" / "query" prefix FastAPI puts on every location
    if parts and parts[0] in ("body", "query", "path"):
        parts = parts[1:]
    return ".".join(parts) or "body"


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {}
    for err in exc.errors():
        errors.setdefault(_field_key(err["loc"]), []).append(err["msg"])
    return JSONResponse(status_code=422, content={"message": "Validation failed", "errors": errors})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    logger.warning("%s %s rejected: %s", request.method, request.url.path, exc.errors)
    return JSONResponse(status_code=422, content={"message": exc.message, "errors": exc.errors})


@app.exception_handler(RecordNotFound)
async def not_found_handler(request: Request, exc: RecordNotFound):
    return JSONResponse(status_code=404, content={"message": exc.message})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    # Details stay in the log, never in the response
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


# --- REGISTER ROUTERS ---
app.include_router(auth.router)
app.include_router(bulk_import.router)  # before customers/bills: /import, /template vs /{id}
app.include_router(customers.router)
app.include_router(bills.router)
app.include_router(payments.router)
app.include_router(tariffs.router)
app.include_router(dashboard.router)
app.include_router(cashier.router)
app.include_router(operator.router)


@app.get("/health", tags=["Health"])
def health():
    return {"status": "ok"}
