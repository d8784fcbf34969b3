import logging

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from shiftcal.core.config import settings
from shiftcal.core.errors import IdentityProviderError, ShiftCalendarError
from shiftcal.routers import auth, devices, shifts, users

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
log = logging.getLogger("shiftcal.api")

app = FastAPI(title="Shift Calendar API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(auth.router)
app.include_router(users.router)
app.include_router(devices.router)
app.include_router(shifts.router)


@app.exception_handler(ShiftCalendarError)
def shift_calendar_error(request: Request, exc: ShiftCalendarError):
    if exc.status_code >= 500:
        log.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc.detail)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail, "error": type(exc).__name__})


@app.exception_handler(IdentityProviderError)
def identity_provider_error(request: Request, exc: IdentityProviderError):
    log.warning("identity provider failure on %s %s: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=502, content={"detail": "User directory unavailable"})


@app.exception_handler(SQLAlchemyError)
def storage_error(request: Request, exc: SQLAlchemyError):
    log.exception("storage failure on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


@app.get("/health")
def health():
    return {"status": "ok"}
