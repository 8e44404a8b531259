import logging

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from app.api import (
    academic,
    announcements,
    attendance,
    auth,
    exams,
    expenses,
    fees,
    hostel,
    library,
    notifications,
    sms,
    timetable,
)
from app.core.config import settings
from app.core.errors import SchoolError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.INSTITUTION_NAME)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(SchoolError)
async def school_error_handler(request: Request, exc: SchoolError):
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = {
        ".".join(str(part) for part in err["loc"] if part != "body"): err["msg"]
        for err in exc.errors()
    }
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Validation failed", "errors": errors},
    )


@app.exception_handler(HTTPException)
async def http_error_handler(request: Request, exc: HTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError):
    logger.exception("Database error on %s %s", request.method, request.url.path)
    message = "Internal server error" if settings.is_production else str(exc)
    return JSONResponse(status_code=500, content={"success": False, "error": message})


app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
app.include_router(academic.router, prefix="/api/academic", tags=["academic"])
app.include_router(exams.router, prefix="/api/exams", tags=["exams"])
app.include_router(attendance.router, prefix="/api/attendance", tags=["attendance"])
app.include_router(timetable.router, prefix="/api/timetable", tags=["timetable"])
app.include_router(library.router, prefix="/api/library", tags=["library"])
app.include_router(sms.router, prefix="/api/sms", tags=["sms"])
app.include_router(fees.router, prefix="/api/fees", tags=["fees"])
app.include_router(hostel.router, prefix="/api/hostel", tags=["hostel"])
app.include_router(expenses.router, prefix="/api/expenses", tags=["expenses"])
app.include_router(announcements.router, prefix="/api/announcements", tags=["announcements"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["notifications"])


@app.get("/api/health")
def health():
    return {"success": True, "message": "OK"}
