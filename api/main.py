# api/main.py
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.exc import SQLAlchemyError

from api.routes import (
    auth, books, contact, dashboard, genres, lookup, maintenance, navigation, pickers, recycle_bin,
    series, widgets, wishlist,
)
from core.config import configure_logging, get_settings
from core.sa.database import get_database
from core.schemas.common import field_errors

logger = logging.getLogger(__name__)

settings = get_settings()

app = FastAPI(title="Book Assembly")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.mount("/media", StaticFiles(directory=settings.media_dir, check_dir=False), name="media")

for module in (auth, contact, books, recycle_bin, genres, series, wishlist, dashboard, widgets,
               maintenance, lookup, pickers, navigation):
    app.include_router(module.router)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    fields = field_errors(exc, skip=("body", "query", "path"))
    message = next(iter(fields.values()), "Invalid input")
    return JSONResponse(status_code=422, content={"error": message, "fields": fields})


@app.exception_handler(SQLAlchemyError)
async def database_exception_handler(request: Request, exc: SQLAlchemyError):
    logger.error(f"Database error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=503, content={"error": "The library is temporarily unavailable. Please try again."})


# Initialize database on startup
@app.on_event("startup")
async def startup_event():
    configure_logging()
    get_database().init_db()


@app.get("/")
async def root():
    return {"message": "Book Assembly API"}
