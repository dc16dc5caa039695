# backend/main.py
import logging
from datetime import datetime, timezone

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from config import settings
from database import engine, init_db
from utils.errors import register_exception_handlers
from utils.log_config import configure_logging

# Router imports
from routes.auth import router as auth_router
from routes.admin import router as admin_router
from routes.logs import router as logs_router

configure_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)

# Initialization
init_db()

app = FastAPI(title="EcoHub Accounts API", version="1.0.0")

# CORS: credentials are allowed for the session cookie, so origins must be explicit
origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:3001",
]

if settings.FRONTEND_URL:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Router registration
app.include_router(auth_router)
app.include_router(admin_router)
app.include_router(logs_router)


@app.get("/")
def read_root():
    return {"message": "EcoHub Accounts API is running"}


@app.get("/health")
def health():
    db_status = "connected"
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except Exception:
        logger.exception("Health check could not reach the database")
        db_status = "error"

    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "database": db_status,
    }
