import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import app.models  # ensure models are registered
from app.core.config import settings
from app.core.logging import setup_logging
from app.utils.database import engine, Base

from app.routers import earnings_router, loans_router

setup_logging(settings.log_level, settings.log_format)
logger = logging.getLogger("app.main")

app = FastAPI(title="Personal Finance Tracker API", version="1.0")

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization"],
)

# Routers
app.include_router(loans_router.router)
app.include_router(earnings_router.router)


@app.on_event("startup")
def on_startup():
    # DEV ONLY – no migrations yet
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ready")


@app.get("/")
def root():
    return {"message": "Personal Finance Tracker API", "status": "running", "port": settings.port}


@app.get("/api/test")
def api_test():
    return {"message": "API is working!"}
