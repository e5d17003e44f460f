"""
TaekUp Backend - FastAPI Application

Entry point for the gamification scoring and super-admin support APIs.
Business rules live in the gamification and support services; routers only
translate between HTTP and those services.
"""
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import get_settings, validate_required_settings
from database import get_db_manager
from gamification.api import routes as gamification_routes
from shared.api import health
from support.api import routes as support_routes

settings = get_settings()

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("main")

# Validate configuration on startup
validate_required_settings()

app = FastAPI(
    title="TaekUp Backend",
    description="Gamification scoring engine and super-admin support sessions",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(gamification_routes.router)
app.include_router(support_routes.router)


@app.on_event("startup")
async def startup_event():
    """Validate database connection and schema on startup."""
    logger.info("Starting TaekUp Backend...")

    db_manager = get_db_manager()
    if not db_manager.health_check():
        logger.warning("Database health check failed on startup")
        return

    db_manager.init_schema()
    logger.info("Application started successfully")


@app.on_event("shutdown")
async def shutdown_event():
    get_db_manager().close()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "main:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=True
    )
