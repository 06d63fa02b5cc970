import asyncio

import uvicorn
from fastapi import Depends, FastAPI, HTTPException, status
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.orm import Session

from rapidwaste.config import settings
from rapidwaste.core.logging_config import get_logger, setup_logging
from rapidwaste.database.session import get_db
from rapidwaste.routes import (
    booking_router,
    driver_router,
    notification_router,
    payment_router,
    user_router,
)
from rapidwaste.seed.seed_data import seed_all
from rapidwaste.services.notification_service import notification_relay

# Setup logging as early as possible
setup_logging(log_level=settings.LOG_LEVEL, force_configure=True, use_colors=settings.LOG_COLORS)
logger = get_logger(__name__)

app = FastAPI(
    title=f"{settings.APP_NAME} API",
    description="API for on-demand waste pickup bookings",
    version=settings.APP_VERSION,
)

# Set up CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origin_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(booking_router, prefix=settings.API_PREFIX)
app.include_router(driver_router, prefix=settings.API_PREFIX)
app.include_router(user_router, prefix=settings.API_PREFIX)
app.include_router(payment_router, prefix=settings.API_PREFIX)
app.include_router(notification_router)


@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.APP_NAME} API"}


@app.get("/health")
async def health_check():
    return {"message": "I Am Alive!!"}


@app.post("/seed-database")
def seed_database(db: Session = Depends(get_db)):
    logger.info("Starting database seeding...")
    try:
        seed_all(db)
        return {"message": "Database seeded successfully."}
    except Exception as e:
        db.rollback()
        logger.exception(f"Seeding failed: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Database seeding failed. Check server logs for details.",
        ) from e


@app.on_event("startup")
async def startup_event():
    """Application startup event"""
    from rapidwaste.database.create_tables import create_tables

    logger.info(f"{settings.APP_NAME} starting up (env={settings.ENV})")
    create_tables()
    notification_relay.attach_loop(asyncio.get_running_loop())


@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown event"""
    notification_relay.attach_loop(None)
    logger.info(f"{settings.APP_NAME} shutting down")


if __name__ == "__main__":
    uvicorn.run("rapidwaste.main:app", host="0.0.0.0", port=8000, reload=settings.DEBUG)
