"""
Main FastAPI Application Entry Point
Procurement Approval System
"""

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from contextlib import asynccontextmanager
import time

from procurement.config.settings import settings
from procurement.config.database import engine, Base, SessionLocal
from procurement.utils.exceptions import ProcurementError
from procurement.utils.logger import setup_logger
from procurement.middleware.logging_middleware import LoggingMiddleware

# Register models on Base.metadata
from procurement.models import (  # noqa: F401
    approval_rule,
    budget,
    notification,
    purchase_order,
    requisition,
    rfq,
    user,
    vendor,
)
from procurement.database.setup_database import seed_demo_data

# Import routes
from procurement.routes import (
    auth,
    users,
    requisitions,
    approvals,
    approval_rules,
    budgets,
    vendors,
    purchase_orders,
    rfqs,
    public,
    notifications,
)

# Setup logger
logger = setup_logger()


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan events for application startup and shutdown
    """
    logger.info("Starting Procurement Approval System...")

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created successfully")

    if settings.SEED_DEMO_DATA:
        db = SessionLocal()
        try:
            seed_demo_data(db)
        finally:
            db.close()

    logger.info("Application started successfully")

    yield

    logger.info("Shutting down Procurement Approval System...")


# Create FastAPI app
app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    description="Requisitions, rule-based approvals, RFQs, purchase orders and budget control",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    openapi_url="/api/openapi.json",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add logging middleware
app.add_middleware(LoggingMiddleware)


# Exception handlers
@app.exception_handler(ProcurementError)
async def procurement_exception_handler(request: Request, exc: ProcurementError):
    """Map service-layer errors to their HTTP status"""
    logger.warning(f"{type(exc).__name__} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "success": False,
            "message": exc.message,
            "detail": exc.message
        }
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Handle validation errors"""
    logger.error(f"Validation error: {exc.errors()}")
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "success": False,
            "message": "Validation error",
            "errors": jsonable_encoder(exc.errors())
        }
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle general exceptions"""
    logger.opt(exception=exc).error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "success": False,
            "message": "Internal server error",
            "detail": str(exc) if settings.DEBUG else "An error occurred"
        }
    )


# Health check endpoint
@app.get("/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {
        "status": "healthy",
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "timestamp": time.time()
    }


# Root endpoint
@app.get("/", tags=["Root"])
async def root():
    """Root endpoint"""
    return {
        "message": "Welcome to the Procurement Approval System",
        "version": settings.APP_VERSION,
        "docs": "/api/docs",
        "health": "/health"
    }


# Include routers
app.include_router(auth.router, prefix="/api/auth", tags=["Authentication"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(requisitions.router, prefix="/api/requisitions", tags=["Requisitions"])
app.include_router(approvals.router, prefix="/api/approvals", tags=["Approvals"])
app.include_router(approval_rules.router, prefix="/api/approval-rules", tags=["Approval Rules"])
app.include_router(budgets.router, prefix="/api/budgets", tags=["Budgets"])
app.include_router(vendors.router, prefix="/api/vendors", tags=["Vendors"])
app.include_router(purchase_orders.router, prefix="/api/pos", tags=["Purchase Orders"])
app.include_router(rfqs.router, prefix="/api/rfqs", tags=["RFQs"])
app.include_router(public.router, prefix="/api/public", tags=["Vendor Portal"])
app.include_router(notifications.router, prefix="/api/notifications", tags=["Notifications"])


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "procurement.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG
    )
