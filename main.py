import logging
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.config.settings import settings
from app.routers import knowledge, reminders, tasks, users
from app.services.email_service import EmailTransport
from app.services.scheduler import ReminderScheduler
from app.utils.errors import EmptyUpdate, InvalidQuery, MaintenanceError, NotFound

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Facilities Maintenance Service API",
    version="1.0.0",
)

# Email transport is built once and handed to the scheduler
app.state.reminder_scheduler = ReminderScheduler(EmailTransport.from_settings())

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Route registration
app.include_router(tasks.router)
app.include_router(knowledge.router)
app.include_router(reminders.router)
app.include_router(users.router)

# Service errors -> HTTP responses; store failures never leak detail
@app.exception_handler(MaintenanceError)
async def maintenance_error_handler(request: Request, exc: MaintenanceError):
    if isinstance(exc, InvalidQuery):
        return JSONResponse(status_code=400, content={"detail": exc.message})
    if isinstance(exc, EmptyUpdate):
        return JSONResponse(status_code=400, content={"detail": exc.message})
    if isinstance(exc, NotFound):
        return JSONResponse(status_code=404, content={"detail": exc.message})
    logger.error(f"{request.method} {request.url.path} failed: {exc!r}")
    return JSONResponse(status_code=500, content={"detail": "Server error"})

# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Start the reminder scheduler when the application starts"""
    logger.info(f"Starting Facilities Maintenance API ({settings.ENVIRONMENT})...")
    if settings.SCHEDULER_ENABLED:
        app.state.reminder_scheduler.start()

@app.on_event("shutdown")
async def shutdown_event():
    """Stop the reminder scheduler when the application shuts down"""
    logger.info("Shutting down Facilities Maintenance API...")
    app.state.reminder_scheduler.stop()

# Root route
@app.get("/")
def read_root():
    return {"message": "Facilities Maintenance API"}

@app.get("/api/health")
def health():
    return {
        "status": "OK",
        "timestamp": datetime.now().isoformat(),
        "version": "1.0.0",
    }
