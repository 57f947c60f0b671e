from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from dayflow.api.routes import health
from dayflow.core.config import settings
from dayflow.core.errors import register_exception_handlers
from dayflow.core.logging import configure_logging, get_logger
from dayflow.core.monitoring import configure_error_monitoring
from dayflow.core.observability import configure_observability
from dayflow.domains.attendance.router import router as attendance_router
from dayflow.domains.auth.router import router as auth_router
from dayflow.domains.employees.router import router as employee_router
from dayflow.domains.leaves.router import router as leaves_router
from dayflow.domains.payroll.router import router as payroll_router
from dayflow.domains.users.router import router as users_router

configure_logging(settings.log_level)
configure_observability()
configure_error_monitoring()
logger = get_logger(__name__)

app = FastAPI(title=settings.app_name)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins or ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(health.router)
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(employee_router)
app.include_router(attendance_router)
app.include_router(leaves_router)
app.include_router(payroll_router)


@app.on_event("startup")
def startup_event() -> None:
    logger.info("startup_complete", env=settings.env)


@app.get("/")
def root() -> dict[str, str]:
    return {"message": "Dayflow HRMS API running", "environment": settings.env}
