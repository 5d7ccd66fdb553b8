"""API v1 router: all JSON endpoints under /api/v1 prefix."""

from fastapi import APIRouter

from .customers.routes import router as customers_router
from .delivery.routes import router as delivery_router
from .jobs.routes import router as jobs_router
from .notifications.routes import router as notifications_router
from .workflow.routes import router as workflow_router

api_v1_router = APIRouter(prefix="/api/v1", tags=["api-v1"])

api_v1_router.include_router(workflow_router)
api_v1_router.include_router(customers_router)
api_v1_router.include_router(jobs_router)
api_v1_router.include_router(delivery_router)
api_v1_router.include_router(notifications_router)
