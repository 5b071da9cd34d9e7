from fastapi import APIRouter

from app.features.health.routes.health import router as health_router
from app.features.urls.routes.bulk import router as bulk_router
from app.features.urls.routes.urls import router as urls_router

api_router = APIRouter()

# Register all feature routes
api_router.include_router(urls_router)
api_router.include_router(bulk_router)
api_router.include_router(health_router)
