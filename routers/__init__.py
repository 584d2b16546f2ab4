# routers/__init__.py

from fastapi import APIRouter

from .auth import router as auth_router
from .lands import router as lands_router
from .documents import router as documents_router
from .notifications import router as notifications_router
from .transactions import router as transactions_router
from .zoning import router as zoning_router
from .admin import router as admin_router
from .health import router as health_router


# Every router in one place, for mounting under a prefix
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(lands_router)
api_router.include_router(documents_router)
api_router.include_router(notifications_router)
api_router.include_router(transactions_router)
api_router.include_router(zoning_router)
api_router.include_router(admin_router)
api_router.include_router(health_router)

__all__ = ["api_router"]
