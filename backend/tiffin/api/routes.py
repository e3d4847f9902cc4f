from fastapi import APIRouter

from tiffin.api.admin import router as admin_router
from tiffin.api.auth import router as auth_router
from tiffin.api.dashboard import router as dashboard_router
from tiffin.api.health import router as health_router
from tiffin.api.meals import router as meals_router
from tiffin.api.prices import router as prices_router
from tiffin.api.users import router as users_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(auth_router)
router.include_router(meals_router)
router.include_router(dashboard_router)
router.include_router(prices_router)
router.include_router(users_router)
router.include_router(admin_router)
