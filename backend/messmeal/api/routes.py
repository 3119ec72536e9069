from fastapi import APIRouter

from messmeal.api.auth import router as auth_router
from messmeal.api.catalog import router as catalog_router
from messmeal.api.health import router as health_router
from messmeal.api.messes import router as messes_router
from messmeal.api.orders import router as orders_router
from messmeal.api.products import router as products_router
from messmeal.api.selection import router as selection_router
from messmeal.api.users import router as users_router

router = APIRouter(prefix="/api")
router.include_router(health_router)
router.include_router(catalog_router)
router.include_router(selection_router)
router.include_router(auth_router)
router.include_router(products_router)
router.include_router(messes_router)
router.include_router(users_router)
router.include_router(orders_router)
