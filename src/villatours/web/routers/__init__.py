from villatours.web.routers.admin import router as admin_router
from villatours.web.routers.after_payments import router as after_payments_router
from villatours.web.routers.gallery import router as gallery_router
from villatours.web.routers.inclusions import router as inclusions_router
from villatours.web.routers.packages import router as packages_router
from villatours.web.routers.payments import router as payments_router
from villatours.web.routers.trending import router as trending_router

__all__ = [
    "admin_router",
    "after_payments_router",
    "gallery_router",
    "inclusions_router",
    "packages_router",
    "payments_router",
    "trending_router",
]
