"""API v1 main router."""

from fastapi import APIRouter

from eventhub.api.v1.admin import router as admin_router
from eventhub.api.v1.auth import router as auth_router
from eventhub.api.v1.categories import router as categories_router
from eventhub.api.v1.events import router as events_router
from eventhub.api.v1.tickets import router as tickets_router
from eventhub.api.v1.users import router as users_router

router = APIRouter(prefix="/v1")

router.include_router(auth_router, prefix="/auth", tags=["Auth"])
router.include_router(users_router, prefix="/users", tags=["Users"])
router.include_router(categories_router, prefix="/categories", tags=["Categories"])
router.include_router(events_router, prefix="/events", tags=["Events"])
router.include_router(tickets_router, prefix="/tickets", tags=["Tickets"])
router.include_router(admin_router, prefix="/admin", tags=["Admin"])
