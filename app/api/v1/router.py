from fastapi import APIRouter
from api.v1.routes.notifications import router as notifications_router


# Main v1 router (includes all endpoints)
router = APIRouter()
router.include_router(notifications_router)
