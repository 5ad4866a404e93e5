from fastapi import APIRouter
from appgen.api.routes_health import router as health_router
from appgen.api.routes_session import router as session_router

router = APIRouter()
router.include_router(health_router, tags=["health"])
router.include_router(session_router, tags=["session"])
