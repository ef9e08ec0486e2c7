from fastapi import APIRouter

from app.modules.connections.conversation_routes import router as conversations_router
from app.modules.connections.routes import router as interests_router
from app.modules.favorites.routes import router as favorites_router
from app.modules.matching.routes import router as matches_router
from app.modules.notifications.router import router as notifications_router

# each module router carries its own /v1/<resource> prefix
api_router = APIRouter()

api_router.include_router(matches_router)
api_router.include_router(interests_router)
api_router.include_router(favorites_router)
api_router.include_router(conversations_router)
api_router.include_router(notifications_router)
