from fastapi import APIRouter

from quote_sync.common.fastapi_health import add_health
from quote_sync.routes.oauth import router as oauth_router
from quote_sync.routes.quotes import router as quotes_router
from quote_sync.routes.webhooks import router as webhooks_router

health_router = APIRouter()
add_health(health_router)

routers = [health_router, webhooks_router, quotes_router, oauth_router]
