from fastapi import APIRouter

from app.presentation.routers.v1.accounts import router as accounts_router
from app.presentation.routers.v1.passwords import router as passwords_router
from app.presentation.routes.health import router as health_router

api = APIRouter()
api.include_router(health_router)

# Add all v1 routers here
routers = (accounts_router, passwords_router)
for router in routers:
    api.include_router(router, prefix="/v1")
