from fastapi import APIRouter

from plugdash.api.routes import smart_plug

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(smart_plug.router, tags=["smart-plug"])
