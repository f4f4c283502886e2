from fastapi import APIRouter

from guestbook.api.routers.entries import router as entries_router


api_routers = APIRouter(prefix="/api")
api_routers.include_router(entries_router, prefix="/entries", tags=["entries"])
