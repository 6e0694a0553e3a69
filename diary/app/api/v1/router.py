from fastapi import APIRouter
from diary.app.api.v1.entries import router as entries_router

api_router = APIRouter()
api_router.include_router(entries_router, prefix="/entries", tags=["entries"])
