from fastapi import APIRouter
from vetcare.api.v1 import access, auth

api_router = APIRouter()

api_router.include_router(auth.router, prefix="/auth", tags=["auth"])
api_router.include_router(access.router, prefix="/access", tags=["access"])
