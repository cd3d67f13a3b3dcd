from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from vetcare.core.config import settings
from vetcare.core.logger import logger
from vetcare.core.permissions import get_feature_policy
from vetcare.core.redis import build_backend
from vetcare.middleware.log_middleware import LogMiddleware
from vetcare.services.directory import build_directory

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Fail at startup, not on the first request, if the policy file is bad
    get_feature_policy()
    app.state.session_backend = build_backend()
    app.state.directory = build_directory()
    logger.info(
        f"Started with session backend '{settings.SESSION_BACKEND}' "
        f"and user directory '{settings.USER_DIRECTORY}'"
    )
    yield
    await app.state.session_backend.close()

app = FastAPI(
    title=settings.PROJECT_NAME,
    openapi_url=f"{settings.API_V1_STR}/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_middleware(LogMiddleware)

@app.get("/")
async def root():
    return {"message": f"Welcome to {settings.PROJECT_NAME} API"}

from vetcare.api.api import api_router
app.include_router(api_router, prefix=settings.API_V1_STR)
