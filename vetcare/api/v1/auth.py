from datetime import timedelta
from fastapi import APIRouter, Depends, HTTPException, status

from vetcare.api.deps import get_backend, get_directory, get_session_store
from vetcare.core.config import settings
from vetcare.core.exceptions import AuthError, StorageUnavailable
from vetcare.core.security import create_access_token
from vetcare.core.utils import generate_session_id
from vetcare.schemas.auth import LoginRequest, LoginResponse, SessionResponse
from vetcare.services.auth_service import SessionStore
from vetcare.services.directory import UserDirectory
from vetcare.services.identity_slot import IdentitySlot

router = APIRouter()

@router.post("/login", response_model=LoginResponse)
async def login(
    login_data: LoginRequest,
    backend=Depends(get_backend),
    directory: UserDirectory = Depends(get_directory),
):
    session_id = generate_session_id()
    store = SessionStore(IdentitySlot(backend, session_id), directory)
    try:
        identity = await store.login(login_data)
    except AuthError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.public_message)

    expires = None
    if settings.ACCESS_TOKEN_EXPIRE_MINUTES:
        expires = timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(data={"sub": identity.id, "sid": session_id}, expires_delta=expires)

    return LoginResponse(
        access_token=access_token,
        token_type="bearer",
        user=identity,
        message=f"Logged in as {identity.name}",
    )

@router.post("/logout")
async def logout(store: SessionStore = Depends(get_session_store)):
    try:
        await store.logout()
    except StorageUnavailable:
        raise HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail="Session storage unavailable")
    return {"message": "Logged out"}

@router.get("/session", response_model=SessionResponse)
async def read_session(store: SessionStore = Depends(get_session_store)):
    session = store.current()
    return SessionResponse(
        identity=session.identity,
        loading=session.loading,
        authenticated=session.is_authenticated,
    )
