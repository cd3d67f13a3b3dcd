from enum import Enum
from typing import Iterable, Optional

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer

from vetcare.core.config import settings
from vetcare.core.navigation import DEFAULT_PATH, LOGIN_PATH
from vetcare.core.permissions import FeaturePolicy, RoleLike, get_feature_policy, has_feature, has_role
from vetcare.core.security import decode_access_token
from vetcare.core.utils import generate_session_id
from vetcare.schemas.user import Identity
from vetcare.services.auth_service import Session, SessionStore
from vetcare.services.directory import UserDirectory
from vetcare.services.identity_slot import IdentitySlot

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login", auto_error=False)


class GuardDecision(str, Enum):
    ALLOW = "allow"
    PENDING = "pending"
    REDIRECT_LOGIN = "redirect_login"
    REDIRECT_DEFAULT = "redirect_default"

    @property
    def redirect_to(self) -> Optional[str]:
        if self is GuardDecision.REDIRECT_LOGIN:
            return LOGIN_PATH
        if self is GuardDecision.REDIRECT_DEFAULT:
            return DEFAULT_PATH
        return None


def evaluate_guard(
    session: Session,
    allowed_roles: Iterable[RoleLike],
    required_feature: Optional[str] = None,
    policy: Optional[FeaturePolicy] = None,
) -> GuardDecision:
    if session.loading:
        return GuardDecision.PENDING
    if not has_role(session.identity, allowed_roles):
        return GuardDecision.REDIRECT_LOGIN
    if required_feature and not has_feature(session.identity, required_feature, policy):
        return GuardDecision.REDIRECT_DEFAULT
    return GuardDecision.ALLOW


def get_backend(request: Request):
    return request.app.state.session_backend


def get_directory(request: Request) -> UserDirectory:
    return request.app.state.directory


def get_policy() -> FeaturePolicy:
    return get_feature_policy()


async def get_session_store(
    token: Optional[str] = Depends(oauth2_scheme),
    backend=Depends(get_backend),
    directory: UserDirectory = Depends(get_directory),
) -> SessionStore:
    claims = decode_access_token(token) if token else None
    session_id = claims.get("sid") if claims else None

    if not session_id:
        # No usable token: a fresh slot that nothing has written to
        return SessionStore(IdentitySlot(backend, generate_session_id()), directory)

    store = SessionStore(IdentitySlot(backend, session_id), directory)
    await store.restore()
    return store


def require_access(allowed_roles: Iterable[RoleLike], required_feature: Optional[str] = None):
    allowed_roles = frozenset(allowed_roles)

    async def guard(
        store: SessionStore = Depends(get_session_store),
        policy: FeaturePolicy = Depends(get_policy),
    ) -> Identity:
        decision = evaluate_guard(store.current(), allowed_roles, required_feature, policy)
        if decision is GuardDecision.REDIRECT_LOGIN:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Login required",
                headers={"Location": LOGIN_PATH, "WWW-Authenticate": "Bearer"},
            )
        if decision is GuardDecision.REDIRECT_DEFAULT:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Not allowed to use this feature",
                headers={"Location": DEFAULT_PATH},
            )
        if decision is GuardDecision.PENDING:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Login in progress")
        return store.require_identity()

    return guard
