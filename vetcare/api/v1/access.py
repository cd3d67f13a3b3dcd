from fastapi import APIRouter, Depends, HTTPException
from typing import List

from vetcare.api.deps import GuardDecision, evaluate_guard, get_policy, get_session_store, require_access
from vetcare.core.navigation import routes_for, rule_for
from vetcare.core.permissions import ALL_ROLES, FeaturePolicy, Role
from vetcare.schemas.auth import AccessCheckRequest, AccessCheckResponse, FeaturesResponse, RouteInfo
from vetcare.schemas.user import Identity
from vetcare.services.auth_service import SessionStore

router = APIRouter()

@router.get("/routes", response_model=List[RouteInfo])
async def read_routes(store: SessionStore = Depends(get_session_store)):
    return [
        RouteInfo(path=rule.path, title=rule.title, allowed_roles=sorted(rule.allowed_roles, key=list(Role).index))
        for rule in routes_for(store.current().identity)
    ]

@router.post("/check", response_model=AccessCheckResponse)
async def check_access(
    request: AccessCheckRequest,
    store: SessionStore = Depends(get_session_store),
    policy: FeaturePolicy = Depends(get_policy),
):
    decision = evaluate_guard(store.current(), request.allowed_roles, request.required_feature, policy)
    return AccessCheckResponse(
        decision=decision.value,
        allowed=decision is GuardDecision.ALLOW,
        redirect_to=decision.redirect_to,
    )

@router.get("/route", response_model=AccessCheckResponse)
async def check_route(
    path: str,
    store: SessionStore = Depends(get_session_store),
):
    rule = rule_for(path)
    if rule is None:
        raise HTTPException(status_code=404, detail="Route not found")
    decision = evaluate_guard(store.current(), rule.allowed_roles)
    return AccessCheckResponse(
        decision=decision.value,
        allowed=decision is GuardDecision.ALLOW,
        redirect_to=decision.redirect_to,
    )

@router.get("/features", response_model=FeaturesResponse)
async def read_features(
    identity: Identity = Depends(require_access(ALL_ROLES)),
    policy: FeaturePolicy = Depends(get_policy),
):
    return FeaturesResponse(role=identity.role, features=policy.features_for(identity.role))

@router.get("/policy")
async def read_policy(
    identity: Identity = Depends(require_access([Role.ADMIN])),
    policy: FeaturePolicy = Depends(get_policy),
):
    return policy.as_dict()
