from pydantic import BaseModel, Field
from typing import List, Optional

from vetcare.core.permissions import FeatureKey, Role
from vetcare.schemas.user import Identity

class LoginRequest(BaseModel):
    email: str = Field(min_length=1)
    password: str = Field(min_length=1)

class LoginResponse(BaseModel):
    access_token: str
    token_type: str
    user: Identity
    message: str

class SessionResponse(BaseModel):
    identity: Optional[Identity] = None
    loading: bool = False
    authenticated: bool = False

class AccessCheckRequest(BaseModel):
    allowed_roles: List[Role]
    required_feature: Optional[str] = None

class AccessCheckResponse(BaseModel):
    decision: str
    allowed: bool
    redirect_to: Optional[str] = None

class RouteInfo(BaseModel):
    path: str
    title: str
    allowed_roles: List[Role]

class FeaturesResponse(BaseModel):
    role: Optional[Role] = None
    features: List[FeatureKey] = []
