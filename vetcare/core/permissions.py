"""
Role and feature checks.

Two independent gates: a coarse role gate for whole routes and a fine
feature gate for actions inside a route. Both checks are pure and deny
whenever there is no identity.
"""
import json
from enum import Enum
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Iterable, Mapping, Optional, Union

from vetcare.core.config import settings
from vetcare.core.exceptions import PolicyConfigError
from vetcare.core.logger import get_logger

if TYPE_CHECKING:
    from vetcare.schemas.user import Identity

log = get_logger("permissions")


class Role(str, Enum):
    ADMIN = "admin"
    VETERINARIAN = "veterinarian"
    RECEPTIONIST = "receptionist"
    CLIENT = "client"


class FeatureKey(str, Enum):
    BILLING_VIEW = "billing_view"
    BILLING_CREATE = "billing_create"
    BILLING_PAYMENT = "billing_payment"
    FINANCIAL_STATS = "financial_stats"
    MEDICAL_DIAGNOSIS = "medical_diagnosis"
    PRODUCTS_PRICING = "products_pricing"


ALL_ROLES = frozenset(Role)

RoleLike = Union[Role, str]


def _as_role(value: RoleLike) -> Optional[Role]:
    try:
        return Role(value)
    except ValueError:
        return None


class FeaturePolicy:
    """Read-only mapping of feature key to the roles allowed to use it."""

    def __init__(self, table: Mapping[str, Iterable[RoleLike]]):
        parsed = {}
        for feature, roles in table.items():
            try:
                key = FeatureKey(feature)
            except ValueError:
                raise PolicyConfigError(f"Unknown feature key '{feature}'")
            allowed = set()
            for role in roles:
                resolved = _as_role(role)
                if resolved is None:
                    raise PolicyConfigError(f"Unknown role '{role}' for feature '{feature}'")
                allowed.add(resolved)
            parsed[key] = frozenset(allowed)
        self._table = MappingProxyType(parsed)

    def roles_for(self, feature: str) -> frozenset:
        try:
            key = FeatureKey(feature)
        except ValueError:
            return frozenset()
        return self._table.get(key, frozenset())

    def features_for(self, role: RoleLike) -> list:
        resolved = _as_role(role)
        return [key for key, roles in self._table.items() if resolved in roles]

    def as_dict(self) -> dict:
        return {key.value: sorted(role.value for role in roles) for key, roles in self._table.items()}

    def __len__(self) -> int:
        return len(self._table)


def load_feature_policy(path: Path) -> FeaturePolicy:
    try:
        with open(path, encoding="utf-8") as fh:
            table = json.load(fh)
    except (OSError, json.JSONDecodeError) as exc:
        raise PolicyConfigError(f"Cannot read feature access file {path}: {exc}") from exc

    if not isinstance(table, dict) or not all(isinstance(v, list) for v in table.values()):
        raise PolicyConfigError(f"Feature access file {path} must map feature keys to role lists")

    policy = FeaturePolicy(table)
    log.info(f"Loaded {len(policy)} feature rules from {path}")
    return policy


@lru_cache
def get_feature_policy() -> FeaturePolicy:
    return load_feature_policy(settings.FEATURE_ACCESS_FILE)


def has_role(identity: Optional["Identity"], allowed_roles: Iterable[RoleLike]) -> bool:
    if identity is None:
        return False
    allowed = {_as_role(role) for role in allowed_roles}
    return identity.role in allowed


def has_feature(
    identity: Optional["Identity"],
    feature: str,
    policy: Optional[FeaturePolicy] = None,
) -> bool:
    if identity is None:
        return False
    if policy is None:
        policy = get_feature_policy()
    return identity.role in policy.roles_for(feature)
