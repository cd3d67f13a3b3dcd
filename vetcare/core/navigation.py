"""
Dashboard routes and the roles that may open them.
"""
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional

from vetcare.core.permissions import ALL_ROLES, Role, has_role

if TYPE_CHECKING:
    from vetcare.schemas.user import Identity

LOGIN_PATH = "/login"
DEFAULT_PATH = "/"

STAFF_CLINICAL = frozenset({Role.ADMIN, Role.VETERINARIAN})
STAFF_FRONT_DESK = frozenset({Role.ADMIN, Role.RECEPTIONIST})
ADMIN_ONLY = frozenset({Role.ADMIN})


@dataclass(frozen=True)
class RouteRule:
    path: str
    title: str
    allowed_roles: frozenset


# Sidebar order
ROUTES: List[RouteRule] = [
    RouteRule("/", "Dashboard", ALL_ROLES),
    RouteRule("/appointments", "Appointments", ALL_ROLES),
    RouteRule("/pets", "Pets", ALL_ROLES),
    RouteRule("/records", "Medical Records", STAFF_CLINICAL),
    RouteRule("/clients", "Clients", STAFF_FRONT_DESK),
    RouteRule("/products", "Products", STAFF_FRONT_DESK),
    RouteRule("/services", "Services", STAFF_FRONT_DESK),
    RouteRule("/billing", "Billing", STAFF_FRONT_DESK),
    RouteRule("/staff", "Staff", ADMIN_ONLY),
    RouteRule("/settings", "Settings", ADMIN_ONLY),
]

_BY_PATH = {rule.path: rule for rule in ROUTES}


def rule_for(path: str) -> Optional[RouteRule]:
    if path != DEFAULT_PATH:
        path = path.rstrip("/")
    return _BY_PATH.get(path)


def routes_for(identity: Optional["Identity"]) -> List[RouteRule]:
    return [rule for rule in ROUTES if has_role(identity, rule.allowed_roles)]
