"""
Permission table — single source of truth for what each role may do to each
resource. Every (role, resource, action) triple is spelled out; the module
refuses to import if one is missing.
"""
import logging
from typing import Dict, Union

from stockroom.schemas.auth import Action, Resource, Role

logger = logging.getLogger(__name__)

C, R, U, D = Action.CREATE, Action.READ, Action.UPDATE, Action.DELETE


def _grant(*allowed: Action) -> Dict[Action, bool]:
    return {action: action in allowed for action in Action}


PERMISSIONS: Dict[Role, Dict[Resource, Dict[Action, bool]]] = {
    Role.ADMIN: {
        Resource.PRODUCTS: _grant(C, R, U, D),
        Resource.SUPPLIERS: _grant(C, R, U, D),
        Resource.CATEGORIES: _grant(C, R, U, D),
        Resource.TRANSACTIONS: _grant(C, R, U, D),
        Resource.ANALYTICS: _grant(R),
        Resource.USERS: _grant(C, R, U, D),
    },
    Role.MANAGER: {
        Resource.PRODUCTS: _grant(C, R, U),
        Resource.SUPPLIERS: _grant(C, R, U),
        Resource.CATEGORIES: _grant(C, R, U),
        Resource.TRANSACTIONS: _grant(C, R),
        Resource.ANALYTICS: _grant(R),
        Resource.USERS: _grant(R),
    },
    Role.VIEWER: {
        Resource.PRODUCTS: _grant(R),
        Resource.SUPPLIERS: _grant(R),
        Resource.CATEGORIES: _grant(R),
        Resource.TRANSACTIONS: _grant(R),
        Resource.ANALYTICS: _grant(R),
        Resource.USERS: _grant(),
    },
}


def check_coverage(table: Dict[Role, Dict[Resource, Dict[Action, bool]]]) -> None:
    """Raise if any (role, resource, action) triple is undefined."""
    missing = [
        f"{role.value}:{resource.value}:{action.value}"
        for role in Role
        for resource in Resource
        for action in Action
        if not isinstance(table.get(role, {}).get(resource, {}).get(action), bool)
    ]
    if missing:
        raise RuntimeError(f"Permission table is missing entries: {', '.join(missing)}")


check_coverage(PERMISSIONS)


def is_allowed(
    role: Union[Role, str],
    resource: Union[Resource, str],
    action: Union[Action, str],
) -> bool:
    try:
        return PERMISSIONS[Role(role)][Resource(resource)][Action(action)]
    except ValueError:
        logger.warning("Permission check for undefined triple %s:%s:%s denied", role, resource, action)
        return False


def permissions_for(role: Union[Role, str]) -> Dict[Resource, Dict[Action, bool]]:
    """Copy of the role's row, for rendering navigation and controls."""
    row = PERMISSIONS[Role(role)]
    return {resource: dict(actions) for resource, actions in row.items()}
