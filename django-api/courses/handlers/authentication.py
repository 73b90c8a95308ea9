"""Caller identity from trusted gateway headers.

Authentication happens upstream; the gateway forwards the resolved account,
its roles and, for coaches, the coach identity id.
"""

from rest_framework.authentication import BaseAuthentication
from rest_framework.exceptions import AuthenticationFailed
from rest_framework.request import Request

from courses.domain import CallerIdentity, Role

ACCOUNT_HEADER = "X-Account-Id"
ROLES_HEADER = "X-Account-Roles"
COACH_HEADER = "X-Coach-Id"


class GatewayPrincipal:
    """Authenticated request user carrying the caller identity."""

    is_authenticated = True

    def __init__(self, identity: CallerIdentity) -> None:
        self.identity = identity

    def __str__(self) -> str:
        return f"account:{self.identity.account_id}"


def _parse_int(value: str, header: str) -> int:
    try:
        parsed = int(value)
    except ValueError:
        raise AuthenticationFailed(f"Invalid {header} header") from None
    if parsed <= 0:
        raise AuthenticationFailed(f"Invalid {header} header")
    return parsed


def _parse_roles(value: str) -> frozenset[Role]:
    roles = set()
    for raw in value.split(","):
        name = raw.strip().upper()
        if name in Role.__members__:
            roles.add(Role[name])
    return frozenset(roles)


class GatewayIdentityAuthentication(BaseAuthentication):
    def authenticate(self, request: Request):
        account = request.headers.get(ACCOUNT_HEADER)
        if not account:
            return None

        coach = request.headers.get(COACH_HEADER)
        identity = CallerIdentity(
            account_id=_parse_int(account, ACCOUNT_HEADER),
            roles=_parse_roles(request.headers.get(ROLES_HEADER, "")),
            coach_id=_parse_int(coach, COACH_HEADER) if coach else None,
        )
        return GatewayPrincipal(identity), None

    def authenticate_header(self, request: Request) -> str:
        return "Gateway"
