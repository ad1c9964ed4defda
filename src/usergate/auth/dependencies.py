"""FastAPI auth dependencies.

Learn: These are used as Depends() in route handlers to extract and
validate the caller's identity from the request. The token manager and
store live on app.state (built in main.create_app), so dependencies
fetch them from the request instead of importing globals.
"""

from typing import Optional

import structlog
from fastapi import Depends, Header, Request

from usergate.auth.jwt import TokenManager
from usergate.db.store import UserStore
from usergate.errors import InvalidCredential, MissingCredential, TokenError

logger = structlog.get_logger()


class CurrentIdentity:
    """The claim set of the token presented with the request."""

    def __init__(
        self,
        id: Optional[str] = None,
        account: Optional[str] = None,
        name: Optional[str] = None,
        mail: Optional[str] = None,
        head: Optional[str] = None,
    ):
        self.id = id
        self.account = account
        self.name = name
        self.mail = mail
        self.head = head

    @classmethod
    def from_claims(cls, claims: dict) -> "CurrentIdentity":
        return cls(
            id=claims.get("id"),
            account=claims.get("account"),
            name=claims.get("name"),
            mail=claims.get("mail"),
            head=claims.get("head"),
        )


def get_token_manager(request: Request) -> TokenManager:
    return request.app.state.tokens


def get_store(request: Request) -> UserStore:
    return request.app.state.store


async def get_current_user(
    request: Request,
    authorization: Optional[str] = Header(None),
    tokens: TokenManager = Depends(get_token_manager),
) -> CurrentIdentity:
    """Resolve the caller from `Authorization: Bearer <token>` (401 otherwise)."""
    if not authorization or not authorization.startswith("Bearer "):
        raise MissingCredential()

    token = authorization[7:]
    try:
        claims = tokens.verify(token)
    except TokenError as e:
        logger.info("usergate.token_rejected", reason=e.kind.value, path=request.url.path)
        raise InvalidCredential()

    identity = CurrentIdentity.from_claims(claims)
    request.state.identity = identity
    return identity

