"""User service — account, session and self-service use cases.

Learn: Service layer separates business logic from HTTP routing.
API routes call the service, the service calls the token manager,
access controller and store. Every method returns a value or raises a
UserGateError; mapping those to HTTP responses is the routes' job.
"""

from typing import Optional

import structlog

from usergate.auth.access import AccessController
from usergate.auth.dependencies import CurrentIdentity
from usergate.auth.jwt import TokenManager
from usergate.auth.password import hash_password, needs_upgrade, verify_password
from usergate.db.models import User
from usergate.db.store import UserStore
from usergate.errors import AuthenticationFailed, NotFound

logger = structlog.get_logger()


class UserService:
    """Business logic for user accounts and sessions."""

    def __init__(self, store: UserStore, tokens: TokenManager, bcrypt_rounds: int = 12):
        self.store = store
        self.tokens = tokens
        self.access = AccessController(store)
        self.bcrypt_rounds = bcrypt_rounds

    # ─── Accounts ───────────────────────────────────────

    def list_users(self) -> list[User]:
        return self.store.find_all()

    def get_user(self, user_id: str) -> User:
        return self.store.find_by_id(user_id)

    def search_user(self, user_id: Optional[str]) -> User:
        return self.store.find_by_query_id(user_id)

    async def register(
        self,
        account: str,
        password: str,
        name: str,
        mail: str,
        head: Optional[str] = None,
    ) -> str:
        """Create an account. Returns the new user id."""
        return await self.store.insert(
            account=account,
            password=hash_password(password, self.bcrypt_rounds),
            name=name,
            mail=mail,
            head=head,
        )

    # ─── Sessions ───────────────────────────────────────

    async def login(self, account: str, password: str) -> str:
        """Exact account/password match → 30 minute session token.

        Learn: Unknown account and wrong password fail identically.
        Plaintext passwords left in an older store are upgraded to bcrypt
        the first time their owner logs in.
        """
        user = self.store.find_by_account(account)
        if user is None or not verify_password(password, user.password):
            logger.info("usergate.login_failed", account=account)
            raise AuthenticationFailed()

        if needs_upgrade(user.password):
            upgraded = await self.store.upgrade_password(
                user.id, user.password, hash_password(password, self.bcrypt_rounds)
            )
            if upgraded:
                logger.info("usergate.password_upgraded", user_id=user.id)

        logger.info("usergate.login", user_id=user.id)
        return self.tokens.issue_session(user)

    def logout(self, identity: CurrentIdentity) -> str:
        """Hand back a pre-expired token. The caller's token is NOT revoked."""
        logger.info("usergate.logout", user_id=identity.id)
        return self.tokens.issue_logout()

    def refresh(self, identity: CurrentIdentity) -> str:
        """Re-issue a session token from the caller's current record."""
        user = self.store.find_by_account(identity.account) if identity.account else None
        if user is None:
            raise NotFound("User not found, account no longer exists", status_code=400)
        return self.tokens.issue_session(user)

    # ─── Self-service mutations ─────────────────────────

    async def update_user(
        self,
        identity: CurrentIdentity,
        user_id: str,
        password: str,
        name: str,
        head: Optional[str] = None,
    ) -> User:
        """Replace password, name and head. Only the owner may do this."""
        return await self.access.update(
            identity,
            user_id,
            password=hash_password(password, self.bcrypt_rounds),
            name=name,
            head=head,
        )

    async def delete_user(self, identity: CurrentIdentity, user_id: str) -> str:
        """Remove the caller's own record. Returns a pre-expired token."""
        await self.access.remove(identity, user_id)
        return self.tokens.issue_logout()
