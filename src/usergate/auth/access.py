"""Self-ownership check for record mutations.

Learn: The rule is deliberately narrow: the id in the caller's verified
token must equal the id in the path, as an exact string match. The
check runs before the store is touched and does not look at whether the
target exists, so a stranger can't discover ids through PUT/DELETE.
"""

from typing import Optional

import structlog

from usergate.auth.dependencies import CurrentIdentity
from usergate.db.models import User
from usergate.db.store import UserStore
from usergate.errors import Forbidden

logger = structlog.get_logger()


class AccessController:
    """Wraps store mutations that require the caller to own the record."""

    def __init__(self, store: UserStore):
        self.store = store

    def check(self, caller: CurrentIdentity, target_id: str) -> None:
        if caller.id is None or caller.id != target_id:
            logger.warning(
                "usergate.access_denied", caller_id=caller.id, target_id=target_id
            )
            raise Forbidden()

    async def update(
        self,
        caller: CurrentIdentity,
        target_id: str,
        password: str,
        name: str,
        head: Optional[str] = None,
    ) -> User:
        self.check(caller, target_id)
        return await self.store.update(target_id, password=password, name=name, head=head)

    async def remove(self, caller: CurrentIdentity, target_id: str) -> User:
        self.check(caller, target_id)
        return await self.store.remove(target_id)
