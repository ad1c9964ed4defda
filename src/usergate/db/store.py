"""JSON-file record store for users.

Learn: The whole document ({"users": [...], "products": [...]}) is read
into memory once at startup and written back in full after every
mutation. The layout is the lowdb one used by existing db.json
files; top-level keys other than "users" are carried through
untouched.

Consistency rules:
- All mutations run under one asyncio.Lock spanning
  check → build new state → persist → swap. Two inserts racing on the
  same account can't both pass the uniqueness check.
- The new state is written first (temp file + os.replace) and only then
  swapped into memory. A failed write leaves memory and disk unchanged
  and surfaces as StorageUnavailable. No retries.
- Reads take no lock. They see whichever immutable snapshot is current.
"""

import asyncio
import json
import os
import tempfile
import uuid
from pathlib import Path
from typing import Optional

import structlog

from usergate.db.models import User
from usergate.errors import DuplicateAccount, DuplicateMail, NotFound, StorageUnavailable

logger = structlog.get_logger()


class UserStore:
    """Single-collection user store persisted to a JSON file."""

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()
        self._users: tuple[User, ...] = ()
        self._extra: dict = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    # ─── Lifecycle ──────────────────────────────────────

    async def load(self) -> None:
        """Read the store file, creating it if it does not exist.

        Raises StorageUnavailable if the file can't be read or parsed.
        """
        async with self._lock:
            document = await asyncio.to_thread(self._read)
            raw_users = document.get("users") or []
            if not isinstance(raw_users, list):
                logger.error("usergate.store_invalid_document", path=str(self.path))
                raise StorageUnavailable(f"User store \"users\" is not a list: {self.path}")
            try:
                users = tuple(User.model_validate(u) for u in raw_users)
            except ValueError as e:
                logger.error("usergate.store_invalid_record", path=str(self.path), error=str(e))
                raise StorageUnavailable(f"User store holds an invalid record: {self.path}")
            self._extra = {k: v for k, v in document.items() if k != "users"}
            self._users = users
            self._loaded = True
        logger.info("usergate.store_loaded", path=str(self.path), users=len(users))

    def _read(self) -> dict:
        try:
            if not self.path.exists():
                self._write([], {"products": []})
            with self.path.open("r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("usergate.store_read_failed", path=str(self.path), error=str(e))
            raise StorageUnavailable(f"Could not read user store: {self.path}")
        if not isinstance(document, dict):
            raise StorageUnavailable(f"User store is not a JSON object: {self.path}")
        return document

    def _write(self, users: list[dict], extra: dict) -> None:
        document = {"users": users, **extra}
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            Path(tmp_path).unlink(missing_ok=True)
            raise

    async def _commit(self, users: tuple[User, ...]) -> None:
        """Persist `users`, then make them the in-memory state."""
        payload = [u.model_dump() for u in users]
        try:
            await asyncio.to_thread(self._write, payload, self._extra)
        except OSError as e:
            logger.error("usergate.store_write_failed", path=str(self.path), error=str(e))
            raise StorageUnavailable()
        self._users = users

    # ─── Reads ──────────────────────────────────────────

    def find_all(self) -> list[User]:
        return list(self._users)

    def find_by_id(self, user_id: str) -> User:
        for user in self._users:
            if user.id == user_id:
                return user
        raise NotFound()

    def find_by_query_id(self, user_id: Optional[str]) -> User:
        """Lookup for the ?id= search route; a missing id finds nothing."""
        if not user_id:
            raise NotFound("No user matches the search condition")
        try:
            return self.find_by_id(user_id)
        except NotFound:
            raise NotFound("No user matches the search condition")

    def find_by_account(self, account: str) -> User | None:
        for user in self._users:
            if user.account == account:
                return user
        return None

    # ─── Mutations ──────────────────────────────────────

    async def insert(
        self,
        account: str,
        password: str,
        name: str,
        mail: str,
        head: Optional[str] = None,
    ) -> str:
        """Append a new user and return its generated id."""
        async with self._lock:
            if any(u.account == account for u in self._users):
                raise DuplicateAccount()
            if any(u.mail == mail for u in self._users):
                raise DuplicateMail()

            user = User(
                id=str(uuid.uuid4()),
                account=account,
                password=password,
                name=name,
                mail=mail,
                head=head,
            )
            await self._commit(self._users + (user,))
        logger.info("usergate.user_created", user_id=user.id, account=account)
        return user.id

    async def update(
        self,
        user_id: str,
        password: str,
        name: str,
        head: Optional[str] = None,
    ) -> User:
        """Replace the mutable fields (password, name, head) of a user."""
        return await self._replace(
            user_id, {"password": password, "name": name, "head": head}
        )

    async def upgrade_password(
        self, user_id: str, expected: str, password_hash: str
    ) -> bool:
        """Swap a legacy password for its hash, only if it is still `expected`.

        The caller checked `expected` before taking the lock. If the record
        changed or vanished since then, nothing is written and False is
        returned.
        """
        async with self._lock:
            users = list(self._users)
            i = self._index(user_id)
            if i is None or users[i].password != expected:
                return False
            users[i] = users[i].model_copy(update={"password": password_hash})
            await self._commit(tuple(users))
        logger.info("usergate.user_updated", user_id=user_id, fields=["password"])
        return True

    def _index(self, user_id: str) -> Optional[int]:
        for i, user in enumerate(self._users):
            if user.id == user_id:
                return i
        return None

    async def _replace(self, user_id: str, fields: dict) -> User:
        async with self._lock:
            i = self._index(user_id)
            if i is None:
                raise NotFound()

            users = list(self._users)
            updated = users[i].model_copy(update=fields)
            users[i] = updated
            await self._commit(tuple(users))
        logger.info("usergate.user_updated", user_id=user_id, fields=sorted(fields))
        return updated

    async def remove(self, user_id: str) -> User:
        """Delete a user and return the removed record."""
        async with self._lock:
            removed = None
            remaining = []
            for user in self._users:
                if user.id == user_id:
                    removed = user
                else:
                    remaining.append(user)
            if removed is None:
                raise NotFound()
            await self._commit(tuple(remaining))
        logger.info("usergate.user_removed", user_id=user_id)
        return removed
