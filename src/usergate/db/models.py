"""User record model.

Learn: Records are frozen pydantic models. The store never mutates one
in place; update() builds a replacement with model_copy(). Handing a
record to a caller can't leak a writable reference into the store.
"""

from typing import Optional

from pydantic import BaseModel


class User(BaseModel):
    """One entry in the store's "users" collection.

    password and name default to "" because older db.json files can
    lack them: a PUT that omitted a field used to drop the key.
    """

    id: str
    account: str
    password: str = ""
    name: str = ""
    mail: str
    head: Optional[str] = None

    model_config = {"frozen": True, "extra": "ignore"}

    def public(self) -> dict:
        """Record as returned over the API (no password)."""
        return self.model_dump(exclude={"password"})
