"""Session management models."""

from datetime import datetime
from typing import NewType

from pydantic import Field

from chatgate.core.db import StoreModel
from chatgate.utils import now

AuthToken = NewType("AuthToken", str)


class Session(StoreModel):
    """Login session of an account.

    At most one session per email exists right after login; older ones are removed then.
    """

    token: str
    email: str
    created_at: datetime = Field(default_factory=now)
    expires_at: datetime

    def is_expired(self, at: datetime | None = None) -> bool:
        return self.expires_at <= (at or now())
