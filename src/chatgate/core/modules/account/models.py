from datetime import datetime

from pydantic import Field

from chatgate.core.db import StoreModel
from chatgate.utils import now


class Account(StoreModel):
    """Registered account, identified by email."""

    email: str
    password_hash: str  # bcrypt hash
    created_at: datetime = Field(default_factory=now)
