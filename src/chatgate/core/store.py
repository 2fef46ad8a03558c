"""Flat JSON file store for accounts and sessions."""

import asyncio
import json
import os
import tempfile
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

import pydantic
import structlog
from pydantic import Field

from chatgate.core.db import StoreModel
from chatgate.core.modules.account.models import Account
from chatgate.core.modules.session.models import Session

logger = structlog.get_logger(__name__)


class StoreDocument(StoreModel):
    """The whole persisted state."""

    accounts: list[Account] = Field(default_factory=list)
    sessions: list[Session] = Field(default_factory=list)


class FlatStore:
    """Single JSON document on disk.

    There is no partial update API: callers load the document, mutate it in memory
    and save it back. Use `transaction()` for that so concurrent requests cannot
    overwrite each other's changes.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._lock = asyncio.Lock()

    def initialize(self) -> None:
        """Create an empty document if the file does not exist yet."""
        if not self.path.exists():
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.save(StoreDocument())
            logger.info("store_created", path=str(self.path))

    def load(self) -> StoreDocument:
        """Read the document. A missing or corrupt file yields an empty document."""
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return StoreDocument()
        except OSError as e:
            logger.warning("store_load_failed", path=str(self.path), error=str(e))
            return StoreDocument()

        try:
            return StoreDocument.model_validate(json.loads(raw))
        except (json.JSONDecodeError, pydantic.ValidationError) as e:
            logger.warning("store_load_failed", path=str(self.path), error=str(e))
            return StoreDocument()

    def save(self, document: StoreDocument) -> None:
        """Overwrite the backing file with the given document."""
        data = json.dumps(document.to_store(), indent=2, ensure_ascii=False)
        # Write next to the target and rename, so a crash never leaves half a document
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(data)
            Path(tmp_name).replace(self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    async def read(self) -> StoreDocument:
        """Load the document without holding it for modification."""
        async with self._lock:
            return self.load()

    @asynccontextmanager
    async def transaction(self) -> AsyncGenerator[StoreDocument]:
        """Load, hand out the document for mutation and save it on exit.

        The whole cycle runs under one lock. If the block raises, nothing is written.
        """
        async with self._lock:
            document = self.load()
            yield document
            self.save(document)
