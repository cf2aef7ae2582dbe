"""LegacyStoreManagerGateway — one-way store sync to the legacy store manager.

The legacy system picks up store records dropped as files in a hand-off
directory. Each record is written, read back for the audit log, and removed
once the hand-off completes.
"""

from __future__ import annotations

import asyncio
import json
import os
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog

log = structlog.get_logger(__name__)


class LegacyStoreManagerGateway:
    """Async wrapper around the file-based legacy hand-off."""

    def __init__(self, handoff_dir: str | os.PathLike[str] | None = None) -> None:
        configured = handoff_dir or os.environ.get("FULFILMENT_LEGACY_DIR") or tempfile.gettempdir()
        self.handoff_dir = Path(configured)

    async def create_store_on_legacy_system(self, store: Mapping[str, Any]) -> None:
        await self._sync("created", store)

    async def update_store_on_legacy_system(self, store: Mapping[str, Any]) -> None:
        await self._sync("updated", store)

    async def _sync(self, action: str, store: Mapping[str, Any]) -> None:
        content = await asyncio.to_thread(self._handoff_sync, action, dict(store))
        log.info("legacy.store_synced", action=action, store_id=store.get("id"), content=content)

    def _handoff_sync(self, action: str, store: dict[str, Any]) -> str:
        """Write the record, read it back, delete it. Returns what was read."""
        self.handoff_dir.mkdir(parents=True, exist_ok=True)
        record = json.dumps({"action": action, "store": store}, default=str, sort_keys=True)
        fd, raw_path = tempfile.mkstemp(prefix="store-", suffix=".json", dir=self.handoff_dir)
        path = Path(raw_path)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(record)
            return path.read_text(encoding="utf-8")
        finally:
            path.unlink(missing_ok=True)
