"""In-memory directory cache keyed by the source modification time."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Callable, List, Optional

from phonedir.directory.extractor import load_directory
from phonedir.ingestion.source import DirectorySource, Version
from phonedir.models import PersonnelRecord

LOGGER = logging.getLogger(__name__)

Loader = Callable[[DirectorySource], List[PersonnelRecord]]


class DirectoryCache:
    """Holds the last parsed record set for one source.

    At most one parse runs at a time: callers arriving while a parse is in
    flight await that same task. A failed reload never evicts a previously
    good snapshot; the error is only raised when nothing was ever loaded.
    """

    def __init__(self, source: DirectorySource, loader: Loader = load_directory) -> None:
        self.source = source
        self.loader = loader
        self._mtime: Version = None
        self._records: Optional[List[PersonnelRecord]] = None
        self._error: Optional[Exception] = None
        self._inflight: Optional[asyncio.Task[List[PersonnelRecord]]] = None
        self._loaded_at: Optional[float] = None

    @property
    def records(self) -> Optional[List[PersonnelRecord]]:
        return None if self._records is None else list(self._records)

    @property
    def mtime(self) -> Version:
        return self._mtime

    @property
    def error(self) -> Optional[Exception]:
        return self._error

    @property
    def loaded_at(self) -> Optional[float]:
        return self._loaded_at

    @property
    def is_loading(self) -> bool:
        return self._inflight is not None and not self._inflight.done()

    async def get_records(self, force_reload: bool = False) -> List[PersonnelRecord]:
        if self.is_loading:
            return await self._join(self._inflight)

        try:
            mtime = await asyncio.to_thread(self.source.modified_time)
        except Exception as exc:
            LOGGER.error("Failed to stat directory source %s: %s", self.source.describe(), exc)
            return self._fail(exc)

        if self.is_loading:
            return await self._join(self._inflight)
        if not force_reload and self._records is not None and mtime == self._mtime:
            return list(self._records)

        task = asyncio.create_task(self._reload(mtime))
        self._inflight = task
        return await self._join(task)

    async def warm(self) -> None:
        """Best-effort first load; failures are logged and left for later reloads."""
        try:
            records = await self.get_records()
        except Exception as exc:
            LOGGER.warning("Directory warm load from %s failed: %s", self.source.describe(), exc)
            return
        LOGGER.info("Directory warm load complete: %d records", len(records))

    async def _join(self, task: asyncio.Task[List[PersonnelRecord]]) -> List[PersonnelRecord]:
        try:
            return list(await asyncio.shield(task))
        except Exception as exc:
            return self._fail(exc)

    async def _reload(self, mtime: Version) -> List[PersonnelRecord]:
        try:
            records = await asyncio.to_thread(self.loader, self.source)
        except Exception as exc:
            LOGGER.error("Failed to load directory from %s: %s", self.source.describe(), exc)
            self._error = exc
            raise
        finally:
            self._inflight = None

        self._records = records
        self._mtime = mtime
        self._error = None
        self._loaded_at = time.time()
        LOGGER.info("Directory cache refreshed with %d records", len(records))
        return records

    def _fail(self, exc: Exception) -> List[PersonnelRecord]:
        self._error = exc
        if self._records is not None:
            LOGGER.warning("Serving stale directory after failure: %s", exc)
            return list(self._records)
        raise exc
