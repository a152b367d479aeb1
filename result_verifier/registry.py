"""
Registry store — the collection of certificate records that uploads are checked against.

The verification path only ever calls list() and gets a snapshot back, so the
matching and decision code never sees the store mutate underneath it.
Records live in process memory only; a restart starts again from the seed file.
"""

from __future__ import annotations

import json
import logging
import threading
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from .models import CertificateRecord

logger = logging.getLogger(__name__)


class RegistryStore(Protocol):
    """Anything that can list, create and delete certificate records."""

    def list(self) -> list[CertificateRecord]: ...

    def create(self, record: CertificateRecord) -> CertificateRecord: ...

    def delete(self, record_id: str) -> bool: ...


class InMemoryRegistry:
    """Newest-first, process-local registry.

    Usage:
        registry = InMemoryRegistry(load_seed_records())
        registry.create(record)          # goes to the front
        registry.extend(imported)        # batch goes to the front, file order kept
        snapshot = registry.list()
    """

    def __init__(self, records: Iterable[CertificateRecord] | None = None):
        self._records: list[CertificateRecord] = list(records or [])
        self._lock = threading.Lock()

    def __len__(self) -> int:
        return len(self._records)

    def list(self) -> list[CertificateRecord]:
        with self._lock:
            return list(self._records)

    def get(self, record_id: str) -> CertificateRecord | None:
        with self._lock:
            return next((r for r in self._records if r.id == record_id), None)

    def create(self, record: CertificateRecord) -> CertificateRecord:
        with self._lock:
            self._records.insert(0, record)
        logger.info("Registered record %s (%s)", record.id, record.certificate_id)
        return record

    def extend(self, records: Iterable[CertificateRecord]) -> list[CertificateRecord]:
        batch = list(records)
        with self._lock:
            self._records[:0] = batch
        logger.info("Imported %d records", len(batch))
        return batch

    def delete(self, record_id: str) -> bool:
        """Remove a record by id. Unknown ids are ignored; returns whether one was removed."""
        with self._lock:
            before = len(self._records)
            self._records = [r for r in self._records if r.id != record_id]
            removed = len(self._records) < before
        if not removed:
            logger.warning("Delete requested for unknown record %s", record_id)
        return removed


def load_seed_records(path: str | Path | None = None) -> list[CertificateRecord]:
    """Load demo records from a JSON array file (camelCase or snake_case keys).

    Args:
        path: Path to the seed file. Defaults to registry_seed.json at the project root.
    """
    if path is None:
        from .config import DEFAULT_SEED_PATH

        path = DEFAULT_SEED_PATH
    resolved = Path(path)

    with resolved.open(encoding="utf-8") as f:
        raw: list[dict] = json.load(f)

    records = [CertificateRecord.model_validate(item) for item in raw]
    logger.info("Loaded %d seed records from %s", len(records), resolved)
    return records
