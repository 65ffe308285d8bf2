"""Chunk model and the chunk store contract.

The ingestion pipeline owns chunks; this package only reads pending chunks
and writes back a compliance status.  Hosts adapt their own storage by
subclassing :class:`ChunkStore`.  :class:`InMemoryChunkStore` is a
thread-safe reference implementation.
"""
from __future__ import annotations

import threading
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import Enum

from aumos_chunk_compliance.errors import StoreError


class ChunkStatus(str, Enum):
    """Compliance scan status of a chunk."""

    PENDING = "pending"
    COMPLETED = "completed"
    VIOLATIONS_DETECTED = "violations_detected"
    FAILED = "failed"


@dataclass
class Chunk:
    """A unit of ingested content scanned independently.

    Attributes
    ----------
    chunk_id:
        Unique chunk identifier.
    content:
        Text content of the chunk.
    tenant_id:
        Owning tenant.
    metadata:
        Free-form metadata from the ingestion pipeline.
    compliance_status:
        Compliance scan status, kept apart from any embedding status.
    """

    chunk_id: str
    content: str
    tenant_id: str
    metadata: dict[str, object] = field(default_factory=dict)
    compliance_status: str = ChunkStatus.PENDING.value


class ChunkStore(ABC):
    """Source of pending chunks and sink for their compliance status."""

    @abstractmethod
    def get_chunks_by_status(self, tenant_id: str, status: str, limit: int) -> list[Chunk]:
        """Return up to ``limit`` chunks of ``tenant_id`` in ``status``.

        Raises
        ------
        StoreError:
            When the store cannot be read.
        """

    @abstractmethod
    def update_chunk_status(
        self,
        chunk_id: str,
        status: str,
        expected_status: str | None = None,
    ) -> bool:
        """Set the compliance status of a chunk.

        Parameters
        ----------
        chunk_id:
            Chunk to update.
        status:
            New status.
        expected_status:
            When given, the update only applies if the current status equals
            it.  A mismatch means another pass already handled the chunk.

        Returns
        -------
        bool
            ``True`` when the status was written.

        Raises
        ------
        StoreError:
            When the store cannot be written.
        """


class InMemoryChunkStore(ChunkStore):
    """Thread-safe in-process chunk store.

    Parameters
    ----------
    chunks:
        Optional initial chunks.
    """

    def __init__(self, chunks: Iterable[Chunk] | None = None) -> None:
        self._lock = threading.Lock()
        self._chunks: dict[str, Chunk] = {}
        for chunk in chunks or []:
            self.add(chunk)

    def add(self, chunk: Chunk) -> None:
        """Insert or replace a chunk."""
        with self._lock:
            self._chunks[chunk.chunk_id] = replace(chunk, metadata=dict(chunk.metadata))

    def get(self, chunk_id: str) -> Chunk:
        """Return a copy of a stored chunk.

        Raises
        ------
        StoreError:
            When no chunk with ``chunk_id`` exists.
        """
        with self._lock:
            chunk = self._chunks.get(chunk_id)
            if chunk is None:
                raise StoreError(f"Chunk '{chunk_id}' not found")
            return replace(chunk, metadata=dict(chunk.metadata))

    def get_chunks_by_status(self, tenant_id: str, status: str, limit: int) -> list[Chunk]:
        with self._lock:
            selected = [
                replace(c, metadata=dict(c.metadata))
                for c in self._chunks.values()
                if c.tenant_id == tenant_id and c.compliance_status == status
            ]
        return selected[:limit]

    def update_chunk_status(
        self,
        chunk_id: str,
        status: str,
        expected_status: str | None = None,
    ) -> bool:
        with self._lock:
            chunk = self._chunks.get(chunk_id)
            if chunk is None:
                raise StoreError(f"Chunk '{chunk_id}' not found")
            if expected_status is not None and chunk.compliance_status != expected_status:
                return False
            chunk.compliance_status = status
            return True

    def statuses(self, tenant_id: str | None = None) -> dict[str, str]:
        """Return ``{chunk_id: compliance_status}``, optionally for one tenant."""
        with self._lock:
            return {
                c.chunk_id: c.compliance_status
                for c in self._chunks.values()
                if tenant_id is None or c.tenant_id == tenant_id
            }

    def __len__(self) -> int:
        with self._lock:
            return len(self._chunks)
