"""Append-only JSONL audit log for compliance results and reports.

Each record carries a UTC ISO-8601 timestamp, a session identifier, an
``event`` type and the serialised result or report.  Records only ever hold
masked PII values, since results never carry raw matches.

Thread-safety is achieved with a threading.Lock so the log can serve as the
report sink of a background :class:`BatchProcessor`.

Example
-------
>>> from pathlib import Path
>>> audit = ComplianceAuditLog(Path("/tmp/compliance.jsonl"))
>>> audit.record_report(report)
>>> audit.reports(tenant_id="t1")
[...]
"""
from __future__ import annotations

import json
import logging
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path

from aumos_chunk_compliance.scanning.models import ComplianceReport, ComplianceResult

logger = logging.getLogger(__name__)

RESULT_EVENT = "compliance_result"
REPORT_EVENT = "compliance_report"


class ComplianceAuditLog:
    """Append-only JSONL audit log.

    Parameters
    ----------
    log_path:
        Path to the ``.jsonl`` audit file.  Parent directories are created
        automatically on first write.
    session_id:
        Optional session identifier stamped on every record.  A random UUID
        is generated if not supplied.
    """

    def __init__(
        self,
        log_path: Path,
        session_id: str | None = None,
    ) -> None:
        self._log_path = log_path
        self._session_id: str = session_id or str(uuid.uuid4())
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Write API
    # ------------------------------------------------------------------

    def record_result(self, result: ComplianceResult, tenant_id: str | None = None) -> None:
        """Append one chunk result."""
        entry: dict[str, object] = {"event": RESULT_EVENT, **result.to_dict()}
        if tenant_id is not None:
            entry["tenant_id"] = tenant_id
        self._write(entry)

    def record_report(self, report: ComplianceReport) -> None:
        """Append one tenant report."""
        self._write({"event": REPORT_EVENT, **report.to_dict()})

    # ------------------------------------------------------------------
    # Read API
    # ------------------------------------------------------------------

    def read_all(self) -> list[dict[str, object]]:
        """Return all records in write order; empty when the file is missing."""
        return self._load()

    def reports(self, tenant_id: str | None = None) -> list[dict[str, object]]:
        """Return report records, optionally for one tenant."""
        return self._select(REPORT_EVENT, tenant_id=tenant_id)

    def results(
        self,
        tenant_id: str | None = None,
        chunk_id: str | None = None,
    ) -> list[dict[str, object]]:
        """Return chunk result records, optionally narrowed to a tenant or chunk.

        Results recorded without a tenant never match a ``tenant_id`` filter.
        """
        return self._select(RESULT_EVENT, tenant_id=tenant_id, chunk_id=chunk_id)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _write(self, entry: dict[str, object]) -> None:
        record: dict[str, object] = {
            "timestamp": datetime.now(tz=timezone.utc).isoformat(),
            "session_id": self._session_id,
            **entry,
        }
        with self._lock:
            self._log_path.parent.mkdir(parents=True, exist_ok=True)
            with self._log_path.open("a", encoding="utf-8") as fh:
                fh.write(json.dumps(record, default=str) + "\n")

    def _select(self, event: str, **criteria: str | None) -> list[dict[str, object]]:
        wanted = {k: v for k, v in criteria.items() if v is not None}
        return [
            record
            for record in self._load()
            if record.get("event") == event
            and all(record.get(k) == v for k, v in wanted.items())
        ]

    def _load(self) -> list[dict[str, object]]:
        with self._lock:
            if not self._log_path.exists():
                return []
            lines = self._log_path.read_text(encoding="utf-8").splitlines()

        records: list[dict[str, object]] = []
        for line_number, line in enumerate(lines, start=1):
            if not line.strip():
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                logger.warning(
                    "Skipping malformed audit record at %s:%d", self._log_path, line_number
                )
        return records

    @property
    def log_path(self) -> Path:
        return self._log_path

    @property
    def session_id(self) -> str:
        return self._session_id
