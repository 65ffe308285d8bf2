"""Background batch processor for tenant compliance scanning.

The processor owns one daemon worker thread.  Every ``scan_interval``
seconds the worker walks the active tenants in order, scans each tenant's
pending chunks, writes the compliance status back to the chunk store and
hands the resulting :class:`ComplianceReport` to an optional sink.

Lifecycle::

    STOPPED --start()--> RUNNING --stop()--> STOPPING --> STOPPED

All transitions happen under one lock, so concurrent ``start()`` calls can
never launch two workers and ``stop()`` is safe to call repeatedly.

Example
-------
>>> store = InMemoryChunkStore([Chunk("c1", "Invoice for bank account", "t1")])
>>> processor = BatchProcessor(store, StaticTenantProvider(["t1"]))
>>> report = processor.process_tenant("t1")
>>> report.total_chunks_scanned
1
"""
from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from enum import Enum

from aumos_chunk_compliance.config import ComplianceConfig
from aumos_chunk_compliance.errors import StoreError
from aumos_chunk_compliance.processing.metrics import MetricsRecorder, ProcessorMetrics
from aumos_chunk_compliance.processing.reporter import build_report, empty_report
from aumos_chunk_compliance.processing.tenants import TenantProvider
from aumos_chunk_compliance.scanning.models import ComplianceReport, ComplianceResult
from aumos_chunk_compliance.scanning.orchestrator import ScanOrchestrator
from aumos_chunk_compliance.store import ChunkStatus, ChunkStore

logger = logging.getLogger(__name__)

ReportSink = Callable[[ComplianceReport], None]


class ProcessorState(str, Enum):
    """Lifecycle states of a :class:`BatchProcessor`."""

    STOPPED = "stopped"
    RUNNING = "running"
    STOPPING = "stopping"


def _status_for(result: ComplianceResult) -> ChunkStatus:
    if result.failed:
        return ChunkStatus.FAILED
    if result.has_violations:
        return ChunkStatus.VIOLATIONS_DETECTED
    return ChunkStatus.COMPLETED


class BatchProcessor:
    """Periodically scans pending chunks for every active tenant.

    Parameters
    ----------
    store:
        Chunk store supplying pending chunks and receiving status updates.
    tenant_provider:
        Supplies the tenants scanned on each cycle.
    config:
        Processor and scan configuration.
    orchestrator:
        Optional :class:`ScanOrchestrator`; built from ``config`` when
        omitted.
    report_sink:
        Optional callable receiving each report produced by the background
        cycle, e.g. :meth:`ComplianceAuditLog.record_report`.
    """

    def __init__(
        self,
        store: ChunkStore,
        tenant_provider: TenantProvider,
        config: ComplianceConfig | None = None,
        orchestrator: ScanOrchestrator | None = None,
        report_sink: ReportSink | None = None,
    ) -> None:
        self._store = store
        self._tenant_provider = tenant_provider
        self._config = config or ComplianceConfig()
        self._orchestrator = orchestrator or ScanOrchestrator(self._config)
        self._report_sink = report_sink
        self._metrics = MetricsRecorder()

        self._lock = threading.Lock()
        self._state = ProcessorState.STOPPED
        self._stop_event = threading.Event()
        self._worker: threading.Thread | None = None

        self._tenant_locks: dict[str, threading.Lock] = {}
        self._tenant_locks_guard = threading.Lock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """Start the background worker.

        Returns
        -------
        bool
            ``True`` when a worker was started.  ``False`` when the processor
            is already running or stopping, scanning is disabled, or a worker
            abandoned by a timed-out :meth:`stop` has not exited yet.
        """
        with self._lock:
            if self._state is not ProcessorState.STOPPED:
                logger.debug("Compliance processor start ignored; state is %s", self._state.value)
                return False
            if not self._config.enabled:
                logger.info("Compliance scanning is disabled")
                return False
            if self._worker_alive():
                logger.warning(
                    "Compliance processor start refused; worker from a timed-out stop is still running"
                )
                return False

            self._stop_event = threading.Event()
            self._worker = threading.Thread(
                target=self._processing_loop,
                args=(self._stop_event,),
                daemon=True,
                name="compliance-batch-processor",
            )
            self._state = ProcessorState.RUNNING
            self._worker.start()

        logger.info(
            "Compliance processor started batch_size=%d scan_interval=%.1fs gdpr_enabled=%s hipaa_enabled=%s",
            self._config.batch_size,
            self._config.scan_interval,
            self._config.gdpr_enabled,
            self._config.hipaa_enabled,
        )
        return True

    def stop(self) -> bool:
        """Stop the background worker, waiting up to the grace period.

        The in-flight cycle is asked to stop cooperatively.  When it does not
        finish within ``stop_grace_seconds`` it is abandoned and the
        processor still moves to STOPPED.

        Returns
        -------
        bool
            ``True`` when no worker was left running.  Repeated calls keep
            returning ``False`` until an abandoned worker exits.
        """
        with self._lock:
            if self._state is not ProcessorState.RUNNING:
                return self._state is ProcessorState.STOPPED and not self._worker_alive()
            logger.info("Stopping compliance processor...")
            self._stop_event.set()
            self._state = ProcessorState.STOPPING
            worker = self._worker

        finished = True
        if worker is not None and worker is not threading.current_thread():
            worker.join(timeout=self._config.stop_grace_seconds)
            finished = not worker.is_alive()

        with self._lock:
            self._state = ProcessorState.STOPPED
            # Kept while alive; start() refuses until it exits.
            self._worker = None if finished else worker

        if finished:
            logger.info("Compliance processor stopped successfully")
        else:
            logger.warning(
                "Compliance processor stop timed out after %.1fs; abandoning in-flight cycle",
                self._config.stop_grace_seconds,
            )
        return finished

    @property
    def state(self) -> ProcessorState:
        with self._lock:
            return self._state

    @property
    def is_running(self) -> bool:
        return self.state is ProcessorState.RUNNING

    # ------------------------------------------------------------------
    # Tenant passes
    # ------------------------------------------------------------------

    def process_tenant(self, tenant_id: str) -> ComplianceReport:
        """Scan up to ``batch_size`` pending chunks of one tenant.

        Passes for the same tenant are serialised, and status writes only
        apply to chunks that are still pending, so overlapping manual and
        background passes never scan-and-write a chunk twice.

        Raises
        ------
        StoreError:
            When pending chunks cannot be fetched or any status write fails.
        """
        with self._tenant_lock(tenant_id):
            started = time.perf_counter()
            chunks = self._store.get_chunks_by_status(
                tenant_id, ChunkStatus.PENDING.value, self._config.batch_size
            )
            if not chunks:
                logger.debug("No pending chunks for tenant %s", tenant_id)
                return empty_report(tenant_id, self._config.regulations_checked())

            results = self._orchestrator.batch_scan_chunks(chunks)
            duration = time.perf_counter() - started
            report = build_report(
                tenant_id, results, duration, self._config.regulations_checked()
            )
            self._write_statuses(results)
            self._metrics.record_results(results, duration)

        logger.info(
            "Compliance scanning completed for tenant %s chunks_scanned=%d pii_detected=%d violations=%d duration=%.3fs",
            tenant_id,
            report.total_chunks_scanned,
            report.pii_detected_count,
            len(report.compliance_violations),
            report.scan_duration,
        )
        return report

    def generate_compliance_report(self, tenant_id: str) -> ComplianceReport:
        """Run a tenant pass and return its report."""
        return self.process_tenant(tenant_id)

    def scan_all_tenants(self, cancel: threading.Event | None = None) -> dict[str, ComplianceReport]:
        """Run one pass over every active tenant, in order.

        Parameters
        ----------
        cancel:
            Event checked before each tenant and during retry backoff.  The
            background worker passes its stop event; manual callers may omit
            it.

        Returns
        -------
        dict[str, ComplianceReport]
            Reports of the tenants that completed.  Tenants whose retries
            were exhausted are logged and left out.
        """
        cancel = cancel if cancel is not None else threading.Event()
        reports: dict[str, ComplianceReport] = {}

        try:
            tenants = self._tenant_provider.active_tenants()
        except StoreError as exc:
            logger.error("Failed to list active tenants: %s", exc)
            return reports

        for tenant_id in tenants:
            if cancel.is_set():
                logger.info("Compliance scan cycle cancelled before tenant %s", tenant_id)
                break
            try:
                report = self._scan_tenant_with_retry(tenant_id, cancel)
            except StoreError as exc:
                logger.error(
                    "Failed to scan tenant compliance for %s after %d attempts; skipping this cycle: %s",
                    tenant_id,
                    self._config.max_retry_attempts,
                    exc,
                )
                continue
            if report is None:
                break
            reports[tenant_id] = report
            self._emit(report)

        return reports

    def get_metrics(self) -> ProcessorMetrics:
        """Return a snapshot of processor metrics."""
        return self._metrics.snapshot(self.state.value)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _worker_alive(self) -> bool:
        return self._worker is not None and self._worker.is_alive()

    def _processing_loop(self, stop_event: threading.Event) -> None:
        logger.info("Compliance scanning loop started")
        while not stop_event.wait(self._config.scan_interval):
            try:
                self.scan_all_tenants(stop_event)
            except Exception:
                logger.exception("Compliance scan cycle failed; retrying next interval")
        logger.info("Compliance scanning loop stopped")

    def _scan_tenant_with_retry(
        self,
        tenant_id: str,
        cancel: threading.Event,
    ) -> ComplianceReport | None:
        """Return the tenant report, or ``None`` when cancelled mid-retry."""
        max_attempts = self._config.max_retry_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                report = self.process_tenant(tenant_id)
            except StoreError as exc:
                self._metrics.record_attempt(succeeded=False)
                logger.warning(
                    "Compliance scan attempt failed tenant_id=%s attempt=%d/%d: %s",
                    tenant_id,
                    attempt,
                    max_attempts,
                    exc,
                )
                if attempt == max_attempts:
                    raise
                if cancel.wait(self._config.retry_backoff_seconds * attempt):
                    logger.info("Compliance retry for tenant %s cancelled", tenant_id)
                    return None
                continue
            self._metrics.record_attempt(succeeded=True)
            return report

        return None

    def _write_statuses(self, results: list[ComplianceResult]) -> None:
        failed: list[str] = []
        for result in results:
            status = _status_for(result)
            try:
                applied = self._store.update_chunk_status(
                    result.chunk_id,
                    status.value,
                    expected_status=ChunkStatus.PENDING.value,
                )
            except StoreError as exc:
                logger.error("Failed to update chunk compliance status %s: %s", result.chunk_id, exc)
                failed.append(result.chunk_id)
                continue
            if not applied:
                logger.info(
                    "Chunk %s was no longer pending; compliance status left unchanged",
                    result.chunk_id,
                )
        if failed:
            raise StoreError(
                f"Failed to update compliance status for {len(failed)} chunk(s): {', '.join(failed)}"
            )

    def _emit(self, report: ComplianceReport) -> None:
        if self._report_sink is None:
            return
        try:
            self._report_sink(report)
        except Exception:
            logger.exception("Compliance report sink failed for tenant %s", report.tenant_id)

    def _tenant_lock(self, tenant_id: str) -> threading.Lock:
        with self._tenant_locks_guard:
            lock = self._tenant_locks.get(tenant_id)
            if lock is None:
                lock = threading.Lock()
                self._tenant_locks[tenant_id] = lock
            return lock
