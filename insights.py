from __future__ import annotations

import asyncio
from typing import FrozenSet, Iterable, Optional, Tuple

import pandas as pd

import config
from logging_setup import get_logger
from models import AnomalyReport, Transaction
from sanitize import sanitize_amount

logger = get_logger("financeiq.insights")


def detect_anomalies(transactions: Iterable[Transaction], z_threshold: float = config.QUICK_Z_THRESHOLD) -> FrozenSet[str]:
    """
    Ids whose amount sits at least ``z_threshold`` population std devs from the mean.

    The boundary is inclusive (``>=``), where the dashboard this engine backs
    used a strict ``>``. A lone outlier among n equal amounts lands at exactly
    z = sqrt(n - 1), e.g. z = 2 in a batch of five, and a strict comparison
    would never flag it at that threshold.
    """

    txns = list(transactions)
    if len(txns) < 2:
        return frozenset()

    amounts = pd.Series([sanitize_amount(t.amount) for t in txns], dtype=float)
    # Identical amounts can still leave float noise in std
    if amounts.nunique() <= 1:
        return frozenset()
    std_amount = amounts.std(ddof=0)
    if pd.isna(std_amount) or std_amount == 0:
        return frozenset()

    mean_amount = amounts.mean()
    flagged = (amounts - mean_amount).abs() >= z_threshold * std_amount
    return frozenset(t.id for t, hit in zip(txns, flagged) if hit)


def anomaly_label(count: int) -> str:
    return f"{count} {'anomaly' if count == 1 else 'anomalies'} detected"


def _report(ids: FrozenSet[str], z_threshold: float, mode: str) -> AnomalyReport:
    return AnomalyReport(ids=ids, z_threshold=z_threshold, mode=mode, label=anomaly_label(len(ids)))


def quick_scan(transactions: Iterable[Transaction], z_threshold: Optional[float] = None) -> AnomalyReport:
    """Synchronous, strict pass (z=2 by default)."""

    z = config.QUICK_Z_THRESHOLD if z_threshold is None else z_threshold
    return _report(detect_anomalies(transactions, z), z, "quick")


async def deep_scan(
    transactions: Iterable[Transaction],
    delay: Optional[float] = None,
    z_threshold: Optional[float] = None,
) -> AnomalyReport:
    """
    The slower, more sensitive pass (z=1.5 by default).

    Stands in for an out-of-band model call, so it only answers after
    ``delay`` seconds. Cancelling the awaiting task abandons the scan.
    """

    batch = tuple(transactions)
    z = config.DEEP_Z_THRESHOLD if z_threshold is None else z_threshold
    await asyncio.sleep(config.DEEP_SCAN_DELAY_SECONDS if delay is None else delay)
    return _report(detect_anomalies(batch, z), z, "deep")


class AnomalyMonitor:
    """
    Holds the authoritative batch and its anomaly report.

    Each ``submit`` replaces the batch, publishes the quick report straight
    away and schedules a deep scan. Only the latest batch may publish: a
    newer submit cancels the pending scan, and a deep result that still
    arrives for an older batch is discarded.
    """

    def __init__(self, delay: Optional[float] = None, z_threshold: Optional[float] = None):
        self.delay = config.DEEP_SCAN_DELAY_SECONDS if delay is None else delay
        self.z_threshold = config.DEEP_Z_THRESHOLD if z_threshold is None else z_threshold
        self.generation = 0
        self.batch: Tuple[Transaction, ...] = ()
        self.report: AnomalyReport = quick_scan(())
        self._task: Optional[asyncio.Task] = None

    @property
    def pending(self) -> bool:
        return self._task is not None and not self._task.done()

    def submit(self, transactions: Iterable[Transaction]) -> asyncio.Task:
        """Make ``transactions`` the current batch. Must be called inside a running event loop."""

        loop = asyncio.get_running_loop()
        self.cancel()

        self.generation += 1
        self.batch = tuple(transactions)
        self.report = quick_scan(self.batch)

        logger.info(
            "Batch %d: %d transactions, %s; deep scan in %.2fs",
            self.generation,
            len(self.batch),
            self.report.label,
            self.delay,
        )
        self._task = loop.create_task(self.run_deep(self.generation, self.batch))
        return self._task

    async def run_deep(self, generation: int, batch: Tuple[Transaction, ...]) -> Optional[AnomalyReport]:
        report = await deep_scan(batch, delay=self.delay, z_threshold=self.z_threshold)
        if generation != self.generation:
            logger.info("Discarding deep scan for batch %d, batch %d is current", generation, self.generation)
            return None
        self.report = report
        logger.info("Batch %d deep scan: %s", generation, report.label)
        return report

    def cancel(self) -> bool:
        """Cancel the in-flight deep scan, if any."""

        if not self.pending:
            return False
        self._task.cancel()
        logger.info("Cancelled deep scan for batch %d", self.generation)
        return True
