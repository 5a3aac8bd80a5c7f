"""Tests for z-score anomaly detection and the quick/deep scan monitor."""

import asyncio

import pytest

from conftest import make_txn
from insights import AnomalyMonitor, anomaly_label, deep_scan, detect_anomalies, quick_scan


def _batch(amounts):
    return [make_txn(i, amount) for i, amount in enumerate(amounts, start=1)]


class TestDetectAnomalies:
    def test_identical_amounts(self):
        assert detect_anomalies(_batch([250.0] * 6)) == frozenset()

    def test_single_outlier_on_the_boundary(self):
        # lone outlier among five sits at exactly z = 2
        assert detect_anomalies(_batch([100, 100, 100, 100, 100000]), 2.0) == {"5"}

    @pytest.mark.parametrize("amounts", [[], [42]])
    def test_too_few_transactions(self, amounts):
        assert detect_anomalies(_batch(amounts)) == frozenset()

    def test_sample_batch(self, sample_batch):
        assert detect_anomalies(sample_batch, 2.0) == {"5"}
        assert detect_anomalies(sample_batch, 1.5) == {"5"}

    def test_lower_threshold_flags_superset(self):
        batch = _batch([10, 12, 11, 13, 40, 9, 60])
        strict = detect_anomalies(batch, 2.0)
        lenient = detect_anomalies(batch, 1.0)
        assert strict <= lenient
        assert "7" in lenient

    def test_flags_negative_outliers(self):
        assert detect_anomalies(_batch([500, 510, 490, 505, -20000]), 1.5) == {"5"}


class TestReports:
    def test_labels(self):
        assert anomaly_label(0) == "0 anomalies detected"
        assert anomaly_label(1) == "1 anomaly detected"
        assert anomaly_label(3) == "3 anomalies detected"

    def test_quick_scan(self, sample_batch):
        report = quick_scan(sample_batch)
        assert report.mode == "quick"
        assert report.z_threshold == 2.0
        assert report.count == 1
        assert report.label == "1 anomaly detected"

    def test_deep_scan(self, sample_batch):
        report = asyncio.run(deep_scan(sample_batch, delay=0))
        assert report.mode == "deep"
        assert report.z_threshold == 1.5
        assert report.ids == {"5"}


class TestAnomalyMonitor:
    def test_submit_needs_running_loop(self, sample_batch):
        with pytest.raises(RuntimeError):
            AnomalyMonitor(delay=0).submit(sample_batch)

    def test_quick_then_deep(self, sample_batch):
        async def scenario():
            monitor = AnomalyMonitor(delay=0)
            task = monitor.submit(sample_batch)
            quick = monitor.report
            assert monitor.pending
            deep = await task
            return monitor, quick, deep

        monitor, quick, deep = asyncio.run(scenario())
        assert quick.mode == "quick"
        assert deep.mode == "deep"
        assert monitor.report is deep
        assert not monitor.pending

    def test_newer_batch_wins(self, sample_batch):
        second_batch = _batch([100, 100, 100, 100, 100000])

        async def scenario():
            monitor = AnomalyMonitor(delay=0.05)
            first = monitor.submit(sample_batch)
            second = monitor.submit(second_batch)
            with pytest.raises(asyncio.CancelledError):
                await first
            await second
            return monitor

        monitor = asyncio.run(scenario())
        assert monitor.generation == 2
        assert monitor.batch == tuple(second_batch)
        assert monitor.report.mode == "deep"
        assert monitor.report.ids == {"5"}

    def test_stale_deep_result_is_discarded(self, sample_batch):
        async def scenario():
            monitor = AnomalyMonitor(delay=0)
            await monitor.submit(_batch([1, 1, 1]))
            current = monitor.report
            monitor.generation += 1
            stale = await monitor.run_deep(monitor.generation - 1, tuple(sample_batch))
            return monitor, current, stale

        monitor, current, stale = asyncio.run(scenario())
        assert stale is None
        assert monitor.report is current

    def test_cancel(self, sample_batch):
        async def scenario():
            monitor = AnomalyMonitor(delay=10)
            monitor.submit(sample_batch)
            cancelled = monitor.cancel()
            await asyncio.sleep(0)
            return monitor, cancelled

        monitor, cancelled = asyncio.run(scenario())
        assert cancelled
        assert not monitor.pending
        assert monitor.report.mode == "quick"
        assert not monitor.cancel()
