# tests/scoring/test_reliability.py
"""Tests for SourceReliability and SourceReliabilityTracker."""

import json
import tempfile
from pathlib import Path

import pytest

from veritas.scoring import SourceReliability, SourceReliabilityTracker, ValidationOutcome


class TestSourceReliability:
    def test_new_provider_is_fully_trusted(self):
        record = SourceReliability(provider_id="coingecko")

        assert record.reliability_score == 100.0
        assert record.trust_weight == 1.0

    @pytest.mark.parametrize(
        "successful,weight",
        [(95, 1.0), (85, 0.9), (75, 0.8), (65, 0.7), (55, 0.6), (30, 0.5)],
    )
    def test_trust_weight_bands(self, successful, weight):
        record = SourceReliability(provider_id="p", total=100, successful=successful)

        assert record.trust_weight == weight


class TestSourceReliabilityTracker:
    def test_record_updates_counts(self):
        tracker = SourceReliabilityTracker()

        tracker.record("a", ValidationOutcome.PASS)
        tracker.record("a", ValidationOutcome.DEVIATION)
        record = tracker.record("a", ValidationOutcome.FAIL)

        assert record.total == 3
        assert record.successful == 1
        assert record.deviations == 1
        assert record.last_updated is not None

    def test_unknown_provider_weight(self):
        assert SourceReliabilityTracker().trust_weight("nobody") == 1.0

    def test_snapshot_is_read_only(self):
        tracker = SourceReliabilityTracker()
        tracker.record("a", ValidationOutcome.FAIL)

        snapshot = tracker.snapshot()

        assert snapshot["a"] == 0.5
        with pytest.raises(TypeError):
            snapshot["a"] = 1.0

    def test_snapshot_does_not_follow_later_records(self):
        tracker = SourceReliabilityTracker()
        tracker.record("a", ValidationOutcome.PASS)
        snapshot = tracker.snapshot()

        tracker.record("a", ValidationOutcome.FAIL)

        assert snapshot["a"] == 1.0
        assert tracker.trust_weight("a") == 0.6

    def test_reliable_and_unreliable_sources(self):
        tracker = SourceReliabilityTracker()
        tracker.record("good", ValidationOutcome.PASS)
        tracker.record("bad", ValidationOutcome.FAIL)
        tracker.get("unused")

        assert tracker.reliable_sources() == ["good"]
        assert tracker.unreliable_sources() == ["bad"]

    def test_persists_between_instances(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            tracker = SourceReliabilityTracker(data_dir=Path(tmpdir))
            tracker.record("binance", ValidationOutcome.PASS)
            tracker.record("binance", ValidationOutcome.FAIL)

            with open(Path(tmpdir) / "binance.json") as f:
                data = json.load(f)
            assert data["total"] == 2
            assert data["reliability_score"] == 50.0

            reloaded = SourceReliabilityTracker(data_dir=Path(tmpdir))
            record = reloaded.get("binance")
            assert record.total == 2
            assert record.successful == 1
            assert reloaded.trust_weight("binance") == 0.6

    def test_skips_unreadable_files(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            (Path(tmpdir) / "broken.json").write_text("{not json")

            tracker = SourceReliabilityTracker(data_dir=Path(tmpdir))

            assert tracker.snapshot() == {}

    def test_provider_id_with_path_separators_stays_in_data_dir(self):
        with tempfile.TemporaryDirectory() as tmpdir:
            data_dir = Path(tmpdir) / "reliability"
            tracker = SourceReliabilityTracker(data_dir=data_dir)

            tracker.record("../../escape", ValidationOutcome.PASS)

            [written] = list(data_dir.iterdir())
            assert written.parent == data_dir
            assert not (Path(tmpdir) / "escape.json").exists()
            assert json.loads(written.read_text())["provider_id"] == "../../escape"

            reloaded = SourceReliabilityTracker(data_dir=data_dir)
            assert reloaded.get("../../escape").total == 1

    def test_file_name_keeps_plain_ids(self):
        assert SourceReliabilityTracker.file_name("exchange_1") == "exchange_1.json"
        assert SourceReliabilityTracker.file_name("a/b") != SourceReliabilityTracker.file_name("a_b")
