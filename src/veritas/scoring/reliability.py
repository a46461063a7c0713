# src/veritas/scoring/reliability.py
"""Historical provider reliability and the trust weights derived from it."""

import hashlib
import json
import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class ValidationOutcome(str, Enum):
    """How a provider fared in one run."""

    PASS = "pass"
    FAIL = "fail"
    DEVIATION = "deviation"


@dataclass
class SourceReliability:
    """Track record of one provider.

    Attributes:
        provider_id: Provider name.
        total: Number of recorded runs.
        successful: Runs where the provider passed.
        deviations: Runs where the provider answered but disagreed with consensus.
        last_updated: Time of the last recorded outcome.
    """

    provider_id: str
    total: int = 0
    successful: int = 0
    deviations: int = 0
    last_updated: Optional[datetime] = None

    @property
    def reliability_score(self) -> float:
        """Percentage of passed runs. New providers start at 100."""
        if self.total == 0:
            return 100.0
        return self.successful / self.total * 100

    @property
    def trust_weight(self) -> float:
        """Weight used for consensus values.

        - >= 90 reliability: 1.0
        - >= 80: 0.9
        - >= 70: 0.8
        - >= 60: 0.7
        - >= 50: 0.6
        - below: 0.5
        """
        score = self.reliability_score
        if score >= 90:
            return 1.0
        elif score >= 80:
            return 0.9
        elif score >= 70:
            return 0.8
        elif score >= 60:
            return 0.7
        elif score >= 50:
            return 0.6
        else:
            return 0.5


class SourceReliabilityTracker:
    """Keeps per-provider reliability, optionally persisted as JSON files.

    Each provider is stored as a separate file named {provider_id}.json in
    data_dir. Ids with characters outside [A-Za-z0-9_.-] are escaped and
    suffixed with a short hash so the file always stays inside data_dir.
    Without data_dir the tracker is in-memory only.
    """

    def __init__(self, data_dir: Optional[Path] = None):
        self._data_dir = Path(data_dir) if data_dir is not None else None
        self._cache: dict[str, SourceReliability] = {}
        if self._data_dir is not None:
            self._data_dir.mkdir(parents=True, exist_ok=True)
            self._load_all()

    def get(self, provider_id: str) -> SourceReliability:
        """Reliability record for a provider, created on first use."""
        if provider_id not in self._cache:
            self._cache[provider_id] = SourceReliability(provider_id=provider_id)
        return self._cache[provider_id]

    def trust_weight(self, provider_id: str) -> float:
        record = self._cache.get(provider_id)
        return record.trust_weight if record is not None else 1.0

    def record(self, provider_id: str, outcome: ValidationOutcome) -> SourceReliability:
        """Record one outcome and persist the updated record."""
        record = self.get(provider_id)
        record.total += 1
        if outcome == ValidationOutcome.PASS:
            record.successful += 1
        elif outcome == ValidationOutcome.DEVIATION:
            record.deviations += 1
        record.last_updated = datetime.now(timezone.utc)

        if record.trust_weight < 1.0:
            logger.debug(
                f"{provider_id} reliability {record.reliability_score:.1f}% "
                f"(trust weight {record.trust_weight})"
            )
        if self._data_dir is not None:
            self._save_to_file(record)
        return record

    def snapshot(self) -> Mapping[str, float]:
        """Read-only trust weights for the duration of one run."""
        return MappingProxyType({pid: r.trust_weight for pid, r in self._cache.items()})

    def unreliable_sources(self, threshold: float = 70.0) -> list[str]:
        return sorted(pid for pid, r in self._cache.items() if r.total and r.reliability_score < threshold)

    def reliable_sources(self, threshold: float = 90.0) -> list[str]:
        return sorted(pid for pid, r in self._cache.items() if r.total and r.reliability_score >= threshold)

    def _load_all(self) -> None:
        for file_path in sorted(self._data_dir.glob("*.json")):
            try:
                record = self._load_from_file(file_path)
            except (OSError, ValueError, KeyError) as e:
                logger.warning(f"Skipping unreadable reliability file {file_path}: {e}")
                continue
            self._cache[record.provider_id] = record

    def _load_from_file(self, file_path: Path) -> SourceReliability:
        with open(file_path) as f:
            data = json.load(f)

        last_updated = data.get("last_updated")
        return SourceReliability(
            provider_id=data["provider_id"],
            total=data.get("total", 0),
            successful=data.get("successful", 0),
            deviations=data.get("deviations", 0),
            last_updated=datetime.fromisoformat(last_updated) if last_updated else None,
        )

    def _save_to_file(self, record: SourceReliability) -> None:
        data = {
            "provider_id": record.provider_id,
            "total": record.total,
            "successful": record.successful,
            "deviations": record.deviations,
            "reliability_score": record.reliability_score,
            "trust_weight": record.trust_weight,
            "last_updated": record.last_updated.isoformat() if record.last_updated else None,
        }

        with open(self._data_dir / self.file_name(record.provider_id), "w") as f:
            json.dump(data, f, indent=2)

    @staticmethod
    def file_name(provider_id: str) -> str:
        """JSON file name for a provider, safe to join onto data_dir."""
        safe = UNSAFE_FILENAME_CHARS.sub("_", provider_id)
        if safe != provider_id or safe.strip(".") == "":
            digest = hashlib.sha1(provider_id.encode()).hexdigest()[:8]
            safe = f"{safe}-{digest}"
        return f"{safe}.json"
