# src/veritas/models/context.py
"""Read-only view of earlier stages handed to later collectors and validators."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from veritas.models.data_source import Category, DataSourceResult
from veritas.models.findings import CategoryValidation


@dataclass(frozen=True)
class StageContext:
    """Results of the stages completed so far in one run."""

    symbol: str
    results: Mapping[Category, tuple[DataSourceResult, ...]] = field(
        default_factory=lambda: MappingProxyType({})
    )
    validations: Mapping[Category, CategoryValidation] = field(
        default_factory=lambda: MappingProxyType({})
    )
    trust_weights: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))

    @classmethod
    def build(
        cls,
        symbol: str,
        results: Mapping[Category, list[DataSourceResult]],
        validations: Mapping[Category, CategoryValidation],
        trust_weights: Optional[Mapping[str, float]] = None,
    ) -> "StageContext":
        return cls(
            symbol=symbol,
            results=MappingProxyType({k: tuple(v) for k, v in results.items()}),
            validations=MappingProxyType(dict(validations)),
            trust_weights=MappingProxyType(dict(trust_weights or {})),
        )

    def consensus(self, category: Category, key: str) -> Optional[float]:
        validation = self.validations.get(category)
        if validation is None:
            return None
        return validation.consensus.get(key)

    def trust_weight(self, provider_id: str) -> float:
        return self.trust_weights.get(provider_id, 1.0)
