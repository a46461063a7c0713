# src/veritas/validators/onchain_validator.py
"""Market-to-chain consistency validation."""

import logging
from typing import Optional

from veritas.models.context import StageContext
from veritas.models.data_source import Category, DataSourceResult
from veritas.models.findings import CategoryValidation, Severity
from veritas.validators.base import CategoryValidator

logger = logging.getLogger(__name__)


def consistency_from_flow_ratio(ratio: float) -> float:
    """Score exchange flows as a share of 24h market volume.

    Exchange flows normally amount to 10-30% of traded volume. Very low
    ratios suggest incomplete on-chain data; very high ratios are unusual
    but not necessarily wrong.
    """
    if 0.1 <= ratio <= 0.3:
        score = 100.0
    elif 0.05 <= ratio < 0.1 or 0.3 < ratio <= 0.5:
        score = 80.0
    elif ratio < 0.05:
        score = ratio * 1000
    else:
        score = 100 - (ratio - 0.5) * 50
    return max(0.0, min(100.0, score))


class OnChainValidator(CategoryValidator):
    """Checks on-chain exchange flows against the market stage's figures.

    Needs the MARKET consensus volume (and 24h change, when available) from
    the context. The category score is the market-to-chain consistency score,
    reduced by flow/price divergence warnings.
    """

    category = Category.ONCHAIN

    def _validate(
        self,
        ok: list[DataSourceResult],
        results: list[DataSourceResult],
        context: StageContext,
    ) -> CategoryValidation:
        if not ok:
            logger.warning(f"No on-chain data for {context.symbol}")
            return self.no_data(results, "on-chain")

        validation = CategoryValidation(category=self.category, score=100.0)
        cap = self.check_corroboration(
            ok, results, self.settings.min_onchain_sources, "on-chain", validation
        )

        inflow = sum(r.payload.exchange_inflow_usd for r in ok) / len(ok)
        outflow = sum(r.payload.exchange_outflow_usd for r in ok) / len(ok)
        total = inflow + outflow
        net = outflow - inflow
        providers = [r.provider_id for r in ok]

        validation.consensus.update(
            {"exchange_inflow_usd": inflow, "exchange_outflow_usd": outflow, "net_flow_usd": net}
        )

        volume = context.consensus(Category.MARKET, "volume_24h")
        change = context.consensus(Category.MARKET, "change_24h_percent")

        if not volume:
            validation.findings.append(
                self.finding(
                    Severity.WARNING,
                    "Market volume unavailable; market-to-chain consistency cannot be checked",
                    providers,
                    check="market_to_chain_consistency",
                )
            )
            validation.failed_checks.append("market_to_chain_consistency")
            self._describe_flows(net, providers, validation)
            validation.score = min(self.settings.onchain_partial_score, cap if cap is not None else 100.0)
            return validation

        if volume > self.settings.onchain_impossible_volume_usd and total == 0:
            validation.findings.append(
                self.finding(
                    Severity.FATAL,
                    f"Market volume of ${volume / 1e9:.2f}B with zero exchange flows; "
                    f"on-chain data is disconnected from market activity",
                    providers,
                    metric=volume,
                    check="market_to_chain_consistency",
                )
            )
            validation.failed_checks.append("market_to_chain_consistency")
            validation.score = 0.0
            return validation

        ratio = total / volume
        consistency = consistency_from_flow_ratio(ratio)
        validation.consensus["flow_to_volume_ratio"] = ratio
        validation.consensus["consistency_score"] = consistency

        if consistency < self.settings.onchain_low_consistency:
            validation.findings.append(
                self.finding(
                    Severity.WARNING,
                    f"Low market-to-chain consistency: {consistency:.0f}% "
                    f"(exchange flows ${total / 1e9:.2f}B vs volume ${volume / 1e9:.2f}B)",
                    providers,
                    metric=consistency,
                    check="market_to_chain_consistency",
                )
            )
            validation.failed_checks.append("market_to_chain_consistency")
        else:
            validation.passed_checks.append("market_to_chain_consistency")

        self._check_flow_price_alignment(net, total, change, providers, validation)
        self._describe_flows(net, providers, validation)

        validation.score = self.penalized_score(
            consistency, validation, cap, exclude_checks=("market_to_chain_consistency",)
        )
        logger.info(f"On-chain validation for {context.symbol}: consistency={consistency:.0f}%")
        return validation

    def _check_flow_price_alignment(
        self,
        net: float,
        total: float,
        change: Optional[float],
        providers: list[str],
        validation: CategoryValidation,
    ) -> None:
        """WARNING when net flows point one way and price action the other."""
        if change is None or total <= 0:
            return

        significant = abs(net) / total > self.settings.net_flow_significance
        limit = self.settings.flow_price_divergence_percent

        if significant and net > 0 and change <= -limit:
            description = (
                f"Net exchange outflow of ${net / 1e6:,.1f}M (accumulation) while price "
                f"fell {abs(change):.2f}% in 24h"
            )
        elif significant and net < 0 and change >= limit:
            description = (
                f"Net exchange inflow of ${abs(net) / 1e6:,.1f}M (distribution) while price "
                f"rose {change:.2f}% in 24h"
            )
        else:
            validation.passed_checks.append("flow_price_alignment")
            return

        validation.findings.append(
            self.finding(
                Severity.WARNING,
                description,
                providers,
                metric=change,
                check="flow_price_alignment",
            )
        )
        validation.failed_checks.append("flow_price_alignment")

    def _describe_flows(self, net: float, providers: list[str], validation: CategoryValidation) -> None:
        if net == 0:
            return
        direction = "accumulation" if net > 0 else "distribution"
        validation.findings.append(
            self.finding(
                Severity.INFO,
                f"Exchange flows indicate {direction} (net flow {'+' if net > 0 else '-'}"
                f"${abs(net) / 1e6:,.1f}M)",
                providers,
                metric=net,
                check="flow_direction",
            )
        )
