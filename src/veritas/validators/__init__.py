# src/veritas/validators/__init__.py
from .base import CategoryValidator, pairwise_deviations, relative_deviation
from .market_validator import MarketValidator
from .news_validator import NewsValidator
from .onchain_validator import OnChainValidator, consistency_from_flow_ratio
from .settings import VeritasSettings
from .social_validator import SocialValidator


def default_validators(settings: VeritasSettings | None = None, classifier=None) -> dict:
    """One validator per category, sharing settings and classifier."""
    settings = settings or VeritasSettings()
    return {
        MarketValidator.category: MarketValidator(settings),
        SocialValidator.category: SocialValidator(settings, classifier),
        OnChainValidator.category: OnChainValidator(settings),
        NewsValidator.category: NewsValidator(settings, classifier),
    }


__all__ = [
    "CategoryValidator",
    "MarketValidator",
    "NewsValidator",
    "OnChainValidator",
    "SocialValidator",
    "VeritasSettings",
    "consistency_from_flow_ratio",
    "default_validators",
    "pairwise_deviations",
    "relative_deviation",
]
