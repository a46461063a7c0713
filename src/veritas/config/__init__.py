# src/veritas/config/__init__.py
from .settings import (
    AnthropicConfig,
    ClassifierSettings,
    ClaudeClassifierSettings,
    ReliabilitySettings,
    Settings,
    SystemConfig,
)

__all__ = [
    "AnthropicConfig",
    "ClassifierSettings",
    "ClaudeClassifierSettings",
    "ReliabilitySettings",
    "Settings",
    "SystemConfig",
]
