# src/veritas/__init__.py
"""Veritas: cross-validated crypto market data pipeline."""

__version__ = "0.1.0"
