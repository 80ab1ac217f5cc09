"""
ML-powered analytics for migration burndowns.

Modules:
- TrendProjector: linear regression burn rate, projected completion and confidence
"""

from .trend_projector import TrendProjector, confidence_band, determine_trend, extract_observations

__all__ = ["TrendProjector", "determine_trend", "extract_observations", "confidence_band"]
