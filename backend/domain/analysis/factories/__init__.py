"""Factories for analysis records."""

from domain.analysis.factories.analysis_result_factory import AnalysisResultFactory

__all__ = ["AnalysisResultFactory"]
