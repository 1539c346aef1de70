"""Credit Audit Engine - Parsing Layer

This layer converts raw report text into ExtractionResult (SSOT #1).
All downstream modules MUST use ExtractionResult exclusively.
"""
from .text_parser import ReportTextExtractor, extract
from .fallback import CreditorTokenFallback, FallbackStrategy
from .normalizers import normalize_amount, normalize_date

__all__ = [
    "ReportTextExtractor",
    "extract",
    "CreditorTokenFallback",
    "FallbackStrategy",
    "normalize_amount",
    "normalize_date",
]
