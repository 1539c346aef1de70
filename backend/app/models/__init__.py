"""Credit Audit Engine - Data Models"""
from .ssot import (
    # Enums
    Bureau, Severity, FindingType, ExtractionMode, BUREAU_ORDER,
    # SSOT #1: Extraction Output
    Client, AccountRecord, Inquiry, ExtractionResult,
    # SSOT #2: Detection Output
    Finding, SeveritySummary, AuditReport,
)

__all__ = [
    "Bureau", "Severity", "FindingType", "ExtractionMode", "BUREAU_ORDER",
    "Client", "AccountRecord", "Inquiry", "ExtractionResult",
    "Finding", "SeveritySummary", "AuditReport",
]
