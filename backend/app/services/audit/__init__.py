"""Credit Audit Engine - Discrepancy Detector

This layer audits ExtractionResult and outputs List[Finding] (SSOT #2).
All findings are computed here - downstream modules CANNOT re-audit.
"""
from .engine import DiscrepancyDetector, detect
from .rules import CollectionRules, InquiryRules
from .cross_bureau_rules import (
    CrossBureauRules,
    audit_cross_bureau,
    group_records,
    normalize_creditor_name,
)
from .finding_catalog import FINDING_CATALOG, FindingSpec, build_finding

__all__ = [
    "DiscrepancyDetector",
    "detect",
    "CollectionRules",
    "InquiryRules",
    "CrossBureauRules",
    "audit_cross_bureau",
    "group_records",
    "normalize_creditor_name",
    "FINDING_CATALOG",
    "FindingSpec",
    "build_finding",
]
