"""
Credit Audit Engine - Single Source of Truth Models

These models are the ONLY data structures passed between the pipeline stages.
No stage may reach back into raw report text once extraction has finished.

Raw text → Extractor → ExtractionResult (SSOT #1)
ExtractionResult → Detector → List[Finding] (SSOT #2)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple


# =============================================================================
# ENUMS
# =============================================================================

class Bureau(str, Enum):
    """The three reporting agencies, in report column order."""
    TU = "TU"
    EX = "EX"
    EQ = "EQ"

    @property
    def display_name(self) -> str:
        return BUREAU_DISPLAY_NAMES[self]

    @classmethod
    def from_label(cls, label: Optional[str]) -> Optional["Bureau"]:
        """Resolve a bureau from a code ("EX") or a name ("Experian")."""
        if not label:
            return None
        cleaned = label.strip().upper()
        for bureau in cls:
            if cleaned == bureau.value or cleaned == BUREAU_DISPLAY_NAMES[bureau].upper():
                return bureau
        return None


BUREAU_DISPLAY_NAMES = {
    Bureau.TU: "TransUnion",
    Bureau.EX: "Experian",
    Bureau.EQ: "Equifax",
}

BUREAU_ORDER: Tuple[Bureau, ...] = (Bureau.TU, Bureau.EX, Bureau.EQ)


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class FindingType(str, Enum):
    # Cross-bureau mismatches
    DATE_MISMATCH_OPEN = "DATE_MISMATCH_OPEN"
    DATE_MISMATCH_DLA = "DATE_MISMATCH_DLA"
    DATE_MISMATCH_PAYMENT = "DATE_MISMATCH_PAYMENT"
    DATE_MISMATCH_DOFD = "DATE_MISMATCH_DOFD"
    STATUS_MISMATCH = "STATUS_MISMATCH"
    LIMIT_MISMATCH = "LIMIT_MISMATCH"

    # Collection completeness
    MISSING_OC = "MISSING_OC"
    MISSING_DOFD = "MISSING_DOFD"

    # Expired / restricted items
    REPORTING_EXPIRED = "REPORTING_EXPIRED"
    MEDICAL_DEBT_RESTRICTED = "MEDICAL_DEBT_RESTRICTED"
    INQUIRY_EXPIRED = "INQUIRY_EXPIRED"


class ExtractionMode(str, Enum):
    """Confidence of the extraction path that produced a record."""
    STRUCTURED = "structured"
    FALLBACK = "fallback"


# =============================================================================
# SSOT #1: EXTRACTION RESULT (Output of Parsing Layer)
# =============================================================================

@dataclass(frozen=True)
class Client:
    """Consumer identity pulled from the report header."""
    name: str = ""
    state: str = ""
    flagged_for_fraud: bool = False


@dataclass(frozen=True)
class AccountRecord:
    """
    One (logical account x bureau) row.

    A record never mixes values from two bureaus. Dates are ISO strings or ""
    when unknown; credit_limit is None when the bureau does not report it.
    """
    id: str
    creditor_name: str
    bureau: Bureau
    account_number_last4: str = ""
    status: str = ""

    open_date: str = ""
    date_of_last_activity: str = ""
    last_payment_date: str = ""
    date_of_first_delinquency: str = ""

    credit_limit: Optional[int] = None
    current_balance: int = 0

    is_collection: bool = False

    # Collection-only fields
    collector_name: str = ""
    original_creditor: str = ""
    is_medical_debt: bool = False

    extraction_mode: ExtractionMode = ExtractionMode.STRUCTURED


@dataclass(frozen=True)
class Inquiry:
    """Credit inquiry."""
    id: str
    creditor_name: str
    bureau: Bureau = Bureau.TU
    inquiry_date: str = ""
    inquiry_type: str = ""  # hard/soft


@dataclass(frozen=True)
class ExtractionResult:
    """
    SSOT #1: everything the detector is allowed to see.

    mode is FALLBACK when the accounts are low-confidence guesses rather than
    values read from labelled report fields.
    """
    client: Client = field(default_factory=Client)
    tradelines: Tuple[AccountRecord, ...] = ()
    collections: Tuple[AccountRecord, ...] = ()
    inquiries: Tuple[Inquiry, ...] = ()
    mode: ExtractionMode = ExtractionMode.STRUCTURED

    @property
    def total_accounts(self) -> int:
        return len(self.tradelines) + len(self.collections)


# =============================================================================
# SSOT #2: FINDINGS (Output of Discrepancy Detector)
# =============================================================================

@dataclass(frozen=True)
class Finding:
    """
    SSOT for a single detected issue.

    Letter and summary generators MUST use this object directly. The evidence
    string carries the literal compared values so no further lookup is needed.
    """
    id: int
    type: FindingType
    item: str
    bureaus_affected: Tuple[Bureau, ...]
    severity: Severity
    legal_basis: str
    evidence: str
    action: str
    impact_score: int
    timeline: str = "30-45 days"
    claim_indicator: bool = False
    cannot_confirm: str = ""
    documentation_needed: Tuple[str, ...] = ()


@dataclass(frozen=True)
class SeveritySummary:
    total: int = 0
    critical: int = 0
    high: int = 0
    medium: int = 0
    low: int = 0

    @classmethod
    def from_findings(cls, findings: List[Finding]) -> "SeveritySummary":
        counts = {severity: 0 for severity in Severity}
        for finding in findings:
            counts[finding.severity] += 1
        return cls(
            total=len(findings),
            critical=counts[Severity.CRITICAL],
            high=counts[Severity.HIGH],
            medium=counts[Severity.MEDIUM],
            low=counts[Severity.LOW],
        )


@dataclass(frozen=True)
class AuditReport:
    """Extraction + detection output for one report."""
    extraction: ExtractionResult
    findings: Tuple[Finding, ...] = ()
    summary: SeveritySummary = field(default_factory=SeveritySummary)
