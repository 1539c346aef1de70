"""
Credit Audit Engine - Finding Catalog

Static metadata for every finding type: label, severity, legal basis,
recommended action and impact. Rules look their finding up here so the
severity and citation of a type can never drift between rules.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, Iterable, List, Tuple

from ...models.ssot import Bureau, Finding, FindingType, Severity


@dataclass(frozen=True)
class FindingSpec:
    label: str
    severity: Severity
    legal_basis: str
    action: str
    impact_score: int
    claim_indicator: bool = False
    cannot_confirm: str = ""
    documentation_needed: Tuple[str, ...] = ()


DEFAULT_TIMELINE = "30-45 days"

# States restricting medical debt on consumer reports
MEDICAL_DEBT_RESTRICTED_STATES = frozenset({
    "CA", "CO", "CT", "DE", "IL", "ME", "MD", "MN", "NJ", "NY", "OR", "RI", "VT", "VA", "WA",
})

FINDING_CATALOG: Dict[FindingType, FindingSpec] = {
    FindingType.DATE_MISMATCH_OPEN: FindingSpec(
        label="Open Date Mismatch",
        severity=Severity.HIGH,
        legal_basis="FCRA §611(a)",
        action="Dispute for investigation of conflicting open dates",
        impact_score=7,
    ),
    FindingType.DATE_MISMATCH_DLA: FindingSpec(
        label="Date of Last Activity Mismatch",
        severity=Severity.HIGH,
        legal_basis="FCRA §611(a)",
        action="Dispute for investigation of conflicting activity dates",
        impact_score=7,
    ),
    FindingType.DATE_MISMATCH_PAYMENT: FindingSpec(
        label="Last Payment Date Mismatch",
        severity=Severity.MEDIUM,
        legal_basis="FCRA §611(a)",
        action="Dispute for investigation of conflicting payment dates",
        impact_score=5,
    ),
    FindingType.DATE_MISMATCH_DOFD: FindingSpec(
        label="DOFD Mismatch",
        severity=Severity.CRITICAL,
        legal_basis="FCRA §623(a)(2), §605(c)",
        action="Dispute for investigation of conflicting delinquency dates (possible re-aging)",
        impact_score=9,
        claim_indicator=True,
        cannot_confirm="Cannot confirm the 7-year reporting period while bureaus disagree on DOFD",
        documentation_needed=("Original creditor records showing delinquency date",),
    ),
    FindingType.STATUS_MISMATCH: FindingSpec(
        label="Account Status Mismatch",
        severity=Severity.HIGH,
        legal_basis="FCRA §611(a)",
        action="Dispute for investigation of conflicting account statuses",
        impact_score=8,
    ),
    FindingType.LIMIT_MISMATCH: FindingSpec(
        label="Credit Limit Mismatch",
        severity=Severity.LOW,
        legal_basis="FCRA §611(a)",
        action="Dispute for correction of credit limit (affects utilization ratio)",
        impact_score=4,
    ),
    FindingType.MISSING_OC: FindingSpec(
        label="Missing Original Creditor",
        severity=Severity.MEDIUM,
        legal_basis="FDCPA §809(a)",
        action="Dispute for incomplete reporting - Original Creditor required",
        impact_score=6,
        claim_indicator=True,
        cannot_confirm="Cannot confirm debt ownership chain without Original Creditor",
        documentation_needed=("Debt validation letter", "Original creditor documentation"),
    ),
    FindingType.MISSING_DOFD: FindingSpec(
        label="Missing Date of First Delinquency",
        severity=Severity.HIGH,
        legal_basis="FCRA §623(a)(2)",
        action="Dispute for incomplete reporting - DOFD required for 7-year calculation",
        impact_score=8,
        claim_indicator=True,
        cannot_confirm="Cannot confirm 7-year reporting period without DOFD",
        documentation_needed=("Original creditor records showing delinquency date",),
    ),
    FindingType.REPORTING_EXPIRED: FindingSpec(
        label="Reporting Period Expired",
        severity=Severity.CRITICAL,
        legal_basis="FCRA §605(a)",
        action="Dispute for deletion - item exceeds the 7-year reporting period",
        impact_score=10,
        claim_indicator=True,
        documentation_needed=("Credit report pages showing the DOFD",),
    ),
    FindingType.MEDICAL_DEBT_RESTRICTED: FindingSpec(
        label="Restricted Medical Debt",
        severity=Severity.HIGH,
        legal_basis="State medical debt reporting law",
        action="Dispute for deletion - state law restricts reporting of medical debt",
        impact_score=7,
        claim_indicator=True,
        documentation_needed=("Proof of residence",),
    ),
    FindingType.INQUIRY_EXPIRED: FindingSpec(
        label="Expired Hard Inquiry",
        severity=Severity.LOW,
        legal_basis="FCRA §605(a)(3)",
        action="Dispute for removal - inquiry exceeds 2-year reporting period",
        impact_score=3,
    ),
}


def unique_bureaus(bureaus: Iterable[Bureau]) -> Tuple[Bureau, ...]:
    """Bureau codes in first-seen order, without repeats."""
    ordered: List[Bureau] = []
    for bureau in bureaus:
        if bureau not in ordered:
            ordered.append(bureau)
    return tuple(ordered)


def build_finding(
    finding_type: FindingType,
    item: str,
    bureaus: Iterable[Bureau],
    evidence: str,
) -> Finding:
    """
    Build a Finding from catalog metadata.

    The id is left at 0; the engine numbers findings in detection order.
    """
    spec = FINDING_CATALOG[finding_type]
    return Finding(
        id=0,
        type=finding_type,
        item=item,
        bureaus_affected=unique_bureaus(bureaus),
        severity=spec.severity,
        legal_basis=spec.legal_basis,
        evidence=evidence,
        action=spec.action,
        impact_score=spec.impact_score,
        timeline=DEFAULT_TIMELINE,
        claim_indicator=spec.claim_indicator,
        cannot_confirm=spec.cannot_confirm,
        documentation_needed=spec.documentation_needed,
    )
