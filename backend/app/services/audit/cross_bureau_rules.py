"""
Credit Audit Engine - Cross-Bureau Rules

Detects discrepancies when the same account is reported differently across
bureaus. Records are grouped by normalized creditor name + last 4 of the
account number; a group needs at least two records to disagree.
"""
from __future__ import annotations
import logging
import re
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from ...models.ssot import AccountRecord, Bureau, Finding, FindingType
from ..parsing.normalizers import parse_iso_date
from .finding_catalog import build_finding

logger = logging.getLogger(__name__)

CREDITOR_KEY_LENGTH = 10


# =============================================================================
# ACCOUNT MATCHING
# =============================================================================

def normalize_creditor_name(name: str) -> str:
    """Uppercase letters and digits only, cut to a fixed length."""
    if not name:
        return ""
    return re.sub(r"[^A-Z0-9]", "", name.upper())[:CREDITOR_KEY_LENGTH]


def create_group_key(record: AccountRecord) -> str:
    last4 = (record.account_number_last4 or "")[-4:]
    return f"{normalize_creditor_name(record.creditor_name)}_{last4}"


def group_records(records: Iterable[AccountRecord]) -> Dict[str, List[AccountRecord]]:
    """Group records into logical accounts, in order of first appearance."""
    groups: Dict[str, List[AccountRecord]] = {}
    for record in records:
        groups.setdefault(create_group_key(record), []).append(record)
    return groups


def display_item(record: AccountRecord, name: Optional[str] = None) -> str:
    """Display string for a logical account, e.g. "CAPITAL ONE (...1234)"."""
    return f"{name if name is not None else record.creditor_name} (...{record.account_number_last4[-4:]})"


# =============================================================================
# CROSS-BUREAU RULES
# =============================================================================

# (attribute, finding type, evidence label)
DATE_FIELD_RULES: Tuple[Tuple[str, FindingType, str], ...] = (
    ("open_date", FindingType.DATE_MISMATCH_OPEN, "Open Date"),
    ("date_of_last_activity", FindingType.DATE_MISMATCH_DLA, "DLA"),
    ("last_payment_date", FindingType.DATE_MISMATCH_PAYMENT, "Last Payment"),
    ("date_of_first_delinquency", FindingType.DATE_MISMATCH_DOFD, "DOFD"),
)


class CrossBureauRules:
    """
    Rules that compare the records of one logical account.

    Each check returns at most one finding per group.
    """

    def __init__(self, date_mismatch_days: int = 30):
        self.date_mismatch_days = date_mismatch_days

    def check_group(self, records: Sequence[AccountRecord]) -> List[Finding]:
        """Run every rule against one group, in catalog order."""
        if len(records) < 2:
            return []

        findings: List[Finding] = []
        for attribute, finding_type, label in DATE_FIELD_RULES:
            finding = self.check_date_mismatch(records, attribute, finding_type, label)
            if finding:
                findings.append(finding)

        for check in (self.check_status_mismatch, self.check_limit_mismatch):
            finding = check(records)
            if finding:
                findings.append(finding)

        return findings

    def check_date_mismatch(
        self,
        records: Sequence[AccountRecord],
        attribute: str,
        finding_type: FindingType,
        label: str,
    ) -> Optional[Finding]:
        """
        Compare one date field pairwise across all reporting bureaus.

        The first pair further apart than the threshold wins; later pairs in
        the same group are not reported.
        """
        dated: List[Tuple[Bureau, str, int]] = []
        for record in records:
            raw = getattr(record, attribute, "") or ""
            parsed = parse_iso_date(raw)
            if parsed is not None:
                dated.append((record.bureau, raw, parsed.toordinal()))

        for i, (first_bureau, first_raw, first_day) in enumerate(dated):
            for second_bureau, second_raw, second_day in dated[i + 1:]:
                diff = abs(first_day - second_day)
                if diff > self.date_mismatch_days:
                    return build_finding(
                        finding_type,
                        display_item(records[0]),
                        [first_bureau, second_bureau],
                        (
                            f'[Evidence: {first_bureau.value} reports {label} "{first_raw}" vs '
                            f'{second_bureau.value} reports "{second_raw}" - {diff} day difference]'
                        ),
                    )
        return None

    @staticmethod
    def check_status_mismatch(records: Sequence[AccountRecord]) -> Optional[Finding]:
        """Statuses compared as lowercase letters only; every bureau is listed."""
        statuses = [(r.bureau, r.status.strip()) for r in records if r.status and r.status.strip()]
        if len(statuses) < 2:
            return None

        normalized = {re.sub(r"[^a-z]", "", status.lower()) for _, status in statuses}
        if len(normalized) <= 1:
            return None

        conflict = " vs ".join(f'{bureau.value}: "{status}"' for bureau, status in statuses)
        return build_finding(
            FindingType.STATUS_MISMATCH,
            display_item(records[0]),
            [bureau for bureau, _ in statuses],
            f"[Evidence: Status conflict - {conflict}]",
        )

    @staticmethod
    def check_limit_mismatch(records: Sequence[AccountRecord]) -> Optional[Finding]:
        """Reported limits differ and at least one is positive. None is "not reported"."""
        limits = [(r.bureau, r.credit_limit) for r in records if r.credit_limit is not None]
        if len(limits) < 2:
            return None
        if not any(limit > 0 for _, limit in limits):
            return None
        if len({limit for _, limit in limits}) <= 1:
            return None

        conflict = " vs ".join(f"{bureau.value}: ${limit}" for bureau, limit in limits)
        return build_finding(
            FindingType.LIMIT_MISMATCH,
            display_item(records[0]),
            [bureau for bureau, _ in limits],
            f"[Evidence: Credit limit mismatch - {conflict}]",
        )


def audit_cross_bureau(
    tradelines: Iterable[AccountRecord], date_mismatch_days: int = 30
) -> List[Finding]:
    """Group tradelines and run every cross-bureau rule, group by group."""
    rules = CrossBureauRules(date_mismatch_days=date_mismatch_days)
    findings: List[Finding] = []
    groups = group_records(tradelines)
    for key, records in groups.items():
        group_findings = rules.check_group(records)
        if group_findings:
            logger.debug(f"Group {key}: {len(group_findings)} cross-bureau findings")
        findings.extend(group_findings)

    logger.info(f"Cross-bureau analysis of {len(groups)} groups found {len(findings)} discrepancies")
    return findings
