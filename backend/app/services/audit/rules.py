"""
Credit Audit Engine - Audit Rules

Deterministic rule-based checks on single records.

Rule Categories:
1. Collection Rules - required fields and reporting limits on collection accounts
2. Inquiry Rules - hard inquiries past their reporting period
"""
from __future__ import annotations
import logging
from datetime import date
from typing import List, Optional

from dateutil.relativedelta import relativedelta

from ...models.ssot import AccountRecord, Client, Finding, FindingType, Inquiry
from ..parsing.normalizers import parse_iso_date
from .cross_bureau_rules import display_item
from .finding_catalog import MEDICAL_DEBT_RESTRICTED_STATES, build_finding

logger = logging.getLogger(__name__)

# FCRA §605(c): 7 years from DOFD, plus the 180-day commencement period
REPORTING_PERIOD = relativedelta(years=7, days=180)


def _collector(record: AccountRecord) -> str:
    return record.collector_name or record.creditor_name


# =============================================================================
# COLLECTION RULES
# =============================================================================

class CollectionRules:
    """
    Rules for collection accounts, checked one bureau record at a time.
    """

    @staticmethod
    def check_missing_original_creditor(record: AccountRecord) -> List[Finding]:
        """A collector must identify whose debt it is collecting."""
        if (record.original_creditor or "").strip():
            return []

        collector = _collector(record)
        return [build_finding(
            FindingType.MISSING_OC,
            display_item(record, collector),
            [record.bureau],
            f'[Evidence: Collection "{collector}" on {record.bureau.value} does not identify Original Creditor]',
        )]

    @staticmethod
    def check_missing_dofd(record: AccountRecord) -> List[Finding]:
        """
        Check for a missing Date of First Delinquency.

        FCRA §623(a)(2) requires DOFD; without it the 7-year period cannot be
        determined.
        """
        if (record.date_of_first_delinquency or "").strip():
            return []

        collector = _collector(record)
        return [build_finding(
            FindingType.MISSING_DOFD,
            display_item(record, collector),
            [record.bureau],
            f'[Evidence: Collection "{collector}" on {record.bureau.value} missing DOFD - required per FCRA §623(a)(2)]',
        )]

    @staticmethod
    def check_reporting_expired(record: AccountRecord, as_of: date) -> List[Finding]:
        """Collection still reported after DOFD + 7 years + 180 days."""
        dofd = parse_iso_date(record.date_of_first_delinquency)
        if dofd is None:
            return []

        expires = dofd + REPORTING_PERIOD
        if as_of <= expires:
            return []

        collector = _collector(record)
        return [build_finding(
            FindingType.REPORTING_EXPIRED,
            display_item(record, collector),
            [record.bureau],
            (
                f'[Evidence: Collection "{collector}" on {record.bureau.value} has DOFD '
                f'"{record.date_of_first_delinquency}" - reporting period ended {expires.isoformat()}]'
            ),
        )]

    @staticmethod
    def check_medical_debt_restricted(record: AccountRecord, client: Optional[Client]) -> List[Finding]:
        state = (client.state if client else "").upper()
        if not record.is_medical_debt or state not in MEDICAL_DEBT_RESTRICTED_STATES:
            return []

        collector = _collector(record)
        return [build_finding(
            FindingType.MEDICAL_DEBT_RESTRICTED,
            display_item(record, collector),
            [record.bureau],
            f'[Evidence: Medical collection "{collector}" on {record.bureau.value} reported for a consumer in {state}]',
        )]

    @classmethod
    def check_all(cls, record: AccountRecord, client: Optional[Client], as_of: date) -> List[Finding]:
        findings: List[Finding] = []
        findings.extend(cls.check_missing_original_creditor(record))
        findings.extend(cls.check_missing_dofd(record))
        findings.extend(cls.check_reporting_expired(record, as_of))
        findings.extend(cls.check_medical_debt_restricted(record, client))
        return findings


# =============================================================================
# INQUIRY RULES
# =============================================================================

class InquiryRules:
    """Hard inquiries may be reported for two years."""

    @staticmethod
    def check_expired_inquiry(inquiry: Inquiry, as_of: date, max_age_days: int = 730) -> List[Finding]:
        if (inquiry.inquiry_type or "").lower() != "hard":
            return []

        inquiry_date = parse_iso_date(inquiry.inquiry_date)
        if inquiry_date is None:
            return []

        age_days = (as_of - inquiry_date).days
        if age_days <= max_age_days:
            return []

        return [build_finding(
            FindingType.INQUIRY_EXPIRED,
            inquiry.creditor_name,
            [inquiry.bureau],
            f'[Evidence: Hard inquiry dated "{inquiry.inquiry_date}" is over 2 years old ({age_days} days)]',
        )]
