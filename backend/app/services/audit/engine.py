"""
Credit Audit Engine - Discrepancy Detector

Main orchestrator that runs all audit rules against an ExtractionResult.
Output is an ordered List[Finding] (SSOT #2) - downstream modules CANNOT re-audit.
"""
from __future__ import annotations
import logging
from collections.abc import Mapping
from dataclasses import replace
from datetime import date
from typing import Any, List, Optional

from ...config import AuditSettings, get_settings
from ...models.ssot import Client, Finding
from .cross_bureau_rules import audit_cross_bureau
from .rules import CollectionRules, InquiryRules

logger = logging.getLogger(__name__)


def _bundle_part(bundle: Any, name: str, default: Any = ()) -> Any:
    """Read a bundle member from an ExtractionResult-like object or a mapping."""
    if bundle is None:
        return default
    if isinstance(bundle, Mapping):
        value = bundle.get(name, default)
    else:
        value = getattr(bundle, name, default)
    return default if value is None else value


class DiscrepancyDetector:
    """
    Runs every rule against a record bundle.

    This is the ONLY place where findings are computed. Detection is pure:
    the same bundle and as_of always give the same findings, in the same order.
    """

    def __init__(self, settings: Optional[AuditSettings] = None):
        self.settings = settings or get_settings()

    def detect(self, bundle: Any, as_of: Optional[date] = None) -> List[Finding]:
        """
        Detect findings in a record bundle.

        Args:
            bundle: ExtractionResult (SSOT #1), or anything exposing client,
                tradelines, collections and inquiries
            as_of: evaluation date for time-based rules; defaults to today

        Returns:
            Findings numbered from 1: tradeline groups first, then
            collections, then inquiries
        """
        as_of = as_of or date.today()
        client = _bundle_part(bundle, "client", None) or Client()

        findings: List[Finding] = []
        findings.extend(audit_cross_bureau(
            _bundle_part(bundle, "tradelines"),
            date_mismatch_days=self.settings.date_mismatch_days,
        ))

        for record in _bundle_part(bundle, "collections"):
            findings.extend(CollectionRules.check_all(record, client, as_of))

        for inquiry in _bundle_part(bundle, "inquiries"):
            findings.extend(InquiryRules.check_expired_inquiry(
                inquiry, as_of, max_age_days=self.settings.inquiry_max_age_days
            ))

        numbered = [replace(finding, id=index) for index, finding in enumerate(findings, start=1)]

        logger.info(f"Detection complete: {len(numbered)} findings (as of {as_of.isoformat()})")
        return numbered


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def detect(
    bundle: Any,
    as_of: Optional[date] = None,
    settings: Optional[AuditSettings] = None,
) -> List[Finding]:
    """
    Factory function to detect findings in an extracted report.

    Args:
        bundle: ExtractionResult (SSOT #1) from parsing layer
        as_of: evaluation date; defaults to today

    Returns:
        List[Finding] (SSOT #2)
    """
    return DiscrepancyDetector(settings=settings).detect(bundle, as_of=as_of)
