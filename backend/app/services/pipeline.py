"""
Credit Audit Engine - Audit Pipeline

Raw text → Extractor → ExtractionResult → Detector → AuditReport.
Stateless: nothing is stored between calls.
"""
from __future__ import annotations
import logging
from datetime import date
from typing import Any, Optional

from ..config import AuditSettings, get_settings
from ..models.ssot import AuditReport, SeveritySummary
from .audit import DiscrepancyDetector
from .parsing import ReportTextExtractor

logger = logging.getLogger(__name__)


class ReportTextUnavailableError(ValueError):
    """The caller supplied no usable report text."""


def run_audit(
    raw_text: Any,
    as_of: Optional[date] = None,
    settings: Optional[AuditSettings] = None,
) -> AuditReport:
    """
    Extract records from report text and detect findings.

    Raises:
        ReportTextUnavailableError: text is None, not a string, or blank.
            A readable report with nothing wrong returns zero findings instead.
    """
    if raw_text is None:
        raise ReportTextUnavailableError("Report text is missing")
    if not isinstance(raw_text, str):
        raise ReportTextUnavailableError(
            f"Report text must be a string, got {type(raw_text).__name__}"
        )
    if not raw_text.strip():
        raise ReportTextUnavailableError("Report text is empty")

    settings = settings or get_settings()
    extraction = ReportTextExtractor(settings=settings).extract(raw_text)
    findings = DiscrepancyDetector(settings=settings).detect(extraction, as_of=as_of)
    summary = SeveritySummary.from_findings(findings)

    logger.info(
        f"Audit complete: {extraction.total_accounts} records, {summary.total} findings "
        f"({summary.critical} critical, {summary.high} high)"
    )
    return AuditReport(extraction=extraction, findings=tuple(findings), summary=summary)
