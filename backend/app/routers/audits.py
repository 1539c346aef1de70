"""
Credit Audit Engine - Audits API Router

Runs the extraction + detection pipeline on submitted report text.
Nothing is persisted; every request is audited from scratch.
"""
from __future__ import annotations
import logging
from dataclasses import asdict
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from ..models.ssot import AuditReport
from ..services.audit import FINDING_CATALOG
from ..services.pipeline import ReportTextUnavailableError, run_audit

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/audits", tags=["audits"])


# =============================================================================
# PYDANTIC MODELS FOR API
# =============================================================================

class AuditRequest(BaseModel):
    text: Optional[str] = None
    as_of: Optional[date] = None


class ClientResponse(BaseModel):
    name: str
    state: str
    flagged_for_fraud: bool


class AccountRecordResponse(BaseModel):
    id: str
    creditor_name: str
    bureau: str
    account_number_last4: str
    status: str
    open_date: str
    date_of_last_activity: str
    last_payment_date: str
    date_of_first_delinquency: str
    credit_limit: Optional[int] = None
    current_balance: int
    is_collection: bool
    collector_name: str = ""
    original_creditor: str = ""
    is_medical_debt: bool = False
    extraction_mode: str


class InquiryResponse(BaseModel):
    id: str
    creditor_name: str
    bureau: str
    inquiry_date: str
    inquiry_type: str


class FindingResponse(BaseModel):
    id: int
    type: str
    item: str
    bureaus_affected: List[str]
    severity: str
    legal_basis: str
    evidence: str
    action: str
    impact_score: int
    timeline: str
    claim_indicator: bool
    cannot_confirm: str = ""
    documentation_needed: List[str] = []


class SummaryResponse(BaseModel):
    total: int
    critical: int
    high: int
    medium: int
    low: int


class AuditResponse(BaseModel):
    mode: str
    client: ClientResponse
    tradelines: List[AccountRecordResponse]
    collections: List[AccountRecordResponse]
    inquiries: List[InquiryResponse]
    findings: List[FindingResponse]
    summary: SummaryResponse


class FindingTypeResponse(BaseModel):
    type: str
    label: str
    severity: str
    legal_basis: str
    impact_score: int
    claim_indicator: bool


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def serialize_audit(report: AuditReport) -> dict:
    """Convert AuditReport dataclass to the JSON-serializable response shape."""
    def convert(obj):
        if isinstance(obj, dict):
            return {k: convert(v) for k, v in obj.items()}
        elif isinstance(obj, (list, tuple)):
            return [convert(i) for i in obj]
        elif isinstance(obj, Enum):
            return obj.value
        elif isinstance(obj, (date, datetime)):
            return obj.isoformat()
        return obj

    data = convert(asdict(report))
    extraction = data["extraction"]
    return {
        "mode": extraction["mode"],
        "client": extraction["client"],
        "tradelines": extraction["tradelines"],
        "collections": extraction["collections"],
        "inquiries": extraction["inquiries"],
        "findings": data["findings"],
        "summary": data["summary"],
    }


# =============================================================================
# API ENDPOINTS
# =============================================================================

@router.post("", response_model=AuditResponse)
async def create_audit(request: AuditRequest):
    """Audit one report's text and return records, findings and a severity summary."""
    try:
        report = run_audit(request.text, as_of=request.as_of)
    except ReportTextUnavailableError as e:
        logger.warning(f"Rejected audit request: {e}")
        raise HTTPException(status_code=422, detail=str(e))

    return serialize_audit(report)


@router.get("/finding-types", response_model=List[FindingTypeResponse])
async def list_finding_types():
    """Every finding type the detector can emit."""
    return [
        FindingTypeResponse(
            type=finding_type.value,
            label=spec.label,
            severity=spec.severity.value,
            legal_basis=spec.legal_basis,
            impact_score=spec.impact_score,
            claim_indicator=spec.claim_indicator,
        )
        for finding_type, spec in FINDING_CATALOG.items()
    ]
