"""
Credit Audit Engine - Collection Classification

Decides, once, whether an account is a collection. Downstream rules read the
result from AccountRecord.is_collection and never reclassify.
"""
from __future__ import annotations
import re

# Debt buyers and collection agencies seen on bureau reports
COLLECTION_AGENCY_FRAGMENTS = [
    "LVNV", "MIDLAND", "PORTFOLIO", "CAVALRY", "IC SYSTEM", "ERC", "RECEIVABLES?",
    "RECOVERY", "ENCORE", "CONVERGENT", "TRANSWORLD", "JEFFERSON CAPITAL",
    "CREDIT COLLECTION", "COLL SVCS", "RESURGENT", "PRA",
]

COLLECTION_AGENCY_RE = re.compile(
    r"\b(?:" + "|".join(COLLECTION_AGENCY_FRAGMENTS) + r")\b", re.IGNORECASE
)
COLLECTION_TOKEN_RE = re.compile(r"collection", re.IGNORECASE)
MEDICAL_RE = re.compile(r"medical", re.IGNORECASE)


def is_collection_account(creditor_name: str, block_text: str = "") -> bool:
    """Creditor or block mentions "collection", or the creditor is a known agency."""
    if COLLECTION_TOKEN_RE.search(creditor_name or "") or COLLECTION_TOKEN_RE.search(block_text or ""):
        return True
    return bool(COLLECTION_AGENCY_RE.search(creditor_name or ""))


def is_medical_debt(creditor_name: str) -> bool:
    return bool(MEDICAL_RE.search(creditor_name or ""))
