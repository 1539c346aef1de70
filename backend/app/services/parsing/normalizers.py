"""
Credit Audit Engine - Value Normalizers

Turn raw report tokens into the comparable forms stored on AccountRecord.
Nothing here raises: unusable input degrades to "" (dates) or None (amounts).
"""
from __future__ import annotations
import re
from datetime import date
from typing import Optional


# =============================================================================
# CONSTANTS
# =============================================================================

PLACEHOLDER_TOKENS = {"", "--", "-", "—", "–", "N/A", "NA", "NOT REPORTED", "NOTREPORTED", "NONE"}

NOT_REPORTED_RE = re.compile(r"not\s+reported", re.IGNORECASE)
FULL_DATE_RE = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})$")
MONTH_YEAR_RE = re.compile(r"^(\d{1,2})/(\d{4})$")
AMOUNT_RE = re.compile(r"^-?\d+(?:\.\d+)?$")


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def clean_text(text: Optional[str]) -> str:
    """Collapse whitespace and strip."""
    if not text:
        return ""
    return re.sub(r"\s+", " ", text).strip()


def is_placeholder(value: Optional[str]) -> bool:
    """True when a column value means "this bureau does not report it"."""
    cleaned = clean_text(value)
    if cleaned.upper() in PLACEHOLDER_TOKENS:
        return True
    return bool(re.fullmatch(r"[-–—]+", cleaned))


def mark_not_reported(text: str) -> str:
    """Rewrite multi-word "Not Reported" cells as a single placeholder token."""
    return NOT_REPORTED_RE.sub("--", text)


def normalize_date(value: Optional[str]) -> str:
    """
    Normalize a report date to YYYY-MM-DD.

    Accepts M/D/YYYY and M/YYYY (first day of the month). Anything else,
    including impossible calendar dates, is "" (unknown).
    """
    cleaned = clean_text(value)
    if not cleaned:
        return ""

    match = FULL_DATE_RE.match(cleaned)
    if match:
        month, day, year = (int(part) for part in match.groups())
    else:
        match = MONTH_YEAR_RE.match(cleaned)
        if not match:
            return ""
        month, year = (int(part) for part in match.groups())
        day = 1

    try:
        return date(year, month, day).isoformat()
    except ValueError:
        return ""


def parse_iso_date(value: Optional[str]) -> Optional[date]:
    """Parse a normalized YYYY-MM-DD string; None when empty or malformed."""
    if not value:
        return None
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def normalize_amount(value: Optional[str]) -> Optional[int]:
    """
    Parse a money string to whole dollars.

    "$1,234" -> 1234, "--" -> None, "" -> None. None means "not reported",
    which is different from a reported 0.
    """
    if value is None or is_placeholder(value):
        return None

    cleaned = re.sub(r"[$,\s]", "", value)
    if not AMOUNT_RE.match(cleaned):
        return None
    return int(float(cleaned))


def account_last4(value: Optional[str]) -> str:
    """Last four digits of a (possibly masked) account number."""
    if not value or is_placeholder(value):
        return ""
    return re.sub(r"\D", "", value)[-4:]
