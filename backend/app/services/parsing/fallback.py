"""
Credit Audit Engine - Low-Confidence Fallback Extraction

Used only when no labelled account block was found. Candidate creditors are
all-caps token runs; dates are paired with them round-robin in document
order. Every record produced here is tagged ExtractionMode.FALLBACK so
consumers can tell guesses from values read off labelled fields.
"""
from __future__ import annotations
import logging
import re
from typing import List, Protocol, Sequence

from ...models.ssot import AccountRecord, BUREAU_ORDER, Client, ExtractionMode
from .classification import is_collection_account, is_medical_debt
from .normalizers import normalize_date
from .records import RecordIdSequence, build_account_record

logger = logging.getLogger(__name__)


class FallbackStrategy(Protocol):
    def extract(
        self, lines: Sequence[str], client: Client, ids: RecordIdSequence
    ) -> List[AccountRecord]:
        """Build candidate accounts from text with no recognizable blocks."""


CAPS_RUN_RE = re.compile(r"\b[A-Z][A-Z0-9&.'\-]*(?: [A-Z][A-Z0-9&.'\-]*)*\b")
DATE_TOKEN_RE = re.compile(r"\b\d{1,2}/(?:\d{1,2}/)?\d{4}\b")

# Report boilerplate that is all-caps but never a creditor
NON_CREDITOR_WORDS = {
    "TRANSUNION", "EXPERIAN", "EQUIFAX", "TU", "EX", "EQ",
    "CREDIT", "REPORT", "PAGE", "ACCOUNT", "ACCOUNTS", "STATUS", "OPEN", "CLOSED",
    "PERSONAL", "INFORMATION", "SUMMARY", "INQUIRIES", "INQUIRY", "PUBLIC", "RECORDS",
    "NAME", "ADDRESS", "DATE", "BALANCE", "LIMIT", "PAYMENT", "HISTORY", "OK", "N/A",
    "FRAUD", "ALERT", "SCORE", "DOB", "SSN",
}


class CreditorTokenFallback:
    """Pairs all-caps creditor-like runs with dates found in the text."""

    def __init__(self, max_candidates: int = 25):
        self.max_candidates = max_candidates

    def extract(
        self, lines: Sequence[str], client: Client, ids: RecordIdSequence
    ) -> List[AccountRecord]:
        candidates = self._candidate_creditors(lines, client)
        if not candidates:
            return []

        # Raw tokens; build_account_record normalizes them
        dates = [token for line in lines for token in DATE_TOKEN_RE.findall(line) if normalize_date(token)]

        records: List[AccountRecord] = []
        for index, creditor in enumerate(candidates):
            open_date = dates[index % len(dates)] if dates else ""
            is_collection = is_collection_account(creditor, creditor)
            for bureau in BUREAU_ORDER:
                records.append(build_account_record(
                    ids.next_id(is_collection),
                    creditor,
                    bureau,
                    {"open_date": open_date} if open_date else {},
                    is_collection=is_collection,
                    is_medical=is_medical_debt(creditor),
                    mode=ExtractionMode.FALLBACK,
                ))

        logger.warning(
            f"Fallback extraction produced {len(candidates)} low-confidence candidate accounts"
        )
        return records

    def _candidate_creditors(self, lines: Sequence[str], client: Client) -> List[str]:
        seen: List[str] = []
        client_name = client.name.upper()
        for line in lines:
            for run in CAPS_RUN_RE.findall(line):
                candidate = run.strip()
                if not self._is_creditor_like(candidate) or candidate == client_name:
                    continue
                if candidate not in seen:
                    seen.append(candidate)
                if len(seen) >= self.max_candidates:
                    return seen
        return seen

    @staticmethod
    def _is_creditor_like(candidate: str) -> bool:
        words = candidate.split()
        if all(word in NON_CREDITOR_WORDS for word in words):
            return False
        letters = sum(ch.isalpha() for ch in candidate)
        if len(words) >= 2:
            return letters >= 4
        return letters >= 4 and candidate.isalpha()
