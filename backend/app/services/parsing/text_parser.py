"""
Credit Audit Engine - Report Text Extractor

This extractor reads raw multi-bureau report text and outputs ExtractionResult
(SSOT #1). All downstream modules MUST use ExtractionResult - never raw text.

Blocks are found with an explicit two-state walk (OUTSIDE / IN_ACCOUNT_BLOCK):
an "Account #" line opens a block, and the next header, a "***" terminator or
a new report section closes it. Each closed block becomes one record per
bureau that reported at least one value.
"""
from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from ...config import AuditSettings, get_settings
from ...models.ssot import (
    AccountRecord, Bureau, BUREAU_ORDER, Client, ExtractionMode, ExtractionResult, Inquiry
)
from .classification import is_collection_account, is_medical_debt
from .fallback import CreditorTokenFallback, FallbackStrategy
from .field_descriptors import is_account_header, match_field, single_value
from .normalizers import clean_text, is_placeholder, normalize_date
from .records import RecordIdSequence, build_account_record

logger = logging.getLogger(__name__)


# =============================================================================
# CONSTANTS
# =============================================================================

CREDITOR_LOOKBACK_LINES = 40

NAME_RE = re.compile(
    r"^\s*(?:(?:full|consumer|client)\s+)?name\s*:?\s+(?P<name>[A-Za-z][A-Za-z .,'\-]*)",
    re.IGNORECASE,
)
STATE_ZIP_RE = re.compile(r",\s*([A-Z]{2})\s+\d{5}")
FRAUD_RE = re.compile(r"fraud", re.IGNORECASE)

PAGE_MARKER_RE = re.compile(r"\bpage\s+\d+", re.IGNORECASE)
URL_RE = re.compile(r"https?://|www\.", re.IGNORECASE)
DAYS_LATE_RE = re.compile(r"days\s+late", re.IGNORECASE)
GENERIC_LABEL_RE = re.compile(r"^[A-Za-z][A-Za-z0-9 #/&'().\-]{0,40}:")
BLOCK_TERMINATOR_RE = re.compile(r"^(?:\*{3}|inquir(?:er|ies)\b|public\s+records?\b)", re.IGNORECASE)

BUREAU_WORD_RE = re.compile(r"^(?:transunion|trans\s+union|experian|equifax|tu|ex|eq)$", re.IGNORECASE)
BUREAU_WORDS = {"transunion", "trans", "union", "experian", "equifax", "tu", "ex", "eq"}

INQUIRER_RE = re.compile(r"^\s*inquirer\s*:\s*(?P<value>.*)$", re.IGNORECASE)
INQUIRY_FIELD_RE = re.compile(r"^\s*(?P<label>date|type|bureau)\s*:\s*(?P<value>.*)$", re.IGNORECASE)


class _WalkState(Enum):
    OUTSIDE = "outside"
    IN_ACCOUNT_BLOCK = "in_account_block"


@dataclass(frozen=True)
class AccountBlock:
    """Lines of one account, header first, with the creditor resolved."""
    creditor_name: str
    lines: Tuple[str, ...]
    initial_bureau: Optional[Bureau] = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


# =============================================================================
# HELPER FUNCTIONS
# =============================================================================

def split_lines(raw_text: str) -> List[str]:
    """Split on any line-ending style."""
    return raw_text.replace("\r\n", "\n").replace("\r", "\n").split("\n")


def bureau_marker(line: str) -> Optional[Bureau]:
    """A line holding a single bureau name (one-field-per-line layouts)."""
    cleaned = clean_text(line).rstrip(":")
    if not cleaned or not BUREAU_WORD_RE.match(cleaned):
        return None
    if cleaned.upper().replace(" ", "") == "TRANSUNION":
        return Bureau.TU
    return Bureau.from_label(cleaned)


def _is_bureau_only(line: str) -> bool:
    words = [word.strip(":").lower() for word in line.split()]
    return bool(words) and all(word in BUREAU_WORDS for word in words)


def _is_creditor_candidate(line: str) -> bool:
    if not line:
        return False
    if _is_bureau_only(line):
        return False
    if PAGE_MARKER_RE.search(line) or URL_RE.search(line) or DAYS_LATE_RE.search(line):
        return False
    if BLOCK_TERMINATOR_RE.match(line):
        return False
    if match_field(line) is not None or GENERIC_LABEL_RE.match(line):
        return False
    return True


def find_creditor_line(lines: Sequence[str], header_index: int) -> Optional[int]:
    """Index of the nearest creditor-like line before an account header."""
    stop = max(0, header_index - CREDITOR_LOOKBACK_LINES)
    for index in range(header_index - 1, stop - 1, -1):
        if _is_creditor_candidate(lines[index].strip()):
            return index
    return None


def find_creditor_name(lines: Sequence[str], header_index: int) -> str:
    """Read backward from an account header to the nearest creditor-like line."""
    index = find_creditor_line(lines, header_index)
    if index is None:
        return ""
    return re.split(r"\s{3,}", lines[index].strip())[0].strip()


def _preceding_bureau(lines: Sequence[str], header_index: int) -> Optional[Bureau]:
    for index in range(header_index - 1, -1, -1):
        stripped = lines[index].strip()
        if stripped:
            return bureau_marker(stripped)
    return None


# =============================================================================
# EXTRACTOR
# =============================================================================

class ReportTextExtractor:
    """
    Raw report text → ExtractionResult.

    Never raises for malformed text; an unrecognizable report yields empty
    account lists (or fallback candidates, flagged as such).
    """

    def __init__(
        self,
        settings: Optional[AuditSettings] = None,
        fallback: Optional[FallbackStrategy] = None,
    ):
        self.settings = settings or get_settings()
        self.fallback = fallback or CreditorTokenFallback(self.settings.fallback_max_candidates)

    def extract(self, raw_text: str) -> ExtractionResult:
        text = raw_text if isinstance(raw_text, str) else ""
        lines = split_lines(text)

        client = self.extract_client(lines, text)
        ids = RecordIdSequence()

        tradelines: List[AccountRecord] = []
        collections: List[AccountRecord] = []
        for block in self.segment_blocks(lines):
            for record in self.materialize_block(block, ids):
                (collections if record.is_collection else tradelines).append(record)

        mode = ExtractionMode.STRUCTURED
        if not tradelines and not collections:
            fallback_records = self.fallback.extract(lines, client, ids)
            if fallback_records:
                mode = ExtractionMode.FALLBACK
                tradelines = [r for r in fallback_records if not r.is_collection]
                collections = [r for r in fallback_records if r.is_collection]

        inquiries = self.extract_inquiries(lines)

        logger.info(
            f"Extracted {len(tradelines)} tradelines, {len(collections)} collections, "
            f"{len(inquiries)} inquiries ({mode.value})"
        )

        return ExtractionResult(
            client=client,
            tradelines=tuple(tradelines),
            collections=tuple(collections),
            inquiries=tuple(inquiries),
            mode=mode,
        )

    # -------------------------------------------------------------------------
    # Client identity
    # -------------------------------------------------------------------------

    def extract_client(self, lines: Sequence[str], text: str) -> Client:
        name = ""
        state = ""
        for line in lines[: self.settings.client_scan_lines]:
            if not name:
                match = NAME_RE.match(line)
                if match:
                    name = re.split(r"\s{2,}", match.group("name").strip())[0].strip()
            if not state:
                match = STATE_ZIP_RE.search(line)
                if match:
                    state = match.group(1)
            if name and state:
                break

        return Client(name=name, state=state, flagged_for_fraud=bool(FRAUD_RE.search(text)))

    # -------------------------------------------------------------------------
    # Segmentation
    # -------------------------------------------------------------------------

    def segment_blocks(self, lines: Sequence[str]) -> List[AccountBlock]:
        blocks: List[AccountBlock] = []
        state = _WalkState.OUTSIDE
        start = 0

        def close(end: int) -> None:
            block = AccountBlock(
                creditor_name=find_creditor_name(lines, start),
                lines=tuple(lines[start:end]),
                initial_bureau=_preceding_bureau(lines, start),
            )
            logger.debug(f"Account block at line {start + 1}: creditor={block.creditor_name!r}")
            blocks.append(block)

        for index, line in enumerate(lines):
            stripped = line.strip()
            if is_account_header(stripped):
                if state is _WalkState.IN_ACCOUNT_BLOCK:
                    # The next account's creditor line belongs to the next account
                    creditor_line = find_creditor_line(lines, index)
                    close(creditor_line if creditor_line is not None and creditor_line > start else index)
                start = index
                state = _WalkState.IN_ACCOUNT_BLOCK
            elif state is _WalkState.IN_ACCOUNT_BLOCK and BLOCK_TERMINATOR_RE.match(stripped):
                close(index)
                state = _WalkState.OUTSIDE

        if state is _WalkState.IN_ACCOUNT_BLOCK:
            close(len(lines))

        return blocks

    # -------------------------------------------------------------------------
    # Per-bureau fields
    # -------------------------------------------------------------------------

    @staticmethod
    def extract_block_fields(block: AccountBlock) -> Dict[Bureau, Dict[str, str]]:
        """
        Collect raw field values per bureau.

        Column-aligned lines map left to right onto TU, EX, EQ. Once a bureau
        name appears alone on a line, later field lines belong to that bureau.
        The first value seen for a field wins. A lone account number on the
        header line, before any bureau marker, is shared by every bureau.
        """
        values: Dict[Bureau, Dict[str, str]] = {bureau: {} for bureau in BUREAU_ORDER}
        current_bureau = block.initial_bureau
        shared_account_number: Optional[str] = None

        for line in block.lines:
            stripped = line.strip()
            marker = bureau_marker(stripped)
            if marker is not None:
                current_bureau = marker
                continue

            matched = match_field(stripped)
            if matched is None:
                continue
            descriptor, remainder = matched

            if current_bureau is not None:
                value = single_value(remainder)
                if value is not None:
                    values[current_bureau].setdefault(descriptor.field, value)
                continue

            columns = descriptor.splitter(remainder)
            if descriptor.field == "account_number" and len(columns) == 1 and not is_placeholder(columns[0]):
                shared_account_number = shared_account_number or columns[0].strip()
                continue

            for bureau, column in zip(BUREAU_ORDER, columns):
                if not is_placeholder(column):
                    values[bureau].setdefault(descriptor.field, column.strip())

        if shared_account_number:
            if not any(values.values()):
                # Nothing but the header: it reads as the first column
                values[BUREAU_ORDER[0]]["account_number"] = shared_account_number
            for fields in values.values():
                if fields:
                    fields.setdefault("account_number", shared_account_number)

        return values

    def materialize_block(self, block: AccountBlock, ids: RecordIdSequence) -> List[AccountRecord]:
        is_collection = is_collection_account(block.creditor_name, block.text)
        is_medical = is_medical_debt(block.creditor_name)
        fields_by_bureau = self.extract_block_fields(block)

        records = []
        for bureau in BUREAU_ORDER:
            fields = fields_by_bureau[bureau]
            if not fields:
                continue
            records.append(build_account_record(
                ids.next_id(is_collection),
                block.creditor_name,
                bureau,
                fields,
                is_collection=is_collection,
                is_medical=is_medical,
            ))

        logger.debug(
            f"Block {block.creditor_name!r}: {len(records)} bureau records, "
            f"collection={is_collection}"
        )
        return records

    # -------------------------------------------------------------------------
    # Inquiries
    # -------------------------------------------------------------------------

    @staticmethod
    def extract_inquiries(lines: Sequence[str]) -> List[Inquiry]:
        inquiries: List[Inquiry] = []
        current: Optional[Dict[str, str]] = None

        def flush() -> None:
            if current and current.get("creditor_name"):
                bureau = Bureau.from_label(current.get("bureau"))
                if bureau is None:
                    logger.debug(
                        f"Inquiry {current['creditor_name']!r} names no bureau "
                        f"({current.get('bureau')!r}); defaulting to TU"
                    )
                    bureau = Bureau.TU
                inquiries.append(Inquiry(
                    id=f"i{len(inquiries) + 1}",
                    creditor_name=current["creditor_name"],
                    bureau=bureau,
                    inquiry_date=normalize_date(current.get("date")),
                    # "Hard Inquiry" -> "hard"
                    inquiry_type=clean_text(current.get("type")).lower().partition(" ")[0],
                ))

        for line in lines:
            stripped = line.strip()
            opened = INQUIRER_RE.match(stripped)
            if opened:
                flush()
                current = {"creditor_name": clean_text(opened.group("value"))}
                continue
            if current is None:
                continue
            if not stripped or stripped.startswith("***") or is_account_header(stripped):
                flush()
                current = None
                continue
            field = INQUIRY_FIELD_RE.match(stripped)
            if field:
                current.setdefault(field.group("label").lower(), field.group("value"))

        flush()
        return inquiries


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def extract(raw_text: str, settings: Optional[AuditSettings] = None) -> ExtractionResult:
    """
    Factory function to extract records from raw report text.

    Args:
        raw_text: text already decoded from the uploaded report

    Returns:
        ExtractionResult (SSOT #1)
    """
    return ReportTextExtractor(settings=settings).extract(raw_text)
