"""
Credit Audit Engine - Account Field Descriptors

Each descriptor pairs a target field with a label matcher and a column
splitter. Vendor layouts are supported by adding descriptors, not code paths.
Order matters: more specific labels come before the labels they contain.
"""
from __future__ import annotations
import re
from dataclasses import dataclass
from typing import Callable, List, Optional, Tuple

from .normalizers import clean_text, is_placeholder, mark_not_reported


# =============================================================================
# COLUMN SPLITTERS
# =============================================================================

WIDE_GAP_RE = re.compile(r"\s{2,}|\t+")


def split_token_columns(remainder: str) -> List[str]:
    """Single-token values (dates, amounts, account numbers) split on any whitespace."""
    return mark_not_reported(remainder).split()


def split_text_columns(remainder: str) -> List[str]:
    """
    Free-text values (statuses, creditor names) may contain spaces.

    Columns are split on wide gaps when the layout has them; otherwise a
    placeholder token is the only reliable separator.
    """
    text = mark_not_reported(remainder).strip()
    if not text:
        return []

    wide = [column.strip() for column in WIDE_GAP_RE.split(text) if column.strip()]
    if len(wide) > 1:
        return wide

    columns: List[str] = []
    current: List[str] = []
    for token in text.split():
        if is_placeholder(token):
            if current:
                columns.append(" ".join(current))
                current = []
            columns.append(token)
        else:
            current.append(token)
    if current:
        columns.append(" ".join(current))
    return columns


# =============================================================================
# DESCRIPTORS
# =============================================================================

@dataclass(frozen=True)
class FieldDescriptor:
    field: str
    label: re.Pattern[str]
    splitter: Callable[[str], List[str]]

    def match(self, line: str) -> Optional[str]:
        """Return the text after the label, or None when the label is absent."""
        found = self.label.match(line)
        if not found:
            return None
        return line[found.end():]


def _label(pattern: str) -> re.Pattern[str]:
    # Label at line start, optional colon, then the value text
    return re.compile(rf"^\s*(?:{pattern})\s*:?\s*", re.IGNORECASE)


ACCOUNT_NUMBER = FieldDescriptor(
    "account_number", _label(r"account\s*#|account\s+(?:number|no\.?)\b"), split_token_columns
)

ACCOUNT_FIELDS: Tuple[FieldDescriptor, ...] = (
    ACCOUNT_NUMBER,
    FieldDescriptor("date_of_first_delinquency", _label(r"date\s+of\s+first\s+delinquency\b"), split_token_columns),
    FieldDescriptor("date_of_last_activity", _label(r"date\s+of\s+last\s+activity\b"), split_token_columns),
    FieldDescriptor("open_date", _label(r"date\s+opened\b"), split_token_columns),
    FieldDescriptor(
        "last_payment_date",
        _label(r"(?:date\s+of\s+)?last\s+payment(?!\s+amount)(?:\s+date)?\b"),
        split_token_columns,
    ),
    FieldDescriptor("current_balance", _label(r"balance\s+owed\b|balance\b"), split_token_columns),
    FieldDescriptor("credit_limit", _label(r"credit\s+limit\b|high\s+credit\b"), split_token_columns),
    FieldDescriptor("status", _label(r"account\s+status\b"), split_text_columns),
    FieldDescriptor("original_creditor", _label(r"original\s+creditor(?:\s+name)?\b"), split_text_columns),
)


def match_field(line: str) -> Optional[Tuple[FieldDescriptor, str]]:
    """First descriptor whose label starts the line, with its value text."""
    for descriptor in ACCOUNT_FIELDS:
        remainder = descriptor.match(line)
        if remainder is not None:
            return descriptor, remainder
    return None


def is_account_header(line: str) -> bool:
    return ACCOUNT_NUMBER.match(line) is not None


def single_value(remainder: str) -> Optional[str]:
    """Whole remainder as one bureau's value (one-field-per-line layouts)."""
    value = clean_text(remainder)
    if is_placeholder(value):
        return None
    return value
