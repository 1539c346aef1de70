"""
Credit Audit Engine - Record Materialization

Builds frozen AccountRecords from the raw per-bureau field values collected
for one account block.
"""
from __future__ import annotations
from typing import Dict

from ...models.ssot import AccountRecord, Bureau, ExtractionMode
from .normalizers import account_last4, clean_text, normalize_amount, normalize_date


class RecordIdSequence:
    """Sequential record ids for one extraction run ("t1", "c2", ...)."""

    def __init__(self, start: int = 1):
        self._next = start

    def next_id(self, is_collection: bool) -> str:
        record_id = f"{'c' if is_collection else 't'}{self._next}"
        self._next += 1
        return record_id


def build_account_record(
    record_id: str,
    creditor_name: str,
    bureau: Bureau,
    fields: Dict[str, str],
    is_collection: bool,
    is_medical: bool = False,
    mode: ExtractionMode = ExtractionMode.STRUCTURED,
) -> AccountRecord:
    """
    Normalize one bureau's raw field values into an AccountRecord.

    Balance falls back to 0 when not reported; credit limit stays None.
    """
    balance = normalize_amount(fields.get("current_balance"))

    return AccountRecord(
        id=record_id,
        creditor_name=creditor_name,
        bureau=bureau,
        account_number_last4=account_last4(fields.get("account_number")),
        status=clean_text(fields.get("status")),
        open_date=normalize_date(fields.get("open_date")),
        date_of_last_activity=normalize_date(fields.get("date_of_last_activity")),
        last_payment_date=normalize_date(fields.get("last_payment_date")),
        date_of_first_delinquency=normalize_date(fields.get("date_of_first_delinquency")),
        credit_limit=normalize_amount(fields.get("credit_limit")),
        current_balance=balance if balance is not None else 0,
        is_collection=is_collection,
        collector_name=creditor_name if is_collection else "",
        original_creditor=clean_text(fields.get("original_creditor")) if is_collection else "",
        is_medical_debt=is_medical if is_collection else False,
        extraction_mode=mode,
    )
