"""
Credit Audit Engine - Configuration

Thresholds and limits read from the environment, with defaults matching the
reporting rules the detector implements.
"""
import os
from dataclasses import dataclass
from functools import lru_cache

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


@dataclass(frozen=True)
class AuditSettings:
    # Date fields further apart than this across bureaus are a mismatch
    date_mismatch_days: int = 30
    # Hard inquiries older than this are past the 2-year window
    inquiry_max_age_days: int = 730
    # Client identity is only looked for near the top of the report
    client_scan_lines: int = 100
    fallback_max_candidates: int = 25


@lru_cache()
def get_settings() -> AuditSettings:
    """Settings from the environment, read once per process."""
    return AuditSettings(
        date_mismatch_days=_int_env("CREDIT_AUDIT_DATE_MISMATCH_DAYS", 30),
        inquiry_max_age_days=_int_env("CREDIT_AUDIT_INQUIRY_MAX_AGE_DAYS", 730),
        client_scan_lines=_int_env("CREDIT_AUDIT_CLIENT_SCAN_LINES", 100),
        fallback_max_candidates=_int_env("CREDIT_AUDIT_FALLBACK_MAX_CANDIDATES", 25),
    )
