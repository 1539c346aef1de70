"""
Tests for report value normalization and field descriptors.

Covers:
- Date normalization (M/D/YYYY, M/YYYY, invalid calendar dates)
- Amount parsing and the None-vs-0 convention
- Placeholder detection
- Column splitting and label matching
"""
import pytest

from app.services.parsing.normalizers import (
    account_last4,
    is_placeholder,
    normalize_amount,
    normalize_date,
    parse_iso_date,
)
from app.services.parsing.field_descriptors import (
    is_account_header,
    match_field,
    split_text_columns,
    split_token_columns,
)


# =============================================================================
# TEST: DATES
# =============================================================================

class TestNormalizeDate:

    @pytest.mark.parametrize("raw,expected", [
        ("1/5/2021", "2021-01-05"),
        ("01/05/2021", "2021-01-05"),
        ("12/31/1999", "1999-12-31"),
        ("3/2020", "2020-03-01"),
        (" 03/2020 ", "2020-03-01"),
    ])
    def test_supported_shapes(self, raw, expected):
        assert normalize_date(raw) == expected

    @pytest.mark.parametrize("raw", [
        "2/30/2020",
        "13/1/2020",
        "0/2020",
        "2021-01-05",
        "Jan 2020",
        "--",
        "",
        None,
    ])
    def test_unusable_dates_are_empty(self, raw):
        assert normalize_date(raw) == ""

    def test_leap_day_is_valid(self):
        assert normalize_date("2/29/2020") == "2020-02-29"

    def test_parse_iso_date_round_trip(self):
        parsed = parse_iso_date("2020-03-15")
        assert parsed is not None
        assert (parsed.year, parsed.month, parsed.day) == (2020, 3, 15)

    def test_parse_iso_date_rejects_empty(self):
        assert parse_iso_date("") is None
        assert parse_iso_date(None) is None
        assert parse_iso_date("not a date") is None


# =============================================================================
# TEST: AMOUNTS
# =============================================================================

class TestNormalizeAmount:

    def test_dollar_and_comma_stripped(self):
        assert normalize_amount("$1,234") == 1234

    def test_placeholders_are_none(self):
        assert normalize_amount("--") is None
        assert normalize_amount("") is None
        assert normalize_amount("N/A") is None
        assert normalize_amount(None) is None

    def test_zero_is_reported_zero(self):
        assert normalize_amount("$0") == 0

    def test_cents_truncated(self):
        assert normalize_amount("$1,234.56") == 1234

    def test_non_numeric_is_none(self):
        assert normalize_amount("Unknown") is None


# =============================================================================
# TEST: PLACEHOLDERS AND ACCOUNT NUMBERS
# =============================================================================

class TestPlaceholders:

    @pytest.mark.parametrize("value", ["--", "-", "—", "N/A", "Not Reported", "", "   "])
    def test_placeholder_tokens(self, value):
        assert is_placeholder(value)

    @pytest.mark.parametrize("value", ["Open", "$0", "01/2020", "0"])
    def test_real_values(self, value):
        assert not is_placeholder(value)

    def test_account_last4_from_masked_number(self):
        assert account_last4("****1234") == "1234"
        assert account_last4("XXXX-XXXX-9876") == "9876"

    def test_account_last4_short_number(self):
        assert account_last4("12") == "12"

    def test_account_last4_placeholder(self):
        assert account_last4("--") == ""


# =============================================================================
# TEST: FIELD DESCRIPTORS
# =============================================================================

class TestFieldDescriptors:

    def test_token_columns_split_on_whitespace(self):
        assert split_token_columns("01/01/2020 03/15/2020 01/01/2020") == [
            "01/01/2020", "03/15/2020", "01/01/2020"
        ]

    def test_not_reported_counts_as_one_column(self):
        assert split_token_columns("01/01/2020 Not Reported 03/15/2020") == [
            "01/01/2020", "--", "03/15/2020"
        ]

    def test_text_columns_split_on_wide_gaps(self):
        assert split_text_columns("Pays As Agreed    Closed    Open") == [
            "Pays As Agreed", "Closed", "Open"
        ]

    def test_text_columns_split_on_placeholders(self):
        assert split_text_columns("Open -- Closed") == ["Open", "--", "Closed"]

    def test_single_text_value(self):
        assert split_text_columns("Pays As Agreed") == ["Pays As Agreed"]

    def test_balance_owed_label(self):
        descriptor, remainder = match_field("Balance Owed:  $100  $200  $300")
        assert descriptor.field == "current_balance"
        assert split_token_columns(remainder) == ["$100", "$200", "$300"]

    def test_dofd_label_before_dla(self):
        descriptor, _ = match_field("Date of First Delinquency: 1/2020")
        assert descriptor.field == "date_of_first_delinquency"

        descriptor, _ = match_field("Date of Last Activity: 1/2020")
        assert descriptor.field == "date_of_last_activity"

    def test_labels_case_and_colon_tolerant(self):
        descriptor, remainder = match_field("DATE OPENED 01/2020")
        assert descriptor.field == "open_date"
        assert remainder.strip() == "01/2020"

    def test_high_credit_is_limit(self):
        descriptor, _ = match_field("High Credit: $500")
        assert descriptor.field == "credit_limit"

    def test_last_payment_amount_is_not_a_date(self):
        assert match_field("Last Payment Amount: $50") is None

    def test_account_header(self):
        assert is_account_header("Account #: ****1234")
        assert is_account_header("Account Number: 1234")
        assert not is_account_header("Account Status: Open")
