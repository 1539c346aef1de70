"""
Tests for collection rules, inquiry rules and the Discrepancy Detector.

Test Coverage:
1. MISSING_OC / MISSING_DOFD on collections
2. REPORTING_EXPIRED boundary (DOFD + 7 years + 180 days)
3. MEDICAL_DEBT_RESTRICTED by client state
4. INQUIRY_EXPIRED boundary (730 days, hard inquiries only)
5. Detector ordering, numbering, purity and tolerance of partial bundles
"""
import pytest
from datetime import date, timedelta

from app.config import AuditSettings
from app.models.ssot import (
    AccountRecord, Bureau, Client, ExtractionResult, FindingType, Inquiry, Severity
)
from app.services.audit import DiscrepancyDetector, detect
from app.services.audit.rules import CollectionRules, InquiryRules

AS_OF = date(2024, 1, 1)


def make_collection(bureau=Bureau.TU, **overrides):
    fields = dict(
        id="c1",
        creditor_name="MIDLAND CREDIT MANAGEMENT",
        bureau=bureau,
        account_number_last4="5555",
        is_collection=True,
        collector_name="MIDLAND CREDIT MANAGEMENT",
    )
    fields.update(overrides)
    return AccountRecord(**fields)


@pytest.fixture
def detector():
    return DiscrepancyDetector(settings=AuditSettings())


# =============================================================================
# TEST: COLLECTION RULES
# =============================================================================

class TestCollectionRules:

    def test_blank_oc_and_dofd(self):
        findings = CollectionRules.check_all(make_collection(), Client(), AS_OF)

        assert [f.type for f in findings] == [FindingType.MISSING_OC, FindingType.MISSING_DOFD]
        assert all(f.claim_indicator for f in findings)
        assert all(f.bureaus_affected == (Bureau.TU,) for f in findings)
        assert findings[0].severity == Severity.MEDIUM
        assert findings[1].severity == Severity.HIGH
        assert findings[0].item == "MIDLAND CREDIT MANAGEMENT (...5555)"
        assert "does not identify Original Creditor" in findings[0].evidence
        assert findings[1].cannot_confirm

    def test_complete_collection_is_clean(self):
        record = make_collection(original_creditor="SYNCHRONY BANK", date_of_first_delinquency="2020-01-01")
        assert CollectionRules.check_all(record, Client(), AS_OF) == []

    def test_reporting_period_boundary(self):
        record = make_collection(original_creditor="SYNCHRONY BANK", date_of_first_delinquency="2015-01-01")

        assert CollectionRules.check_reporting_expired(record, date(2022, 6, 30)) == []

        findings = CollectionRules.check_reporting_expired(record, date(2022, 7, 1))
        assert len(findings) == 1
        assert findings[0].type == FindingType.REPORTING_EXPIRED
        assert findings[0].severity == Severity.CRITICAL
        assert "2015-01-01" in findings[0].evidence

    def test_medical_debt_in_restricted_state(self):
        record = make_collection(
            original_creditor="VALLEY HOSPITAL",
            date_of_first_delinquency="2022-01-01",
            is_medical_debt=True,
        )
        findings = CollectionRules.check_all(record, Client(state="CA"), AS_OF)
        assert [f.type for f in findings] == [FindingType.MEDICAL_DEBT_RESTRICTED]
        assert "CA" in findings[0].evidence

    def test_medical_debt_elsewhere(self):
        record = make_collection(
            original_creditor="VALLEY HOSPITAL",
            date_of_first_delinquency="2022-01-01",
            is_medical_debt=True,
        )
        assert CollectionRules.check_all(record, Client(state="TX"), AS_OF) == []

    def test_collector_name_falls_back_to_creditor(self):
        record = make_collection(collector_name="")
        finding = CollectionRules.check_missing_original_creditor(record)[0]
        assert "MIDLAND CREDIT MANAGEMENT" in finding.evidence


# =============================================================================
# TEST: INQUIRY RULES
# =============================================================================

class TestInquiryRules:

    def make_inquiry(self, inquiry_date, inquiry_type="hard"):
        return Inquiry(
            id="i1",
            creditor_name="CHASE BANK",
            bureau=Bureau.EX,
            inquiry_date=inquiry_date,
            inquiry_type=inquiry_type,
        )

    def test_expired_hard_inquiry(self):
        findings = InquiryRules.check_expired_inquiry(self.make_inquiry("2020-01-15"), AS_OF)
        assert len(findings) == 1
        finding = findings[0]
        assert finding.type == FindingType.INQUIRY_EXPIRED
        assert finding.bureaus_affected == (Bureau.EX,)
        assert finding.item == "CHASE BANK"
        assert "2020-01-15" in finding.evidence

    def test_boundary(self):
        on_boundary = (AS_OF - timedelta(days=730)).isoformat()
        past_boundary = (AS_OF - timedelta(days=731)).isoformat()
        assert InquiryRules.check_expired_inquiry(self.make_inquiry(on_boundary), AS_OF) == []
        assert InquiryRules.check_expired_inquiry(self.make_inquiry(past_boundary), AS_OF)

    def test_soft_inquiry_ignored(self):
        assert InquiryRules.check_expired_inquiry(self.make_inquiry("2015-01-01", "soft"), AS_OF) == []

    def test_undated_inquiry_ignored(self):
        assert InquiryRules.check_expired_inquiry(self.make_inquiry(""), AS_OF) == []


# =============================================================================
# TEST: DISCREPANCY DETECTOR
# =============================================================================

class TestDiscrepancyDetector:

    @pytest.fixture
    def bundle(self):
        return ExtractionResult(
            client=Client(name="JOHN DOE", state="NY"),
            tradelines=(
                AccountRecord(id="t1", creditor_name="CAPITAL ONE", bureau=Bureau.TU,
                              account_number_last4="1234", open_date="2020-01-01"),
                AccountRecord(id="t2", creditor_name="CAPITAL ONE", bureau=Bureau.EX,
                              account_number_last4="1234", open_date="2020-03-15"),
            ),
            collections=(make_collection(id="c3"),),
            inquiries=(
                Inquiry(id="i1", creditor_name="CHASE BANK", inquiry_date="2019-05-01", inquiry_type="hard"),
            ),
        )

    def test_output_order_and_numbering(self, detector, bundle):
        findings = detector.detect(bundle, as_of=AS_OF)

        assert [f.type for f in findings] == [
            FindingType.DATE_MISMATCH_OPEN,
            FindingType.MISSING_OC,
            FindingType.MISSING_DOFD,
            FindingType.INQUIRY_EXPIRED,
        ]
        assert [f.id for f in findings] == [1, 2, 3, 4]

    def test_repeatable(self, detector, bundle):
        assert detector.detect(bundle, as_of=AS_OF) == detector.detect(bundle, as_of=AS_OF)

    def test_every_finding_has_evidence_and_bureaus(self, detector, bundle):
        for finding in detector.detect(bundle, as_of=AS_OF):
            assert finding.bureaus_affected
            assert finding.evidence
            assert finding.timeline == "30-45 days"

    def test_as_of_drives_time_rules(self, detector, bundle):
        findings = detector.detect(bundle, as_of=date(2020, 1, 1))
        assert FindingType.INQUIRY_EXPIRED not in [f.type for f in findings]

    def test_empty_bundle(self, detector):
        assert detector.detect(ExtractionResult(), as_of=AS_OF) == []

    def test_none_bundle(self, detector):
        assert detector.detect(None, as_of=AS_OF) == []

    def test_mapping_bundle(self, detector):
        bundle = {"collections": [make_collection()], "client": None}
        findings = detector.detect(bundle, as_of=AS_OF)
        assert [f.type for f in findings] == [FindingType.MISSING_OC, FindingType.MISSING_DOFD]

    def test_factory_function(self, bundle):
        findings = detect(bundle, as_of=AS_OF, settings=AuditSettings())
        assert len(findings) == 4

    def test_date_threshold_from_settings(self, bundle):
        strict = DiscrepancyDetector(settings=AuditSettings(date_mismatch_days=100))
        types = [f.type for f in strict.detect(bundle, as_of=AS_OF)]
        assert FindingType.DATE_MISMATCH_OPEN not in types
