"""Tests for return completeness (gap analysis)."""

from calculator.decimal_math import cents
from calculator.tax_calculator import compute_all
from models.deductions import DeductionMethod, Deductions, ItemizedDeductions
from models.taxpayer import FilingStatus, Taxpayer
from models.tax_return import TaxReturn
from rules import GapCategory, GapPriority, analyze_gaps
from rules.gap_analysis import READY_NO_WARNINGS, READY_WITH_WARNINGS

from factories import make_return, make_taxpayer


def analyze(model, registry, settings):
    return analyze_gaps(model, compute_all(model, registry=registry, settings=settings))


class TestRequiredItems:

    def test_complete_return_is_ready(self, registry, settings):
        gaps = analyze(make_return(wages=75000, withheld=9000), registry, settings)

        assert gaps.items == []
        assert gaps.ready_to_file
        assert gaps.completion_percent == 100
        assert gaps.next_suggested_action == READY_NO_WARNINGS

    def test_mfj_missing_spouse_ssn(self, registry, settings):
        model = make_return(
            wages=80000, withheld=8000, filing_status=FilingStatus.MARRIED_JOINT,
            spouse=make_taxpayer(first="Sam", ssn=""),
        )
        gaps = analyze(model, registry, settings)

        assert len(gaps.items) == 1
        item = gaps.items[0]
        assert item.category == GapCategory.SPOUSE
        assert item.field == "spouse.ssn"
        assert item.priority == GapPriority.REQUIRED
        assert not gaps.ready_to_file
        # 10 of 11 required slots, both recommended slots
        assert gaps.completion_percent == 91
        assert "spouse" in gaps.next_suggested_action

    def test_mfj_without_spouse(self, registry, settings):
        model = make_return(wages=80000, withheld=8000, filing_status=FilingStatus.MARRIED_JOINT, spouse=None)
        gaps = analyze(model, registry, settings)

        assert [(i.category, i.field) for i in gaps.items] == [(GapCategory.SPOUSE, "spouse")]

    def test_empty_return(self, registry, settings):
        gaps = analyze(TaxReturn(), registry, settings)
        fields = [i.field for i in gaps.required_items]

        assert fields == [
            "name", "ssn", "address.street", "address.city", "address.state", "address.zip",
            "filingStatus", "income",
        ]
        assert gaps.recommended_items == []
        assert gaps.completion_percent == 7
        assert gaps.next_suggested_action.startswith("Ask the user for their personal information")

    def test_missing_income_only(self, registry, settings):
        gaps = analyze(make_return(), registry, settings)

        assert [i.field for i in gaps.items] == ["income"]
        assert gaps.items[0].category == GapCategory.INCOME
        assert "W-2" in gaps.next_suggested_action

    def test_partial_name_does_not_flag_filing_status(self, registry, settings):
        model = make_return(wages=50000, withheld=5000, taxpayer=Taxpayer(first_name="Lee", ssn="123456789"))
        fields = [i.field for i in analyze(model, registry, settings).items]

        assert "name" in fields
        assert "filingStatus" not in fields


class TestRecommendedItems:

    def test_no_withholding_with_tax_due(self, registry, settings):
        gaps = analyze(make_return(wages=75000), registry, settings)

        assert [i.field for i in gaps.recommended_items] == ["withholding"]
        assert gaps.ready_to_file
        assert "$8,114.00" in gaps.warnings[0]
        assert gaps.completion_percent == 97
        assert gaps.next_suggested_action == READY_WITH_WARNINGS

    def test_itemized_all_zero(self, registry, settings):
        model = make_return(
            wages=75000, withheld=9000,
            deductions=Deductions(method=DeductionMethod.ITEMIZED, itemized=ItemizedDeductions()),
        )
        gaps = analyze(model, registry, settings)

        assert [i.field for i in gaps.recommended_items] == ["itemized"]
        assert len(gaps.warnings) == 1

    def test_itemized_missing(self, registry, settings):
        model = make_return(wages=75000, withheld=9000, deductions=Deductions(method=DeductionMethod.ITEMIZED))
        gaps = analyze(model, registry, settings)

        assert [i.field for i in gaps.recommended_items] == ["itemized"]
        assert gaps.warnings == []

    def test_mortgage_interest_without_principal(self, registry, settings):
        itemized = ItemizedDeductions(mortgage_interest=cents(14000), real_estate_taxes=cents(6000))
        model = make_return(
            wages=120000, withheld=20000,
            deductions=Deductions(method=DeductionMethod.ITEMIZED, itemized=itemized),
        )
        gaps = analyze(model, registry, settings)

        assert [i.field for i in gaps.recommended_items] == ["mortgagePrincipal"]

    def test_required_items_drive_next_action(self, registry, settings):
        model = make_return(wages=75000, taxpayer=Taxpayer(first_name="", last_name="Rivera", ssn="123456789"))
        gaps = analyze(model, registry, settings)

        assert not gaps.ready_to_file
        assert gaps.next_suggested_action.startswith("Ask the user for their personal information")


def test_to_dict(registry, settings):
    gaps = analyze(make_return(wages=75000), registry, settings)
    data = gaps.to_dict()

    assert data["readyToFile"] is True
    assert data["items"][0] == {
        "category": "withholding", "field": "withholding", "label": "Federal tax withholding",
        "priority": "recommended",
    }
    assert set(data) == {"items", "completionPercent", "readyToFile", "warnings", "nextSuggestedAction"}
