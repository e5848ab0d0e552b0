"""
Gap analysis: what is still missing before a return can be filed.

Pure function of the return and its computed result. Required items block
filing; recommended items only lower the completion score.

Scoring:
    8 required slots (11 for married filing jointly) weighted 10 each,
    2 recommended slots weighted 3 each.
    completion = round(100 * completed weight / total weight)
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, TYPE_CHECKING

from calculator.decimal_math import format_dollars
from models.deductions import DeductionMethod
from models.tax_return import TaxReturn
from models.taxpayer import FilingStatus
from rules.rule_types import GapCategory, GapPriority

if TYPE_CHECKING:
    from calculator.tax_calculator import ComputeResult

logger = logging.getLogger(__name__)

REQUIRED_WEIGHT = 10
RECOMMENDED_WEIGHT = 3
MAX_REQUIRED = 8
MAX_REQUIRED_JOINT = 11
MAX_RECOMMENDED = 2  # withholding + deductions

READY_NO_WARNINGS = "All sections complete. Offer to review and export."
READY_WITH_WARNINGS = "All required info is present but there are warnings to review."

NEXT_ACTION_BY_CATEGORY = {
    GapCategory.PERSONAL: "Ask the user for their personal information (name, SSN, address).",
    GapCategory.FILING_STATUS: "Ask the user to confirm their filing status.",
    GapCategory.SPOUSE: "Ask the user for their spouse's information (name, SSN).",
    GapCategory.INCOME: "Ask the user for their W-2 or other income documents.",
}


@dataclass(frozen=True)
class GapItem:
    category: GapCategory
    field: str
    label: str
    priority: GapPriority

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["category"] = self.category.value
        data["priority"] = self.priority.value
        return data


@dataclass
class GapAnalysisResult:
    items: List[GapItem] = field(default_factory=list)
    completion_percent: int = 0
    ready_to_file: bool = False
    warnings: List[str] = field(default_factory=list)
    next_suggested_action: str = ""

    @property
    def required_items(self) -> List[GapItem]:
        return [i for i in self.items if i.priority == GapPriority.REQUIRED]

    @property
    def recommended_items(self) -> List[GapItem]:
        return [i for i in self.items if i.priority == GapPriority.RECOMMENDED]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "items": [i.to_dict() for i in self.items],
            "completionPercent": self.completion_percent,
            "readyToFile": self.ready_to_file,
            "warnings": list(self.warnings),
            "nextSuggestedAction": self.next_suggested_action,
        }


def _required(category: GapCategory, field_name: str, label: str) -> GapItem:
    return GapItem(category, field_name, label, GapPriority.REQUIRED)


def _recommended(category: GapCategory, field_name: str, label: str) -> GapItem:
    return GapItem(category, field_name, label, GapPriority.RECOMMENDED)


def _personal_items(tax_return: TaxReturn) -> List[GapItem]:
    tp = tax_return.taxpayer
    items = []
    if not tp.first_name or not tp.last_name:
        items.append(_required(GapCategory.PERSONAL, "name", "Taxpayer name"))
    if not tp.has_valid_ssn:
        items.append(_required(GapCategory.PERSONAL, "ssn", "Taxpayer SSN"))
    for attr, label in (("street", "Street address"), ("city", "City"), ("state", "State"), ("zip", "ZIP code")):
        if not getattr(tp.address, attr):
            items.append(_required(GapCategory.PERSONAL, f"address.{attr}", label))
    # Nothing entered at all: the filing status is only the default
    if not tp.first_name and not tp.last_name:
        items.append(_required(GapCategory.FILING_STATUS, "filingStatus", "Confirm filing status"))
    return items


def _spouse_items(tax_return: TaxReturn) -> List[GapItem]:
    if tax_return.filing_status != FilingStatus.MARRIED_JOINT:
        return []
    spouse = tax_return.spouse
    if spouse is None:
        return [_required(GapCategory.SPOUSE, "spouse", "Spouse information")]
    items = []
    if not spouse.first_name or not spouse.last_name:
        items.append(_required(GapCategory.SPOUSE, "spouse.name", "Spouse name"))
    if not spouse.has_valid_ssn:
        items.append(_required(GapCategory.SPOUSE, "spouse.ssn", "Spouse SSN"))
    return items


def _deduction_items(tax_return: TaxReturn, warnings: List[str]) -> List[GapItem]:
    if tax_return.deductions.method != DeductionMethod.ITEMIZED:
        return []
    itemized = tax_return.deductions.itemized
    if itemized is None:
        return [_recommended(GapCategory.DEDUCTIONS, "itemized", "Itemized deduction amounts")]

    items = []
    if itemized.total_entered() == 0:
        warnings.append(
            "Itemized deductions selected but all amounts are $0. Consider entering deduction "
            "amounts or switching to the standard deduction."
        )
        items.append(_recommended(GapCategory.DEDUCTIONS, "itemized", "Itemized deduction amounts"))
    if itemized.mortgage_interest > 0 and not itemized.mortgage_principal:
        warnings.append(
            "Mortgage interest entered without a loan balance. Enter the outstanding mortgage "
            "principal (Form 1098, box 2) so the $750K/$1M interest limit can be applied."
        )
        items.append(_recommended(GapCategory.DEDUCTIONS, "mortgagePrincipal", "Mortgage principal balance"))
    return items


def _completion_percent(required: int, recommended: int, max_required: int) -> int:
    required_complete = max(0, max_required - required)
    recommended_complete = max(0, MAX_RECOMMENDED - recommended)
    total_weight = max_required * REQUIRED_WEIGHT + MAX_RECOMMENDED * RECOMMENDED_WEIGHT
    completed = required_complete * REQUIRED_WEIGHT + recommended_complete * RECOMMENDED_WEIGHT
    if total_weight <= 0:
        return 100
    percent = Decimal(100 * completed) / Decimal(total_weight)
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _next_action(items: List[GapItem], warnings: List[str], ready: bool) -> str:
    if ready:
        return READY_WITH_WARNINGS if warnings else READY_NO_WARNINGS
    first_required: Optional[GapItem] = next((i for i in items if i.priority == GapPriority.REQUIRED), None)
    if first_required is not None:
        return NEXT_ACTION_BY_CATEGORY.get(
            first_required.category, f"Collect missing information: {first_required.label}."
        )
    first_recommended = next((i for i in items if i.priority == GapPriority.RECOMMENDED), None)
    if first_recommended is not None:
        return f"Review recommended item: {first_recommended.label}."
    return READY_NO_WARNINGS


def analyze_gaps(tax_return: TaxReturn, compute_result: "ComputeResult") -> GapAnalysisResult:
    """Score ``tax_return`` for missing information. Never raises for incomplete data."""
    items: List[GapItem] = []
    warnings: List[str] = []

    items.extend(_personal_items(tax_return))
    items.extend(_spouse_items(tax_return))

    has_income = tax_return.has_income_documents()
    if not has_income:
        items.append(_required(GapCategory.INCOME, "income", "Income documents (W-2, 1099, etc.)"))

    form1040 = compute_result.form1040
    total_tax = form1040.line24
    if has_income and form1040.line25 == 0 and total_tax > 0:
        warnings.append(
            f"You have {format_dollars(total_tax)} in estimated tax but no federal withholding recorded. "
            f"Make sure W-2 box 2 and 1099 box 4 amounts are entered."
        )
        items.append(_recommended(GapCategory.WITHHOLDING, "withholding", "Federal tax withholding"))

    items.extend(_deduction_items(tax_return, warnings))

    required = sum(1 for i in items if i.priority == GapPriority.REQUIRED)
    recommended = sum(1 for i in items if i.priority == GapPriority.RECOMMENDED)
    max_required = MAX_REQUIRED_JOINT if tax_return.filing_status == FilingStatus.MARRIED_JOINT else MAX_REQUIRED
    ready = required == 0

    result = GapAnalysisResult(
        items=items,
        completion_percent=_completion_percent(required, recommended, max_required),
        ready_to_file=ready,
        warnings=warnings,
        next_suggested_action=_next_action(items, warnings, ready),
    )
    logger.debug(
        "Gap analysis: %d required, %d recommended, %d%% complete",
        required, recommended, result.completion_percent,
    )
    return result
