"""Base class for state tax calculators."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Tuple, TYPE_CHECKING

from calculator.brackets import compute_bracket_tax
from calculator.decimal_math import apply_rate
from calculator.state.apportionment import (
    apportion_income,
    compute_apportionment_ratio,
    scale_full_year_tax,
)
from calculator.state.state_tax_config import (
    APPORTION_INCOME,
    FEDERAL_TAXABLE_INCOME,
    GROSS_INCOME,
    ITEMIZED_UNCAPPED_SALT,
    SCALE_TAX,
    StateTaxConfig,
)
from calculator.senior_deduction import is_senior
from calculator.traced import TraceMap, TraceRecorder
from models.deductions import DeductionMethod
from models.state import ResidencyType, StateReturnConfig
from models.taxpayer import FilingStatus

if TYPE_CHECKING:
    from calculator.engine import Form1040Result
    from models.tax_return import TaxReturn

logger = logging.getLogger(__name__)


@dataclass
class StateLineItem:
    """One addition, subtraction, extra tax or credit on a state return."""
    key: str
    label: str
    amount: int
    inputs: Tuple[str, ...] = ()


@dataclass
class StateComputeResult:
    """
    Complete breakdown of one state return. Money in cents.

    ``values`` holds only the state's own trace nodes; their inputs may point
    at federal nodes of the return the state was computed from.
    """

    state_code: str
    state_name: str
    form_label: str
    tax_year: int
    residency_type: ResidencyType = ResidencyType.FULL_YEAR
    apportionment_ratio: float = 1.0

    # Income calculation
    starting_income: int = 0
    additions: Dict[str, int] = field(default_factory=dict)
    subtractions: Dict[str, int] = field(default_factory=dict)
    state_agi: int = 0

    # Deductions and exemptions
    deduction: int = 0
    deduction_method: str = "standard"
    exemptions: int = 0
    state_taxable_income: int = 0

    # Tax and credits. state_tax is the bracket tax plus additional taxes,
    # apportioned when the state scales a full-year tax
    bracket_tax: int = 0
    state_tax: int = 0
    additional_taxes: Dict[str, int] = field(default_factory=dict)
    credits: Dict[str, int] = field(default_factory=dict)
    refundable_credits: Dict[str, int] = field(default_factory=dict)
    tax_after_credits: int = 0

    # Final amounts
    state_withholding: int = 0
    total_payments: int = 0
    overpaid: int = 0
    amount_owed: int = 0

    detail: Dict[str, Any] = field(default_factory=dict)
    values: TraceMap = field(default_factory=dict, repr=False)

    @property
    def total_credits(self) -> int:
        return sum(self.credits.values())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stateCode": self.state_code,
            "formLabel": self.form_label,
            "taxYear": self.tax_year,
            "residencyType": self.residency_type.value,
            "apportionmentRatio": self.apportionment_ratio,
            "stateAGI": self.state_agi,
            "stateTaxableIncome": self.state_taxable_income,
            "stateTax": self.state_tax,
            "stateCredits": self.total_credits,
            "credits": dict(self.credits),
            "refundableCredits": dict(self.refundable_credits),
            "taxAfterCredits": self.tax_after_credits,
            "stateWithholding": self.state_withholding,
            "overpaid": self.overpaid,
            "amountOwed": self.amount_owed,
            "detail": dict(self.detail),
        }


class StateRulesModule(ABC):
    """
    One state's rules for one tax year.

    A module needs a completed federal result; it never recomputes federal
    lines.
    """

    def __init__(self, config: StateTaxConfig):
        self.config = config

    @property
    def state_code(self) -> str:
        return self.config.state_code

    @property
    def tax_year(self) -> int:
        return self.config.tax_year

    @abstractmethod
    def compute(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        state_config: StateReturnConfig,
    ) -> StateComputeResult:
        """Compute the state return from the federal result."""
        pass

    def collect_traced_values(self, result: StateComputeResult) -> TraceMap:
        """The state's trace nodes, in computation order."""
        return dict(result.values)

    def node_labels(self) -> Dict[str, str]:
        return {}


class ConfiguredStateModule(StateRulesModule):
    """
    State return driven by ``StateTaxConfig``.

    Subclasses override the hooks (additions, deduction, credits, ...) for
    state-specific rules; the order of the return stays the same:

        starting income + additions - subtractions = state AGI
        state AGI - deduction - exemptions = taxable income
        bracket tax + additional taxes (x ratio) - credits = tax after credits
    """

    # generic line key -> state node name
    node_names: Dict[str, str] = {}
    # node prefix for additions and subtractions, defaults to the form prefix
    adjustments_prefix: str = ""

    LABELS = {
        "startingIncome": "Starting income",
        "additions": "Total additions",
        "subtractions": "Total subtractions",
        "stateAGI": "State adjusted gross income",
        "deduction": "State deduction",
        "exemptions": "Exemptions",
        "taxableIncome": "State taxable income",
        "tax": "State income tax",
        "apportionedTax": "Income tax apportioned to residency",
        "taxAfterCredits": "Tax after credits",
        "withholding": "State income tax withheld",
        "overpaid": "Overpayment",
        "amountOwed": "Amount owed",
    }

    def node(self, key: str) -> str:
        return f"{self.config.node_prefix}.{self.node_names.get(key, key)}"

    def adjustment_node(self, key: str) -> str:
        return f"{self.adjustments_prefix or self.config.node_prefix}.{key}"

    def node_labels(self) -> Dict[str, str]:
        labels = {self.node(key): f"{self.config.form_label}: {label}" for key, label in self.LABELS.items()}
        labels[self.adjustment_node("additions")] = f"{self.config.form_label}: Total additions"
        labels[self.adjustment_node("subtractions")] = f"{self.config.form_label}: Total subtractions"
        return labels

    def compute(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        state_config: StateReturnConfig,
    ) -> StateComputeResult:
        cfg = self.config
        ratio = compute_apportionment_ratio(state_config, model.tax_year)
        prorate_ratio = self.effective_ratio(state_config, ratio)
        result = StateComputeResult(
            state_code=cfg.state_code,
            state_name=cfg.state_name,
            form_label=cfg.form_label,
            tax_year=model.tax_year,
            residency_type=state_config.residency_type,
            apportionment_ratio=ratio,
        )

        trace = TraceRecorder()
        trace.merge(federal.values)
        federal_ids = set(trace.values)

        # Income
        income_items = self.income_items(model, federal, state_config)
        if income_items:
            income = self._record_items(trace, income_items, self.node)
            starting = sum(i.amount for i in income)
            starting_inputs = [self.node(i.key) for i in income]
            result.detail["income"] = {i.key: i.amount for i in income}
        else:
            starting, starting_inputs = self.starting_income(model, federal)
        result.starting_income = starting
        trace.computed(starting, self.node("startingIncome"), starting_inputs, self.LABELS["startingIncome"])

        additions = self._record_items(trace, self.additions(model, federal, state_config), self.adjustment_node)
        subtractions = self._record_items(trace, self.subtractions(model, federal, state_config), self.adjustment_node)
        result.additions = {i.key: i.amount for i in additions}
        result.subtractions = {i.key: i.amount for i in subtractions}
        total_additions = sum(result.additions.values())
        total_subtractions = sum(result.subtractions.values())
        if additions:
            trace.computed(total_additions, self.adjustment_node("additions"),
                           [self.adjustment_node(i.key) for i in additions], "Total additions")
        if subtractions:
            trace.computed(total_subtractions, self.adjustment_node("subtractions"),
                           [self.adjustment_node(i.key) for i in subtractions], "Total subtractions")

        result.state_agi = starting + total_additions - total_subtractions
        trace.computed(
            result.state_agi, self.node("stateAGI"),
            [self.node("startingIncome"), self.adjustment_node("additions"), self.adjustment_node("subtractions")],
            self.LABELS["stateAGI"],
        )

        # Deductions
        result.deduction = self.deduction(model, federal, result)
        trace.computed(result.deduction, self.node("deduction"), [self.node("stateAGI")], self.LABELS["deduction"])
        if not cfg.exemption_is_credit:
            result.exemptions = self.exemptions(model, federal, result)
            trace.computed(result.exemptions, self.node("exemptions"), [], self.LABELS["exemptions"])

        taxable = max(0, result.state_agi - result.deduction - result.exemptions)
        if cfg.apportionment_method == APPORTION_INCOME and prorate_ratio < 1:
            taxable = apportion_income(taxable, prorate_ratio)
        result.state_taxable_income = taxable
        trace.computed(
            taxable, self.node("taxableIncome"),
            [self.node("stateAGI"), self.node("deduction"), self.node("exemptions")],
            self.LABELS["taxableIncome"],
        )

        # Tax
        result.bracket_tax = self.income_tax(model, federal, result)
        trace.computed(result.bracket_tax, self.node("tax"), [self.node("taxableIncome")], self.LABELS["tax"])
        extra = self._record_items(trace, self.additional_taxes(model, federal, result, state_config), self.node)
        result.additional_taxes = {i.key: i.amount for i in extra}
        gross_tax = result.bracket_tax + sum(result.additional_taxes.values())
        tax_inputs = [self.node("tax")] + [self.node(i.key) for i in extra]

        # Part-year: scale the full-year tax, then subtract credits in full
        scale = cfg.apportionment_method == SCALE_TAX and prorate_ratio < 1
        if scale and not cfg.scale_after_credits:
            gross_tax = scale_full_year_tax(gross_tax, prorate_ratio)
            trace.computed(gross_tax, self.node("apportionedTax"), tax_inputs, self.LABELS["apportionedTax"])
            tax_inputs = [self.node("apportionedTax")]
        result.state_tax = gross_tax

        # Credits
        credits = self._record_items(trace, self.credits(model, federal, result, state_config), self.node)
        result.credits = {i.key: i.amount for i in credits}
        tax_after = max(0, gross_tax - result.total_credits)
        if scale and cfg.scale_after_credits:
            tax_after = scale_full_year_tax(tax_after, prorate_ratio)
        result.tax_after_credits = tax_after
        trace.computed(
            tax_after, self.node("taxAfterCredits"),
            tax_inputs + [self.node(i.key) for i in credits],
            self.LABELS["taxAfterCredits"],
        )

        refundable = self.refundable_credits(model, federal, result)
        if prorate_ratio < 1:
            refundable = [
                StateLineItem(i.key, i.label, apportion_income(i.amount, prorate_ratio), i.inputs) for i in refundable
            ]
        refundable = self._record_items(trace, refundable, self.node)
        result.refundable_credits = {i.key: i.amount for i in refundable}

        # Payments
        result.state_withholding = self.withholding(model, trace)
        result.total_payments = result.state_withholding + sum(result.refundable_credits.values())
        result.overpaid = max(0, result.total_payments - tax_after)
        result.amount_owed = max(0, tax_after - result.total_payments)
        payment_inputs = [self.node("withholding")] + [self.node(i.key) for i in refundable]
        trace.computed(result.overpaid, self.node("overpaid"),
                       [self.node("taxAfterCredits")] + payment_inputs, self.LABELS["overpaid"])
        trace.computed(result.amount_owed, self.node("amountOwed"),
                       [self.node("taxAfterCredits")] + payment_inputs, self.LABELS["amountOwed"])

        result.values = {k: v for k, v in trace.values.items() if k not in federal_ids}
        logger.debug(
            "%s %s: taxable=%d tax=%d after credits=%d ratio=%.4f",
            cfg.state_code, model.tax_year, taxable, gross_tax, tax_after, ratio,
        )
        return result

    # -- hooks -----------------------------------------------------------

    def effective_ratio(self, state_config: StateReturnConfig, ratio: float) -> float:
        """Ratio used to prorate a part-year or nonresident return."""
        return ratio

    def income_items(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        """
        Income classes for states that build income from the documents
        instead of a federal line. Empty means use ``starting_income``.
        """
        return []

    def starting_income(self, model: "TaxReturn", federal: "Form1040Result") -> Tuple[int, List[str]]:
        """
        Get the starting point for state taxable income calculation.

        Different states start from different federal amounts:
        - federal_agi: Most common (CA, NY, etc.)
        - federal_taxable_income: CO
        - gross_income: NJ, PA (override this hook)
        """
        if self.config.starts_from == FEDERAL_TAXABLE_INCOME:
            return federal.line15, ["form1040.line15"]
        if self.config.starts_from == GROSS_INCOME:
            return federal.line9, ["form1040.line9"]
        return federal.line11, ["form1040.line11"]

    def additions(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        """
        Additions to federal income for state purposes.

        Override in subclasses for state-specific additions.
        """
        items = []
        if self.config.hsa_addback and federal.schedule_1.line13:
            items.append(StateLineItem("hsaAddBack", "HSA deduction added back",
                                       federal.schedule_1.line13, ("adjustments.hsa",)))
        if self.config.tax_exempt_interest_addback:
            exempt = sum(f.box8 for f in model.form1099_ints) + sum(f.box11 for f in model.form1099_divs)
            if exempt:
                items.append(StateLineItem("taxExemptInterest", "Interest exempt from federal tax", exempt))
        return items

    def subtractions(
        self, model: "TaxReturn", federal: "Form1040Result", state_config: StateReturnConfig
    ) -> List[StateLineItem]:
        """
        Subtractions from federal income for state purposes.

        Common subtractions include:
        - Social Security benefits (exempt in most states)
        - US government interest
        - Pension/retirement income exclusions
        """
        cfg = self.config
        status = model.filing_status
        items = []
        if not cfg.social_security_taxable and federal.line6b:
            limit = cfg.social_security_agi_limit.get(status)
            if limit is None or federal.line11 <= limit:
                cap = cfg.social_security_exclusion_cap.get(status)
                amount = federal.line6b if cap is None else min(federal.line6b, cap)
                items.append(StateLineItem("socialSecurity", "Taxable Social Security benefits",
                                           amount, ("form1040.line6b",)))
        if not cfg.us_interest_taxable:
            us_interest = sum(f.box3 for f in model.form1099_ints)
            if us_interest:
                items.append(StateLineItem("usGovInterest", "U.S. government obligation interest", us_interest))
        if cfg.retirement_income_exempt:
            retirement = max(0, federal.line4b + federal.line5b)
            if retirement:
                items.append(StateLineItem("retirementIncome", "Pension and IRA distributions", retirement,
                                           ("form1040.line4b", "form1040.line5b")))
        elif cfg.pension_exclusion_limit:
            retirement = federal.line4b + federal.line5b
            exclusion = min(max(0, retirement), cfg.pension_exclusion_limit)
            if exclusion:
                items.append(StateLineItem("pensionExclusion", "Pension and annuity exclusion", exclusion,
                                           ("form1040.line4b", "form1040.line5b")))
        if cfg.federal_tax_deduction and federal.line24 > 0:
            cap = cfg.federal_tax_deduction_cap.get(status)
            amount = federal.line24 if cap is None else min(federal.line24, cap)
            items.append(StateLineItem("federalIncomeTax", "Federal income tax", amount, ("form1040.line24",)))
        return items

    def deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        """The standard deduction, or itemized deductions when the state allows them and they are larger."""
        cfg = self.config
        standard = self.standard_deduction(model, federal, result)
        if not cfg.itemized_deductions:
            return standard
        itemized = self.itemized_deduction(model, federal)
        result.detail["itemizedDeduction"] = itemized
        if itemized > standard:
            result.deduction_method = "itemized"
            return itemized
        return standard

    def standard_deduction(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        standard = self.config.get_standard_deduction(model.filing_status)
        if self.config.standard_deduction_rate is not None:
            standard = min(standard, apply_rate(max(0, result.state_agi), self.config.standard_deduction_rate))
        return standard

    def itemized_deduction(self, model: "TaxReturn", federal: "Form1040Result") -> int:
        """
        Schedule A line 17; with ITEMIZED_UNCAPPED_SALT, plus whatever state
        and local taxes the federal cap cut off. Zero unless the return
        itemizes federally.
        """
        itemized = model.deductions.itemized
        if model.deductions.method != DeductionMethod.ITEMIZED or itemized is None:
            return 0
        total = federal.schedule_a.line17
        if self.config.itemized_deductions == ITEMIZED_UNCAPPED_SALT:
            actual_salt = (
                itemized.state_local_income_taxes
                + itemized.state_local_sales_taxes
                + itemized.real_estate_taxes
                + itemized.personal_property_taxes
            )
            total += max(0, actual_salt - federal.schedule_a.line7)
        return total

    def exemption_count(self, model: "TaxReturn") -> Tuple[int, int]:
        """(filer exemptions, dependent exemptions)"""
        filers = 2 if model.filing_status == FilingStatus.MARRIED_JOINT else 1
        return filers, len(model.dependents)

    def exemptions(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        cfg = self.config
        _, dependents = self.exemption_count(model)
        return cfg.get_personal_exemption(model.filing_status) + dependents * cfg.dependent_exemption_amount

    def income_tax(self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult) -> int:
        return compute_bracket_tax(result.state_taxable_income, self.config.get_brackets(model.filing_status))

    def additional_taxes(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        """Taxes added to the bracket tax before credits (surtaxes, local taxes)."""
        return []

    def credits(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        result: StateComputeResult,
        state_config: StateReturnConfig,
    ) -> List[StateLineItem]:
        """Nonrefundable credits, limited in total to the tax."""
        cfg = self.config
        status = model.filing_status
        items = []
        exemption_limit = cfg.exemption_credit_agi_limit.get(status)
        if cfg.exemption_is_credit and (exemption_limit is None or federal.line11 <= exemption_limit):
            filers, dependents = self.exemption_count(model)
            amount = cfg.get_personal_exemption(status) * filers + cfg.dependent_exemption_amount * dependents
            if amount:
                items.append(StateLineItem("exemptionCredits", "Personal exemption credits", amount))
        renter = self.renter_credit(model, result, state_config)
        if renter:
            items.append(StateLineItem("rentersCredit", "Renter's credit", renter, (self.node("stateAGI"),)))
        if cfg.dependent_care_credit_rate and federal.dependent_care_credit.credit_amount:
            items.append(StateLineItem(
                "dependentCareCredit", "Child and dependent care credit",
                apply_rate(federal.dependent_care_credit.credit_amount, cfg.dependent_care_credit_rate),
                ("credits.dependentCare",),
            ))
        if not cfg.child_credit_refundable:
            items.extend(self._child_credit(federal))
        if not cfg.food_credit_refundable:
            items.extend(self._food_credit(model, federal))
        if cfg.eitc_percentage and not cfg.eitc_refundable:
            eitc = self.state_eitc(federal)
            if eitc:
                items.append(StateLineItem("stateEITC", "State earned income credit", eitc, ("eic.creditAmount",)))
        return items

    def refundable_credits(
        self, model: "TaxReturn", federal: "Form1040Result", result: StateComputeResult
    ) -> List[StateLineItem]:
        cfg = self.config
        items = []
        if cfg.child_credit_refundable:
            items.extend(self._child_credit(federal))
        if cfg.food_credit_refundable:
            items.extend(self._food_credit(model, federal))
        if cfg.eitc_percentage and cfg.eitc_refundable:
            eitc = self.state_eitc(federal)
            if eitc:
                items.append(StateLineItem("stateEITC", "State earned income credit", eitc, ("eic.creditAmount",)))
        return items

    def state_eitc(self, federal: "Form1040Result") -> int:
        """
        Calculate state EITC based on federal EITC.

        Many states provide a state EITC as a percentage of the federal credit.
        """
        federal_eitc = federal.earned_income_credit.credit_amount
        cfg = self.config
        rate = cfg.eitc_percentage
        if cfg.eitc_percentage_no_children is not None and not federal.earned_income_credit.num_qualifying_children:
            rate = cfg.eitc_percentage_no_children
        if rate and federal_eitc > 0:
            return apply_rate(federal_eitc, rate)
        return 0

    def _child_credit(self, federal: "Form1040Result") -> List[StateLineItem]:
        children = federal.child_tax_credit.num_qualifying_children
        if not self.config.child_credit_per_child or not children:
            return []
        return [StateLineItem("childCredit", "State child tax credit",
                              self.config.child_credit_per_child * children, ("ctc.initialCredit",))]

    def _food_credit(self, model: "TaxReturn", federal: "Form1040Result") -> List[StateLineItem]:
        cfg = self.config
        if not cfg.food_credit_per_exemption:
            return []
        limit = cfg.food_credit_agi_limit.get(model.filing_status)
        if limit is not None and federal.line11 > limit:
            return []
        filers, dependents = self.exemption_count(model)
        people = [model.taxpayer]
        if model.filing_status == FilingStatus.MARRIED_JOINT:
            people.append(model.spouse)
        seniors = sum(1 for p in people if is_senior(p, model.tax_year))
        amount = cfg.food_credit_per_exemption * (filers + dependents) + cfg.food_credit_senior_amount * seniors
        return [StateLineItem("foodTaxCredit", "Food sales tax credit", amount, ("form1040.line11",))]

    def renter_credit(self, model: "TaxReturn", result: StateComputeResult, state_config: StateReturnConfig) -> int:
        cfg = self.config
        if not state_config.rent_paid or not (cfg.renter_credit_single or cfg.renter_credit_joint):
            return 0
        single_like = model.filing_status.value in ("single", "mfs")
        credit = cfg.renter_credit_single if single_like else cfg.renter_credit_joint
        limit = cfg.renter_credit_income_limit_single if single_like else cfg.renter_credit_income_limit_joint
        if limit is not None and result.state_agi > limit:
            return 0
        return credit

    def withholding(self, model: "TaxReturn", trace: TraceRecorder) -> int:
        """State tax withheld: W-2 box 17 where box 15 names this state."""
        total = 0
        inputs = []
        for w2 in model.w2s:
            state = w2.box15_state
            if state == self.state_code or (not state and self.config.withholding_includes_blank_state):
                if w2.box17_state_income_tax:
                    leaf = trace.document(w2.box17_state_income_tax, "w2", w2.id, "box17",
                                          f"W-2 {w2.employer_name or w2.id} state income tax withheld")
                    inputs.append(leaf.node_id)
                    total += w2.box17_state_income_tax
        trace.computed(total, self.node("withholding"), inputs, self.LABELS["withholding"])
        return total

    def _record_items(self, trace: TraceRecorder, items: Iterable[StateLineItem], node_for) -> List[StateLineItem]:
        recorded = []
        for item in items:
            if item.amount == 0:
                continue
            trace.computed(item.amount, node_for(item.key), item.inputs, item.label)
            recorded.append(item)
        return recorded


class NoIncomeTaxStateModule(StateRulesModule):
    """States without a broad personal income tax: everything is zero."""

    def compute(
        self,
        model: "TaxReturn",
        federal: "Form1040Result",
        state_config: StateReturnConfig,
    ) -> StateComputeResult:
        cfg = self.config
        result = StateComputeResult(
            state_code=cfg.state_code,
            state_name=cfg.state_name,
            form_label=cfg.form_label,
            tax_year=model.tax_year,
            residency_type=state_config.residency_type,
            apportionment_ratio=compute_apportionment_ratio(state_config, model.tax_year),
            detail={"noIncomeTax": True},
        )
        trace = TraceRecorder()
        trace.zero(f"{cfg.node_prefix}.taxAfterCredits", f"{cfg.state_name}: no state income tax")
        result.values = dict(trace.values)
        return result
