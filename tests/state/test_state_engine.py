"""Tests for the state registry, the state engine and cross-state consistency checks."""

from datetime import date

import pytest

from calculator.exceptions import StateModuleNotFoundError
from calculator.state import NO_INCOME_TAX_STATES, StateRegistry, StateTaxEngine
from calculator.state.configs.state_2025 import ca
from calculator.tax_calculator import compute_all
from calculator.traced import assert_acyclic
from calculator.year_registry import default_registry
from models.state import StateCode, StateReturnConfig
from models.taxpayer import Dependent

from factories import make_return

ALL_STATES = default_registry().get_year_module(2025).supported_states()


class TestStateRegistry:

    def test_supported_states(self):
        assert len(ALL_STATES) == 51
        assert set(ALL_STATES) == {code.value for code in StateCode}

    def test_lookup_is_case_insensitive(self, registry):
        states = registry.get_year_module(2025).state_registry
        assert states.get(" ca ").state_code == "CA"
        assert states.is_supported("ny")
        assert states.get("ZZ") is None

    def test_no_income_tax_states_always_present(self):
        registry = StateRegistry(2025)
        assert registry.supported_states() == sorted(NO_INCOME_TAX_STATES)

    def test_register_rejects_other_year(self):
        registry = StateRegistry(2025)
        with pytest.raises(ValueError):
            registry.register(ca.build(2026))

    def test_register_replaces(self):
        registry = StateRegistry(2026)
        registry.register(ca.build(2026))
        replacement = ca.build(2026)
        registry.register(replacement)
        assert registry.get("CA") is replacement

    def test_2026_modules_carry_year(self, registry):
        states = registry.get_year_module(2026).state_registry
        assert states.tax_year == 2026
        assert states.get("CA").tax_year == 2026


class TestStateTaxEngine:

    def test_unsupported_state_returns_none(self, federal_only_registry):
        model = make_return(wages=50000, state="AL")
        federal = federal_only_registry.get_year_module(2025).compute_form1040(model)
        engine = StateTaxEngine(federal_only_registry.get_year_module(2025).state_registry)

        assert engine.calculate(model, federal, model.state_returns[0]) is None
        assert not engine.is_state_supported("AL")

    def test_strict_raises(self, federal_only_registry):
        model = make_return(wages=50000, state="AL")
        federal = federal_only_registry.get_year_module(2025).compute_form1040(model)
        engine = StateTaxEngine(federal_only_registry.get_year_module(2025).state_registry, strict=True)

        with pytest.raises(StateModuleNotFoundError) as exc:
            engine.calculate(model, federal, model.state_returns[0])
        assert exc.value.state_code == "AL"
        assert exc.value.tax_year == 2025

    def test_no_income_tax_state(self, registry, settings):
        model = make_return(wages=50000, state="TX", state_withheld=0)
        result = compute_all(model, registry=registry, settings=settings)
        tx = result.state_result("TX")

        assert list(tx.values) == ["tx.taxAfterCredits"]
        assert tx.values["tx.taxAfterCredits"].amount == 0
        assert tx.detail["noIncomeTax"] is True
        assert tx.tax_after_credits == tx.overpaid == tx.amount_owed == 0


def _consistency_return(state):
    child = Dependent(first_name="Kid", relationship="daughter", ssn="111-22-3333", date_of_birth=date(2016, 2, 2))
    config = StateReturnConfig(
        state_code=state, residency_type="part-year",
        move_in_date=date(2025, 3, 15), rent_paid=True,
    )
    return make_return(
        wages=85000, withheld=8000, state=state, state_withheld=2500,
        dependents=[child], state_returns=[config],
    )


@pytest.mark.parametrize("state", ALL_STATES)
class TestEveryState:

    def test_amounts_are_consistent(self, registry, settings, state):
        result = compute_all(_consistency_return(state), registry=registry, settings=settings).state_result(state)

        assert result.tax_after_credits >= 0
        assert result.overpaid >= 0 and result.amount_owed >= 0
        assert result.overpaid * result.amount_owed == 0
        if not result.detail.get("noIncomeTax"):
            assert result.overpaid - result.amount_owed == result.total_payments - result.tax_after_credits

    def test_trace_is_complete(self, registry, settings, state):
        result = compute_all(_consistency_return(state), registry=registry, settings=settings)
        state_result = result.state_result(state)
        module = registry.get_year_module(2025).get_state_module(state)

        assert f"{module.config.node_prefix}.taxAfterCredits" in state_result.values
        assert_acyclic(result.values)
        for node_id, value in state_result.values.items():
            assert result.values[node_id] == value
