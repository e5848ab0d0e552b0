"""Tests for the computation trace graph."""

import json

import pytest

from calculator.decimal_math import cents
from calculator.exceptions import TraceGraphError
from calculator.tax_calculator import compute_all
from calculator.traced import (
    TracedValue,
    TraceRecorder,
    assert_acyclic,
    deserialize_values,
    document_node_id,
    serialize_values,
    traced_from_computation,
    traced_from_document,
    traced_zero,
)
from models.income import Form1099INT

from factories import make_return


class TestTraceRecorder:

    def test_document_leaf_node_id(self):
        trace = TraceRecorder()
        leaf = trace.document(cents(100), "w2", "abc", "box1", "W-2 box 1")

        assert leaf.node_id == "w2:abc:box1"
        assert leaf.node_id == document_node_id("w2", "abc", "box1")
        assert leaf.inputs == ()
        assert leaf.is_document

    def test_computed_drops_unknown_inputs(self):
        trace = TraceRecorder()
        trace.zero("a")
        value = trace.computed(5, "b", ["a", "never.recorded"])

        assert value.inputs == ("a",)

    def test_conflicting_node_id_raises(self):
        trace = TraceRecorder()
        trace.computed(cents(10), "form1040.line11", [], "AGI")

        with pytest.raises(TraceGraphError):
            trace.computed(cents(20), "form1040.line11", [], "AGI")
        trace.document(cents(10), "w2", "a", "box1")
        with pytest.raises(TraceGraphError):
            trace.document(cents(11), "w2", "a", "box1")
        assert trace.get("form1040.line11").amount == cents(10)

    def test_identical_node_recorded_once(self):
        trace = TraceRecorder()
        first = trace.document(cents(10), "w2", "a", "box17", "W-2 state withholding")
        again = trace.document(cents(10), "w2", "a", "box17", "W-2 state withholding")

        assert again is first
        assert len(trace) == 1

    def test_merge_keeps_existing_nodes(self):
        trace = TraceRecorder()
        trace.computed(1, "x")
        trace.merge({"x": traced_zero("x"), "y": traced_zero("y")})

        assert trace.get("x").amount == 1
        assert "y" in trace
        assert len(trace) == 2

    def test_traced_value_is_frozen(self):
        value = traced_from_computation(10, "n", ["a"], "label")
        with pytest.raises(AttributeError):
            value.amount = 11


class TestSerialization:

    def test_round_trip_preserves_order_and_values(self):
        values = {
            "w2:1:box1": traced_from_document(cents(500), "w2", "1", "box1", "W-2"),
            "form1040.line1a": traced_from_computation(cents(500), "form1040.line1a", ["w2:1:box1"], "Line 1a"),
        }
        data = serialize_values(values)

        assert list(data) == ["w2:1:box1", "form1040.line1a"]
        assert data["form1040.line1a"] == {
            "amount": cents(500), "nodeId": "form1040.line1a", "inputs": ["w2:1:box1"], "label": "Line 1a",
        }
        assert deserialize_values(json.dumps(data)) == values

    def test_mismatched_key_rejected(self):
        data = {"a": {"amount": 1, "nodeId": "b", "inputs": [], "label": ""}}
        with pytest.raises(TraceGraphError):
            deserialize_values(data)


class TestAcyclic:

    def test_cycle_detected(self):
        values = {
            "a": TracedValue(1, "a", ("b",)),
            "b": TracedValue(1, "b", ("a",)),
        }
        with pytest.raises(TraceGraphError):
            assert_acyclic(values)

    def test_missing_input(self):
        values = {"a": TracedValue(1, "a", ("ghost",))}
        with pytest.raises(TraceGraphError):
            assert_acyclic(values)
        assert assert_acyclic(values, allow_missing=True) == ["a"]

    def test_order_puts_inputs_first(self):
        values = {
            "total": TracedValue(3, "total", ("x", "y")),
            "x": TracedValue(1, "x"),
            "y": TracedValue(2, "y", ("x",)),
        }
        order = assert_acyclic(values)
        assert order.index("x") < order.index("y") < order.index("total")


class TestFullReturnGraph:

    def test_full_return_graph_is_acyclic_and_closed(self, registry, settings):
        model = make_return(
            wages=85000, withheld=9000, state="CA", state_withheld=3000,
            form1099_ints=[Form1099INT(id="bank", payer_name="Bank", box1=cents(1800))],
        )
        result = compute_all(model, registry=registry, settings=settings)

        order = assert_acyclic(result.values)
        assert len(order) == len(result.values)
        assert "form540.caTax" in result.values
        assert "scheduleB.line4" in result.values
        assert result.values["form1040.line1a"].inputs == ("w2:w2-1:box1",)

    def test_serialized_values_round_trip(self, registry, settings):
        result = compute_all(make_return(wages=60000, state="IL"), registry=registry, settings=settings)

        data = result.to_dict()["values"]
        assert deserialize_values(json.loads(json.dumps(data))) == result.values

    def test_every_node_amount_is_integer_cents(self, registry, settings):
        result = compute_all(make_return(wages=61234.56, state="NY"), registry=registry, settings=settings)
        assert all(isinstance(v.amount, int) for v in result.values.values())
