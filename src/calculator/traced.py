"""
Computation trace.

Every computed amount is wrapped in a ``TracedValue`` carrying a node id and
the ids of the nodes it was derived from. The nodes of one computation form
an acyclic graph; a node may only reference nodes created before it in the
same pass, or document leaf nodes (``w2:{id}:box1``, ``1099int:{id}:box1``).

Internally the graph is an insertion-ordered ``dict``. ``serialize_values``
and ``deserialize_values`` are the only conversion to and from the JSON
shape ``{nodeId: {amount, nodeId, inputs, label}}``.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Any

from calculator.exceptions import TraceGraphError

logger = logging.getLogger(__name__)

TraceMap = Dict[str, "TracedValue"]


@dataclass(frozen=True)
class TracedValue:
    amount: int
    node_id: str
    inputs: Tuple[str, ...] = ()
    label: str = ""
    is_document: bool = False

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "amount": self.amount,
            "nodeId": self.node_id,
            "inputs": list(self.inputs),
            "label": self.label,
        }
        if self.is_document:
            data["source"] = "document"
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "TracedValue":
        return cls(
            amount=int(data["amount"]),
            node_id=data["nodeId"],
            inputs=tuple(data.get("inputs", ())),
            label=data.get("label", ""),
            is_document=data.get("source") == "document",
        )


def traced_from_computation(
    amount: int,
    node_id: str,
    input_ids: Iterable[str] = (),
    label: str = "",
) -> TracedValue:
    return TracedValue(amount=int(amount), node_id=node_id, inputs=tuple(input_ids), label=label)


def traced_zero(node_id: str, label: str = "") -> TracedValue:
    """Placeholder for a line that exists on the form but has nothing in it."""
    return traced_from_computation(0, node_id, (), label)


def traced_from_document(
    amount: int,
    document_type: str,
    document_id: str,
    box: str,
    label: str = "",
) -> TracedValue:
    """
    Leaf node for a value read straight off a source document.

    Node id is ``{document_type}:{document_id}:{box}``, e.g. ``w2:acme:box1``.
    """
    node_id = document_node_id(document_type, document_id, box)
    return TracedValue(
        amount=int(amount),
        node_id=node_id,
        inputs=(),
        label=label or f"{document_type.upper()} {document_id} {box}",
        is_document=True,
    )


def document_node_id(document_type: str, document_id: str, box: str) -> str:
    return f"{document_type}:{document_id}:{box}"


class TraceRecorder:
    """
    Ordered collection of the nodes produced by one computation.

    ``computed`` drops inputs that were never recorded, so a line whose
    upstream stage did not run (e.g. Schedule D with no capital activity)
    does not point at a missing node.
    """

    def __init__(self) -> None:
        self.values: TraceMap = {}

    def __contains__(self, node_id: str) -> bool:
        return node_id in self.values

    def __len__(self) -> int:
        return len(self.values)

    def get(self, node_id: str) -> Optional[TracedValue]:
        return self.values.get(node_id)

    def add(self, value: TracedValue) -> TracedValue:
        """
        Record a node. Re-adding an identical node is a no-op.

        Raises:
            TraceGraphError: If a different node was already recorded under the same id
        """
        existing = self.values.get(value.node_id)
        if existing is not None:
            if existing != value:
                raise TraceGraphError(f"Node {value.node_id!r} recorded twice with different values")
            return existing
        self.values[value.node_id] = value
        return value

    def document(self, amount: int, document_type: str, document_id: str, box: str, label: str = "") -> TracedValue:
        return self.add(traced_from_document(amount, document_type, document_id, box, label))

    def computed(self, amount: int, node_id: str, input_ids: Iterable[str] = (), label: str = "") -> TracedValue:
        present = tuple(i for i in input_ids if i in self.values and i != node_id)
        return self.add(traced_from_computation(amount, node_id, present, label))

    def zero(self, node_id: str, label: str = "") -> TracedValue:
        return self.add(traced_zero(node_id, label))

    def merge(self, other: TraceMap) -> None:
        for node_id, value in other.items():
            self.values.setdefault(node_id, value)


def serialize_values(values: TraceMap) -> Dict[str, Dict[str, Any]]:
    """Internal map -> JSON-ready object, preserving insertion order."""
    return {node_id: value.to_dict() for node_id, value in values.items()}


def deserialize_values(data: Any) -> TraceMap:
    """
    Inverse of ``serialize_values``. Accepts the decoded object or a JSON string.

    Raises:
        TraceGraphError: If an entry's key and nodeId disagree
    """
    if isinstance(data, (str, bytes)):
        data = json.loads(data)
    values: TraceMap = {}
    for node_id, entry in data.items():
        value = TracedValue.from_dict(entry)
        if value.node_id != node_id:
            raise TraceGraphError(f"Node key {node_id!r} does not match nodeId {value.node_id!r}")
        values[node_id] = value
    return values


def assert_acyclic(values: TraceMap, allow_missing: bool = False) -> List[str]:
    """
    Check that the graph has no cycles and every input exists.

    Returns the node ids in a dependency-respecting order.

    Raises:
        TraceGraphError: On a cycle, or on a dangling input unless ``allow_missing``
    """
    order: List[str] = []
    state: Dict[str, int] = {}  # 1 = visiting, 2 = done

    for root in values:
        if state.get(root) == 2:
            continue
        stack: List[Tuple[str, int]] = [(root, 0)]
        state[root] = 1
        while stack:
            node_id, idx = stack.pop()
            inputs = values[node_id].inputs
            if idx < len(inputs):
                stack.append((node_id, idx + 1))
                child = inputs[idx]
                if child not in values:
                    if allow_missing:
                        continue
                    raise TraceGraphError(f"Node {node_id!r} references missing input {child!r}")
                child_state = state.get(child)
                if child_state == 1:
                    raise TraceGraphError(f"Cycle detected through {child!r}")
                if child_state is None:
                    state[child] = 1
                    stack.append((child, 0))
            else:
                state[node_id] = 2
                order.append(node_id)

    logger.debug("Trace graph verified: %d nodes", len(order))
    return order
