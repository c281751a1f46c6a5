"""Tests for topological ordering and branch tracking."""

import pytest

from vyntra.core.exceptions import SchedulingError
from vyntra.engine.scheduler import GraphScheduler, is_dag, topological_order
from vyntra.schemas.workflow import WorkflowDocument

from .builders import branching_document, make_document, make_edge, make_node


def _workflow(raw):
    # Bypasses reference validation so cyclic graphs can be built.
    return WorkflowDocument.model_validate(raw).workflow


def test_successors_release_fifo_in_edge_order():
    raw = make_document(
        [
            make_node("n1", "trigger.manual"),
            make_node("n3", "logic.delay"),
            make_node("n2", "logic.delay"),
            make_node("n4", "output.export"),
        ],
        [
            make_edge("e1", "n1", "n2"),
            make_edge("e2", "n1", "n3"),
            make_edge("e3", "n2", "n4"),
            make_edge("e4", "n3", "n4"),
        ],
    )

    order = [node.id for node in topological_order(_workflow(raw))]

    assert order == ["n1", "n2", "n3", "n4"]


def test_edges_to_unknown_nodes_are_ignored():
    raw = make_document(
        [make_node("n1", "trigger.manual"), make_node("n2", "logic.delay")],
        [make_edge("e1", "n1", "n2"), make_edge("e2", "ghost", "n2")],
    )

    assert [n.id for n in topological_order(_workflow(raw))] == ["n1", "n2"]


def test_cycle_detection():
    raw = make_document(
        [
            make_node("n1", "trigger.manual"),
            make_node("n2", "logic.delay"),
            make_node("n3", "logic.delay"),
        ],
        [
            make_edge("e1", "n1", "n2"),
            make_edge("e2", "n2", "n3"),
            make_edge("e3", "n3", "n2"),
        ],
    )
    workflow = _workflow(raw)

    assert not is_dag(workflow)
    with pytest.raises(SchedulingError):
        GraphScheduler(workflow)


def test_only_entry_node_starts_active():
    scheduler = GraphScheduler(_workflow(branching_document()))

    assert scheduler.is_active("n1")
    assert not scheduler.is_active("n2")
    assert scheduler.follow(scheduler.order[0]) == ["n2"]
    assert scheduler.is_active("n2")


def test_follow_selected_port_only():
    workflow = _workflow(branching_document())
    scheduler = GraphScheduler(workflow)
    condition = workflow.get_node("n2")

    assert scheduler.follow(condition, "false") == ["n4"]
    assert scheduler.is_active("n4")
    assert not scheduler.is_active("n3")
