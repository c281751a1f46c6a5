"""Tests for semantic edit commands."""

import pytest

from vyntra.services.semantic_edit import (
    REJECTED_MESSAGE,
    USAGE_MESSAGE,
    apply_semantic_command,
    find_type_from_command,
)


def _node(document, node_id):
    return document.workflow.get_node(node_id)


def test_rename(scenario_a):
    result = apply_semantic_command(scenario_a, "rename n2 to Score Lead")

    assert result.ok
    assert result.message == "Renamed n2 to Score Lead."
    assert _node(result.document, "n2").name == "Score Lead"
    assert _node(scenario_a, "n2").name == "N2"


def test_rename_by_name_is_case_insensitive(scenario_a):
    result = apply_semantic_command(scenario_a, "Rename n3 to Triage")
    result = apply_semantic_command(result.document, "rename TRIAGE to Sort")

    assert result.ok
    assert _node(result.document, "n3").name == "Sort"


def test_rename_unknown_node(scenario_a):
    result = apply_semantic_command(scenario_a, "rename n9 to Nope")

    assert not result.ok
    assert result.message == "Node to rename not found."
    assert result.document is None


def test_delete_removes_node_and_edges(scenario_a):
    result = apply_semantic_command(scenario_a, "delete n3")

    assert result.ok
    assert [n.id for n in result.document.workflow.nodes] == ["n1", "n2", "n4"]
    assert [e.id for e in result.document.workflow.edges] == ["e1"]


def test_trigger_cannot_be_deleted(scenario_a):
    result = apply_semantic_command(scenario_a, "delete n1")

    assert not result.ok
    assert result.message == "Node could not be deleted (not found or is trigger)."


def test_add_delay_with_seconds(scenario_a):
    result = apply_semantic_command(scenario_a, "add delay 45 seconds")

    assert result.ok
    assert result.message == "Added delay node (45s) at end."
    delay = _node(result.document, "n5")
    assert delay.type == "logic.delay"
    assert delay.config["seconds"] == 45
    assert delay.position.x == _node(scenario_a, "n4").position.x + 240
    edge = result.document.workflow.edges[-1]
    assert (edge.id, edge.source.node_id, edge.target.node_id) == ("e4", "n4", "n5")


def test_add_node_by_alias(scenario_a):
    result = apply_semantic_command(scenario_a, "add classify at end")

    assert result.ok
    assert result.message == "Added ai.classify at the end of the flow."
    added = _node(result.document, "n5")
    assert added.type == "ai.classify"
    assert added.config["labels"] == ["high", "medium", "low"]


def test_added_condition_is_valid(scenario_a):
    result = apply_semantic_command(scenario_a, "add a branch")

    assert result.ok
    condition = _node(result.document, "n5")
    assert condition.output_ids == ["true", "false"]
    assert condition.config["default_output"] == "false"


def test_connect_rejected_when_it_creates_a_cycle(scenario_a):
    result = apply_semantic_command(scenario_a, "connect n4 to n2")

    assert not result.ok
    assert result.message == REJECTED_MESSAGE
    assert "workflow.edges: Workflow graph is not a DAG (cycle detected)." in result.errors


def test_connect(branching):
    result = apply_semantic_command(branching, "connect n3 to n4")

    assert result.ok
    edge = result.document.workflow.edges[-1]
    assert (edge.id, edge.source.node_id, edge.target.node_id) == ("e4", "n3", "n4")


def test_connect_unknown_node(scenario_a):
    result = apply_semantic_command(scenario_a, "connect n2 to n42")

    assert not result.ok
    assert result.message == "Could not connect nodes."


@pytest.mark.parametrize(
    ("command", "message"),
    [
        ("   ", "Type a command first."),
        ("add a translator", "I couldn't map that request to a supported node type yet."),
        ("make it better", USAGE_MESSAGE),
    ],
)
def test_unusable_commands(scenario_a, command, message):
    result = apply_semantic_command(scenario_a, command)

    assert not result.ok
    assert result.message == message


@pytest.mark.parametrize(
    ("command", "node_type"),
    [
        ("add a summary", "ai.summarize"),
        ("add sop", "ai.generate_report"),
        ("add wait", "logic.delay"),
        ("add save to db", "output.db_save"),
        ("add csv export", "output.export"),
    ],
)
def test_alias_mapping(command, node_type):
    assert find_type_from_command(command) == node_type
