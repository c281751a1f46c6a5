"""Tests for workflow document validation."""

import json

import pytest

from vyntra.core.exceptions import WorkflowValidationError
from vyntra.engine.validator import parse_document_text, require_valid_document, validate_workflow_document
from vyntra.schemas.workflow import WorkflowDocument

from .builders import branching_document, make_edge, make_node, port, scenario_a_document


def test_valid_document_is_parsed():
    result = validate_workflow_document(scenario_a_document())

    assert result.ok
    assert result.errors == []
    assert isinstance(result.document, WorkflowDocument)
    assert result.document.workflow.entry_node.type == "trigger.manual"


def test_accepts_json_text():
    result = validate_workflow_document(json.dumps(branching_document()))
    assert result.ok


def test_round_trips_through_to_dict():
    document = require_valid_document(scenario_a_document())
    dumped = document.to_dict()

    assert dumped["workflow"]["nodes"][0]["inputs"] == []
    assert dumped["workflow"]["nodes"][1]["inputs"][0]["schema"] == "JSON"
    assert validate_workflow_document(dumped).ok


def test_wrong_schema_version():
    raw = scenario_a_document()
    raw["schema_version"] = "2.0"

    result = validate_workflow_document(raw)

    assert not result.ok
    assert any(error.startswith("schema_version:") for error in result.errors)


def test_bad_workflow_id_pattern():
    raw = scenario_a_document()
    raw["workflow"]["id"] = "workflow-1"

    result = validate_workflow_document(raw)

    assert not result.ok
    assert any(error.startswith("workflow.id:") for error in result.errors)


def test_unknown_node_type_is_a_shape_error():
    raw = scenario_a_document()
    raw["workflow"]["nodes"][1]["type"] = "ai.translate"

    result = validate_workflow_document(raw)

    assert not result.ok
    assert any(error.startswith("workflow.nodes.1.type:") for error in result.errors)


def test_all_reference_errors_are_collected():
    nodes = [
        make_node("n1", "trigger.manual", inputs=[port("in")]),
        make_node("n2", "trigger.webhook"),
        make_node("n3", "ai.summarize", inputs=[]),
        make_node("n3", "logic.delay"),
    ]
    edges = [
        make_edge("e1", "n1", "n3", source_port="missing"),
        make_edge("e1", "n1", "ghost"),
    ]
    raw = {
        "schema_version": "1.0",
        "workflow": {
            "id": "wf_broken",
            "name": "Broken",
            "description": "Many problems",
            "entry_node_id": "n1",
            "nodes": nodes,
            "edges": edges,
        },
    }

    errors = validate_workflow_document(raw).errors

    assert "workflow.nodes: Exactly one trigger node is required." in errors
    assert "workflow.nodes.0.inputs: Trigger node n1 must have no inputs." in errors
    assert "workflow.nodes.2.inputs: Non-trigger node n3 must have at least one input." in errors
    assert "workflow.nodes.3.id: Duplicate node id: n3" in errors
    assert "workflow.edges.1.id: Duplicate edge id: e1" in errors
    assert "workflow.edges.0.source.port_id: Edge e1 source port must reference an output port." in errors
    assert "workflow.edges.1.target.node_id: Edge e1 target node not found." in errors
    assert not any("not a DAG" in error for error in errors)


def test_entry_node_must_be_the_trigger():
    raw = scenario_a_document()
    raw["workflow"]["entry_node_id"] = "n2"

    errors = validate_workflow_document(raw).errors

    assert errors == ["workflow.entry_node_id: entry_node_id must point to the trigger node."]


def test_condition_needs_two_outputs_and_a_valid_default():
    raw = branching_document()
    condition = raw["workflow"]["nodes"][1]
    condition["outputs"] = [port("true")]
    condition["config"]["default_output"] = "otherwise"
    raw["workflow"]["edges"] = [e for e in raw["workflow"]["edges"] if e["id"] != "e3"]

    errors = validate_workflow_document(raw).errors

    assert "workflow.nodes.1.outputs: Condition node n2 must have at least two outputs." in errors
    assert (
        "workflow.nodes.1.config.default_output: "
        "Condition node n2 default_output must match an output port id."
    ) in errors


def test_target_must_be_an_input_port():
    raw = scenario_a_document()
    raw["workflow"]["edges"][0]["target"]["port_id"] = "out"

    errors = validate_workflow_document(raw).errors

    assert errors == ["workflow.edges.0.target.port_id: Edge e1 target port must reference an input port."]


def test_cycle_is_rejected():
    raw = scenario_a_document()
    raw["workflow"]["edges"].append(make_edge("e9", "n4", "n2"))

    result = validate_workflow_document(raw)

    assert not result.ok
    assert any("not a DAG" in error for error in result.errors)


def test_require_valid_document_raises_with_errors():
    raw = scenario_a_document()
    raw["workflow"]["entry_node_id"] = "n3"

    with pytest.raises(WorkflowValidationError) as exc_info:
        require_valid_document(raw)

    assert exc_info.value.message == "Workflow document failed validation"
    assert exc_info.value.errors == ["workflow.entry_node_id: entry_node_id must point to the trigger node."]


class TestParseDocumentText:
    def test_strips_code_fences(self):
        text = "```json\n" + json.dumps(scenario_a_document()) + "\n```"
        assert parse_document_text(text).ok

    def test_fence_opened_on_the_same_line(self):
        text = "```json " + json.dumps(scenario_a_document()) + "```"
        assert parse_document_text(text).ok

    def test_invalid_json(self):
        result = parse_document_text("here is your workflow: {")
        assert result.errors == ["$: response is not valid JSON"]


def test_duplicate_node_id_is_not_reported_as_a_cycle():
    raw = scenario_a_document()
    raw["workflow"]["nodes"].append(dict(raw["workflow"]["nodes"][1]))

    errors = validate_workflow_document(raw).errors

    assert errors == ["workflow.nodes.4.id: Duplicate node id: n2"]
