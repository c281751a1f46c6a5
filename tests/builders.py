"""Document builders and fake collaborators shared by the tests."""

from __future__ import annotations

from typing import Any

SCENARIO_TEXT = "Client asks for weekly reporting and lead triage support."
SCENARIO_LABELS = ["lead", "operations", "admin", "other"]


def port(port_id: str, label: str | None = None) -> dict[str, Any]:
    return {"id": port_id, "label": label or port_id.title(), "schema": "JSON"}


def make_node(
    node_id: str,
    node_type: str,
    config: dict[str, Any] | None = None,
    *,
    name: str | None = None,
    inputs: list[dict[str, Any]] | None = None,
    outputs: list[dict[str, Any]] | None = None,
    x: float = 0,
) -> dict[str, Any]:
    is_trigger = node_type.startswith("trigger.")
    return {
        "id": node_id,
        "type": node_type,
        "name": name or node_id.upper(),
        "position": {"x": x, "y": 120},
        "inputs": inputs if inputs is not None else ([] if is_trigger else [port("in")]),
        "outputs": outputs if outputs is not None else [port("out")],
        "config": config or {},
        "ui": {"icon": "sparkles", "color": "neutral"},
    }


def make_edge(
    edge_id: str,
    source: str,
    target: str,
    source_port: str = "out",
    target_port: str = "in",
) -> dict[str, Any]:
    return {
        "id": edge_id,
        "source": {"node_id": source, "port_id": source_port},
        "target": {"node_id": target, "port_id": target_port},
        "label": None,
        "condition": None,
    }


def make_document(
    nodes: list[dict[str, Any]],
    edges: list[dict[str, Any]],
    *,
    workflow_id: str = "wf_test",
    entry_node_id: str = "n1",
) -> dict[str, Any]:
    return {
        "schema_version": "1.0",
        "workflow": {
            "id": workflow_id,
            "name": "Test Workflow",
            "description": "Workflow used in tests",
            "tags": ["va"],
            "entry_node_id": entry_node_id,
            "variables": {},
            "nodes": nodes,
            "edges": edges,
        },
    }


def chain(nodes: list[dict[str, Any]], **kwargs: Any) -> dict[str, Any]:
    """Document whose nodes are connected out -> in in list order."""
    edges = [
        make_edge(f"e{i}", a["id"], b["id"])
        for i, (a, b) in enumerate(zip(nodes, nodes[1:]), start=1)
    ]
    return make_document(nodes, edges, **kwargs)


def scenario_a_document() -> dict[str, Any]:
    """Manual trigger -> summarize -> classify -> db_save."""
    return chain([
        make_node("n1", "trigger.manual", {"sample_input": {"text": SCENARIO_TEXT}}),
        make_node("n2", "ai.summarize", {"input_path": "$.input", "output_key": "summary"}),
        make_node(
            "n3",
            "ai.classify",
            {
                "input_path": "$.input",
                "labels": SCENARIO_LABELS,
                "output_key": "category",
                "confidence_key": "category_confidence",
            },
        ),
        make_node(
            "n4",
            "output.db_save",
            {
                "table": "va_items",
                "mode": "insert",
                "mapping": {
                    "input": "$.input",
                    "summary": "$.summary",
                    "category": "$.category",
                    "category_confidence": "$.category_confidence",
                },
            },
        ),
    ], workflow_id="wf_scenario_a")


def scenario_b_document() -> dict[str, Any]:
    """Manual trigger feeding a db_save on a table live runs may not use."""
    return chain([
        make_node("n1", "trigger.manual", {"sample_input": {"text": SCENARIO_TEXT}}),
        make_node("n2", "output.db_save", {"table": "definitely_missing_table", "mapping": {"payload": "$.input"}}),
    ], workflow_id="wf_scenario_b")


def branching_document(expression: str = "$.input.score > 0.8") -> dict[str, Any]:
    """Trigger -> condition, with a delay on the true branch and an export on the false branch."""
    nodes = [
        make_node("n1", "trigger.manual", {"sample_input": {"score": 0.9}}),
        make_node(
            "n2",
            "logic.condition",
            {"expression": expression, "default_output": "false"},
            outputs=[port("true"), port("false")],
        ),
        make_node("n3", "logic.delay", {"seconds": 5}),
        make_node("n4", "output.export", {"format": "json"}),
    ]
    edges = [
        make_edge("e1", "n1", "n2"),
        make_edge("e2", "n2", "n3", source_port="true"),
        make_edge("e3", "n2", "n4", source_port="false"),
    ]
    return make_document(nodes, edges, workflow_id="wf_branching")


class FakeCompletion:
    """Completion backend returning scripted responses in order."""

    def __init__(self, responses: list[str] | None = None, default: str = "fake completion") -> None:
        self.responses = list(responses or [])
        self.default = default
        self.calls: list[dict[str, Any]] = []

    async def complete(self, prompt: str, *, system: str | None = None, json_mode: bool = False) -> str:
        self.calls.append({"prompt": prompt, "system": system, "json_mode": json_mode})
        if self.responses:
            return self.responses.pop(0)
        return self.default


class FakeRecords:
    """Record store keeping rows in memory."""

    def __init__(self, error: Exception | None = None) -> None:
        self.rows: list[tuple[str, dict[str, Any]]] = []
        self.error = error

    async def insert(self, table: str, values: dict[str, Any]) -> str:
        if self.error is not None:
            raise self.error
        self.rows.append((table, values))
        return f"row_{len(self.rows)}"
