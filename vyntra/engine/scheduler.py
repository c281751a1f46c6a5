"""Graph scheduling: topological order and per-run active-node tracking."""

from __future__ import annotations

from collections import deque
from typing import TYPE_CHECKING

from ..core.exceptions import SchedulingError

if TYPE_CHECKING:
    from ..schemas.workflow import Edge, Node, Workflow


def topological_order(workflow: Workflow) -> list[Node]:
    """
    Order nodes with Kahn's algorithm.

    Zero in-degree nodes are seeded in node-list order and ties are released
    FIFO, so the order is stable for a fixed node/edge order. Edges whose
    endpoints are not nodes of the workflow are ignored. A result shorter than
    the node list means the graph has a cycle.
    """
    nodes_by_id = {n.id: n for n in workflow.nodes}
    in_degree = {n.id: 0 for n in workflow.nodes}
    successors: dict[str, list[str]] = {}

    for edge in workflow.edges:
        source, target = edge.source.node_id, edge.target.node_id
        if source not in nodes_by_id or target not in nodes_by_id:
            continue
        in_degree[target] += 1
        successors.setdefault(source, []).append(target)

    queue = deque(node_id for node_id, degree in in_degree.items() if degree == 0)
    ordered: list[Node] = []

    while queue:
        node_id = queue.popleft()
        ordered.append(nodes_by_id[node_id])
        for next_id in successors.get(node_id, []):
            in_degree[next_id] -= 1
            if in_degree[next_id] == 0:
                queue.append(next_id)

    return ordered


def is_dag(workflow: Workflow) -> bool:
    return len(topological_order(workflow)) == len(workflow.nodes)


class GraphScheduler:
    """Execution order plus the set of nodes reachable through taken branches."""

    def __init__(self, workflow: Workflow) -> None:
        order = topological_order(workflow)
        if len(order) != len(workflow.nodes):
            raise SchedulingError(workflow_id=workflow.id)

        self.order: list[Node] = order
        self._active: set[str] = {workflow.entry_node_id}
        self._outgoing: dict[str, list[Edge]] = {}
        for edge in workflow.edges:
            self._outgoing.setdefault(edge.source.node_id, []).append(edge)

    def is_active(self, node_id: str) -> bool:
        return node_id in self._active

    def follow(self, node: Node, selected_port: str | None = None) -> list[str]:
        """
        Activate and return the targets of the edges leaving ``node``.

        With ``selected_port`` only edges from that output port are followed.
        """
        outgoing = self._outgoing.get(node.id, [])
        if selected_port is not None:
            outgoing = [e for e in outgoing if e.source.port_id == selected_port]

        next_ids = [e.target.node_id for e in outgoing]
        self._active.update(next_ids)
        return next_ids
