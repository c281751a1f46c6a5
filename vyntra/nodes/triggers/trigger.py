"""Trigger nodes - define the entry point and the initial payload of a run."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ..base import BaseNode, NodeTypeDescription

if TYPE_CHECKING:
    from ...engine.effects import EffectBackend
    from ...engine.types import Context, NodeResult
    from ...schemas.workflow import Node


class TriggerNode(BaseNode):
    """Base trigger. Runs seed their context from it; executing it is a no-op."""

    async def execute(
        self,
        node: Node,
        context: Context,
        effects: EffectBackend,
    ) -> NodeResult:
        return self.output(context, {})


class ManualTriggerNode(TriggerNode):
    node_description = NodeTypeDescription(
        name="trigger.manual",
        display_name="Manual Trigger",
        description="Start a run by hand with a sample input",
        icon="play",
        group="trigger",
        inputs=[],
        default_config={"sample_input": {}},
    )


class WebhookTriggerNode(TriggerNode):
    node_description = NodeTypeDescription(
        name="trigger.webhook",
        display_name="Webhook Trigger",
        description="Start a run from an inbound HTTP request",
        icon="webhook",
        group="trigger",
        inputs=[],
        default_config={"path": "/inbound", "method": "POST", "secret_required": True, "sample_payload": {}},
    )


class ScheduleTriggerNode(TriggerNode):
    node_description = NodeTypeDescription(
        name="trigger.schedule",
        display_name="Schedule Trigger",
        description="Start a run on a cron schedule (modelled, not scheduled)",
        icon="clock",
        group="trigger",
        inputs=[],
        default_config={"timezone": "UTC", "cron": "0 9 * * *", "payload": {}},
    )


class FileUploadTriggerNode(TriggerNode):
    node_description = NodeTypeDescription(
        name="trigger.file_upload",
        display_name="File Upload Trigger",
        description="Start a run when a file is uploaded",
        icon="upload",
        group="trigger",
        inputs=[],
        default_config={
            "accepted_types": ["application/pdf", "text/plain"],
            "max_size_mb": 10,
            "purpose": "automation-input",
        },
    )
