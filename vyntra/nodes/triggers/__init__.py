"""Trigger nodes."""

from .trigger import (
    ManualTriggerNode,
    WebhookTriggerNode,
    ScheduleTriggerNode,
    FileUploadTriggerNode,
)

__all__ = [
    "ManualTriggerNode",
    "WebhookTriggerNode",
    "ScheduleTriggerNode",
    "FileUploadTriggerNode",
]
