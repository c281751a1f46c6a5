"""Typed node configuration, one model per node type.

Raw ``config`` mappings are coerced once, when a document is parsed. A value of
the wrong shape falls back to the field's default instead of failing, so node
executors always receive a complete, well-typed config.
"""

from __future__ import annotations

import logging
from typing import Any, Literal, Union

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    ValidationInfo,
    ValidatorFunctionWrapHandler,
    field_validator,
)

logger = logging.getLogger(__name__)

DEFAULT_INPUT_PATH = "$.input"


class NodeConfig(BaseModel):
    """Base for all node configs. Unknown keys are kept as extras."""

    model_config = ConfigDict(extra="allow", frozen=True)

    @field_validator("*", mode="wrap")
    @classmethod
    def _fallback_to_default(
        cls,
        value: Any,
        handler: ValidatorFunctionWrapHandler,
        info: ValidationInfo,
    ) -> Any:
        try:
            return handler(value)
        except ValidationError:
            logger.debug("Config field %r has unusable value %r, using default", info.field_name, value)
            field = cls.model_fields[info.field_name]
            return field.get_default(call_default_factory=True)


class TriggerConfig(NodeConfig):
    """Trigger config. Only the sample payload keys matter for execution."""

    sample_input: Any = None
    sample_payload: Any = None
    payload: Any = None

    def initial_payload(self) -> Any:
        """First present of sample_input, sample_payload, payload; else ``{}``."""
        for candidate in (self.sample_input, self.sample_payload, self.payload):
            if candidate is not None:
                return candidate
        return {}


class SummarizeConfig(NodeConfig):
    input_path: str = DEFAULT_INPUT_PATH
    output_key: str = "summary"
    style: str = "concise"
    bullets: bool = False
    instructions: str = "Summarize the input."


class ClassifyConfig(NodeConfig):
    input_path: str = DEFAULT_INPUT_PATH
    labels: list[str] = Field(default_factory=list)
    output_key: str = "label"
    confidence_key: str = "confidence"
    instructions: str = "Classify the input into one label."

    @field_validator("labels", mode="before")
    @classmethod
    def _keep_string_labels(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [label for label in value if isinstance(label, str)]
        return value


class FieldSpec(BaseModel):
    """One field requested from extract_fields."""

    model_config = ConfigDict(frozen=True)

    key: str = "field"
    type: str = "string"
    required: bool = False

    @field_validator("key", "type", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None:
            return value
        return value if isinstance(value, str) else str(value)

    @field_validator("required", mode="before")
    @classmethod
    def _truthy(cls, value: Any) -> bool:
        return bool(value)


class ExtractFieldsConfig(NodeConfig):
    input_path: str = DEFAULT_INPUT_PATH
    fields: list[FieldSpec] = Field(default_factory=list)
    output_key: str = "extracted"
    instructions: str = "Extract structured fields from the input."

    @field_validator("fields", mode="before")
    @classmethod
    def _normalize_fields(cls, value: Any) -> Any:
        if not isinstance(value, list):
            return value
        specs = []
        for item in value:
            if not isinstance(item, dict):
                specs.append({})
                continue
            # None means "absent" for every field key
            specs.append({k: v for k, v in item.items() if v is not None})
        return specs


class GenerateReportConfig(NodeConfig):
    input_path: str = DEFAULT_INPUT_PATH
    output_key: str = "report"
    template: str = "Report"
    format: str = "markdown"
    instructions: str = "Generate a concise report from the input."


class ConditionConfig(NodeConfig):
    expression: str = ""
    default_output: str | None = None

    @field_validator("expression", mode="before")
    @classmethod
    def _stringify_expression(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)


class DelayConfig(NodeConfig):
    seconds: int | float = 0
    reason: str | None = None


class DbSaveConfig(NodeConfig):
    table: str = "va_items"
    mode: str = "insert"
    mapping: dict[str, Any] = Field(default_factory=dict)

    @field_validator("table", mode="before")
    @classmethod
    def _strip_table(cls, value: Any) -> Any:
        if isinstance(value, str):
            # blank names fall through to the default table
            return value.strip() or None
        return value


class ExportConfig(NodeConfig):
    input_path: str = DEFAULT_INPUT_PATH
    format: Literal["json", "csv"] = "json"
    filename: str | None = None

    @field_validator("format", mode="before")
    @classmethod
    def _normalize_format(cls, value: Any) -> str:
        if isinstance(value, str) and value.strip().lower() == "csv":
            return "csv"
        return "json"

    @property
    def resolved_filename(self) -> str:
        return self.filename if self.filename is not None else f"export.{self.format}"


AnyNodeConfig = Union[
    TriggerConfig,
    SummarizeConfig,
    ClassifyConfig,
    ExtractFieldsConfig,
    GenerateReportConfig,
    ConditionConfig,
    DelayConfig,
    DbSaveConfig,
    ExportConfig,
]

CONFIG_MODELS: dict[str, type[NodeConfig]] = {
    "trigger.manual": TriggerConfig,
    "trigger.webhook": TriggerConfig,
    "trigger.schedule": TriggerConfig,
    "trigger.file_upload": TriggerConfig,
    "ai.summarize": SummarizeConfig,
    "ai.classify": ClassifyConfig,
    "ai.extract_fields": ExtractFieldsConfig,
    "ai.generate_report": GenerateReportConfig,
    "logic.condition": ConditionConfig,
    "logic.delay": DelayConfig,
    "output.db_save": DbSaveConfig,
    "output.export": ExportConfig,
}


def parse_node_config(node_type: str, raw: dict[str, Any]) -> AnyNodeConfig:
    """Coerce a raw config mapping into the typed config for ``node_type``."""
    model = CONFIG_MODELS.get(node_type, NodeConfig)
    return model.model_validate(raw)  # type: ignore[return-value]
