"""Tool registry: every tool the reasoning engine may call is registered once.

Usage:
    @tool_spec(
        name=OperationName.BULK_CREATE_PATTERN,
        args_model=PatternSpec,
        description="...",
        acknowledge=lambda args, arguments: f"Bulk created {arguments['count']} shapes",
    )
    def bulk_create_pattern(args: PatternSpec, canvas: CanvasSummary) -> dict:
        return {"pattern": args.pattern, "shapes": [...], "count": n}

Invoking a tool is the same three steps for every kind: validate the raw
arguments into the tool's model, build the operation arguments (a pure step;
bulk kinds run the geometry compiler here), then append one Operation to the
call log. Appending is the only mutation and happens in ``invoke`` alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable

from langchain_core.utils.json_schema import dereference_refs
from pydantic import BaseModel, ValidationError

from canvas_agent.engine.call_log import CallLog
from canvas_agent.errors import ToolValidationError, UnknownToolError
from canvas_agent.models.requests import CanvasSummary
from canvas_agent.models.tools import Operation, OperationName

logger = logging.getLogger(__name__)

BuildFn = Callable[[Any, CanvasSummary], dict[str, Any]]
AckFn = Callable[[Any, dict[str, Any]], str]


def dump_arguments(args: BaseModel, canvas: CanvasSummary) -> dict[str, Any]:
    """Default build step: the validated arguments, defaults filled in, camelCase keys."""
    return args.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclass
class ToolSpec:
    name: OperationName
    args_model: type[BaseModel]
    description: str
    acknowledge: AckFn
    build: BuildFn = dump_arguments

    def validate(self, raw_args: dict[str, Any] | None) -> BaseModel:
        try:
            return self.args_model.model_validate(raw_args or {})
        except ValidationError as e:
            raise ToolValidationError(f"Invalid arguments for {self.name.value}: {e}") from e

    def definition(self) -> dict[str, Any]:
        """Anthropic-style tool definition handed to the reasoning engine."""
        parameters = dereference_refs(self.args_model.model_json_schema())
        parameters.pop("$defs", None)
        parameters.pop("title", None)
        return {
            "name": self.name.value,
            "description": self.description,
            "input_schema": parameters,
        }


class ToolRegistry:
    """Static set of tools, keyed by operation name."""

    def __init__(self) -> None:
        self._tools: dict[OperationName, ToolSpec] = {}

    def register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Duplicate tool: {spec.name.value}")
        self._tools[spec.name] = spec
        logger.debug("Registered tool %s", spec.name.value)

    def get(self, name: str | OperationName) -> ToolSpec:
        try:
            return self._tools[OperationName(name)]
        except (KeyError, ValueError):
            raise UnknownToolError(f"Unknown tool: {name}") from None

    def all(self) -> list[ToolSpec]:
        return list(self._tools.values())

    def definitions(self) -> list[dict[str, Any]]:
        return [spec.definition() for spec in self._tools.values()]

    def invoke(
        self,
        name: str,
        raw_args: dict[str, Any] | None,
        log: CallLog,
        canvas: CanvasSummary,
    ) -> str:
        """Validate, build and log one invocation. Returns the acknowledgement text.

        Raises UnknownToolError / ToolValidationError before anything is logged.
        """
        spec = self.get(name)
        args = spec.validate(raw_args)
        arguments = spec.build(args, canvas)
        log.append(Operation(name=spec.name, arguments=arguments))
        return spec.acknowledge(args, arguments)

    @property
    def count(self) -> int:
        return len(self._tools)


# Module-level singleton
_registry = ToolRegistry()


def get_registry() -> ToolRegistry:
    return _registry


def tool_spec(
    *,
    name: OperationName,
    args_model: type[BaseModel],
    description: str,
    acknowledge: AckFn,
):
    """Decorator to register a tool whose build step is the decorated function."""

    def decorator(fn: BuildFn):
        _registry.register(
            ToolSpec(
                name=name,
                args_model=args_model,
                description=description,
                acknowledge=acknowledge,
                build=fn,
            )
        )
        return fn

    return decorator
