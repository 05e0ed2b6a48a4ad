from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from figma_mcp.core.errors import ValidationFailure

ModelT = TypeVar("ModelT", bound=BaseModel)


@dataclass
class Validated(Generic[ModelT]):
    value: ModelT | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ModelT:
        if self.error is not None or self.value is None:
            raise ValidationFailure(self.error or "Invalid arguments")
        return self.value


def _format_location(loc: tuple[Any, ...]) -> str:
    parts: list[str] = []
    for item in loc:
        if isinstance(item, int):
            parts.append(f"[{item}]")
        else:
            parts.append(f".{item}" if parts else str(item))
    return "".join(parts)


def describe_validation_error(exc: ValidationError) -> str:
    messages = []
    for issue in exc.errors():
        message = issue["msg"].removeprefix("Value error, ")
        location = _format_location(tuple(issue.get("loc", ())))
        messages.append(f"{location}: {message}" if location else message)
    return "; ".join(messages)


def validate_arguments(model: type[ModelT], arguments: dict[str, Any] | None) -> Validated[ModelT]:
    """Check raw tool arguments against a request model without touching the network."""
    if arguments is not None and not isinstance(arguments, dict):
        return Validated(error="Tool arguments must be an object")
    try:
        return Validated(value=model.model_validate(arguments or {}))
    except ValidationError as exc:
        return Validated(error=describe_validation_error(exc))
