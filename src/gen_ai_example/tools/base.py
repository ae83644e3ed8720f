"""Tool contract.

Anything with a name, a description and an async execute() taking a
parameter bag is a tool and can be registered without touching the
executor. BaseTool adds parameter validation through a pydantic model.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, ClassVar, Protocol, runtime_checkable

from pydantic import BaseModel, ValidationError

from gen_ai_example.core.errors import ToolExecutionError

if TYPE_CHECKING:
    from collections.abc import Mapping


@runtime_checkable
class Tool(Protocol):
    """The capability set every tool exposes."""

    @property
    def name(self) -> str: ...

    @property
    def description(self) -> str: ...

    async def execute(self, parameters: Mapping[str, Any]) -> Any: ...


def _format_validation_error(exc: ValidationError) -> str:
    """Flatten a pydantic error into one line."""
    parts = []
    for err in exc.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "parameters"
        parts.append(f"{loc}: {err['msg']}")
    return "invalid parameters (" + "; ".join(parts) + ")"


class BaseTool(ABC):
    """Base class for tools with a typed parameter record.

    Subclasses set ``name``, ``description`` and ``parameters_model`` and
    implement ``run``. The raw bag is validated before ``run`` sees it, so
    a malformed bag fails with a ToolExecutionError naming the bad field.

    Example:
        class EchoParams(BaseModel):
            text: str

        class EchoTool(BaseTool):
            name = "echo"
            description = "Echo the text back"
            parameters_model = EchoParams

            async def run(self, params: EchoParams) -> dict[str, Any]:
                return {"text": params.text}
    """

    name: ClassVar[str]
    description: ClassVar[str]
    parameters_model: ClassVar[type[BaseModel] | None] = None
    timeout: ClassVar[float | None] = None
    """Seconds the executor waits for this tool before failing the task."""

    async def execute(self, parameters: Mapping[str, Any]) -> Any:
        """Validate the parameter bag and run the tool."""
        if self.parameters_model is None:
            return await self.run(dict(parameters))
        try:
            params = self.parameters_model.model_validate(dict(parameters))
        except ValidationError as e:
            raise ToolExecutionError(self.name, _format_validation_error(e)) from e
        return await self.run(params)

    @abstractmethod
    async def run(self, params: Any) -> Any:
        """Execute the tool with validated parameters."""

    def fail(self, message: str) -> ToolExecutionError:
        """Build the error for a domain failure of this tool."""
        return ToolExecutionError(self.name, message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"
