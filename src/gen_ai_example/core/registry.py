"""Tool registry.

The registry maps tool names to tool instances. Registration normally
happens once at startup; lookups from concurrent runs only ever read a
published dict, writers swap in a new one under a lock.
"""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

from gen_ai_example.core.errors import ToolNotFoundError

if TYPE_CHECKING:
    from gen_ai_example.tools.base import Tool

logger = logging.getLogger(__name__)


class ToolRegistry:
    """Registry of tools keyed by name.

    Example:
        registry = ToolRegistry()
        registry.register(WeatherTool())

        tool = registry.lookup("get_weather")
        result = await tool.execute({"city": "Beijing"})
    """

    def __init__(self, tools: list[Tool] | None = None) -> None:
        self._tools: dict[str, Tool] = {}
        self._write_lock = threading.Lock()
        for tool in tools or []:
            self.register(tool)

    def register(self, tool: Tool) -> None:
        """Register a tool under its declared name.

        A later registration under the same name replaces the earlier one.
        """
        name = tool.name
        with self._write_lock:
            if name in self._tools:
                logger.debug("Replacing registered tool: %s", name)
            updated = dict(self._tools)
            updated[name] = tool
            self._tools = updated

    def unregister(self, name: str) -> bool:
        """Remove a tool. Returns False if it was not registered."""
        with self._write_lock:
            if name not in self._tools:
                return False
            updated = dict(self._tools)
            del updated[name]
            self._tools = updated
            return True

    def lookup(self, name: str) -> Tool:
        """Get a tool by name.

        Raises:
            ToolNotFoundError: If no tool is registered under the name.
        """
        tool = self._tools.get(name)
        if tool is None:
            raise ToolNotFoundError(name)
        return tool

    def get(self, name: str) -> Tool | None:
        """Get a tool by name, or None if not registered."""
        return self._tools.get(name)

    def has(self, name: str) -> bool:
        return name in self._tools

    def list_tools(self) -> list[str]:
        """List all registered tool names."""
        return sorted(self._tools)

    def describe(self) -> dict[str, str]:
        """Map each registered tool name to its description."""
        tools = self._tools
        return {name: tools[name].description for name in sorted(tools)}

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: object) -> bool:
        return name in self._tools


def create_default_registry() -> ToolRegistry:
    """Create a registry holding the built-in tools."""
    from gen_ai_example.tools.builtin import builtin_tools

    return ToolRegistry(builtin_tools())
