from __future__ import annotations

from typing import Iterable

from .base import FindingNormalizer


class NormalizerRegistry:
    """Output parsers keyed by the tool whose output they read."""

    def __init__(self, normalizers: Iterable[FindingNormalizer]):
        self._by_tool = {n.tool_name(): n for n in normalizers}

    def tools(self) -> list[str]:
        return list(self._by_tool)

    def by_tool(self, tool: str) -> FindingNormalizer:
        try:
            return self._by_tool[tool]
        except KeyError:
            raise LookupError(f"No normalizer registered for {tool}") from None
