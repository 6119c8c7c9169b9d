from __future__ import annotations

from typing import Iterable

from .base import StaticCodeAnalyzer


class AnalyzerRegistry:
    """Analyzers in pipeline order."""

    def __init__(self, analyzers: Iterable[StaticCodeAnalyzer]):
        self._ordered = list(analyzers)
        self._by_name = {a.tool_name(): a for a in self._ordered}

    def list(self) -> list[str]:
        return [a.tool_name() for a in self._ordered]

    def get(self, name: str) -> StaticCodeAnalyzer:
        return self._by_name[name]

    def group(self, group: str) -> list[StaticCodeAnalyzer]:
        return [a for a in self._ordered if a.group == group]

    def __iter__(self):
        return iter(self._ordered)
