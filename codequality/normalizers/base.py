from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path

from codequality.analyzers.base import RawToolResult
from codequality.domain.models import StageOutcome


@dataclass
class NormalizerContext:
    working_dir: Path
    source_dir: Path


class FindingNormalizer(ABC):
    @abstractmethod
    def tool_name(self) -> str: ...

    @abstractmethod
    def normalize(self, raw: RawToolResult, ctx: NormalizerContext) -> StageOutcome: ...
