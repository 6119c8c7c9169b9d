from __future__ import annotations

from codequality.analyzers.js import BiomeAnalyzer, EsLintAnalyzer, StyleLintAnalyzer
from codequality.analyzers.php import EcsAnalyzer, PhpCsAnalyzer, PhpStanAnalyzer, PsalmAnalyzer
from codequality.analyzers.registry import AnalyzerRegistry
from codequality.core.config import Settings
from codequality.normalizers.biome_normalizer import BiomeNormalizer
from codequality.normalizers.ecs_normalizer import EcsNormalizer
from codequality.normalizers.eslint_normalizer import EsLintNormalizer
from codequality.normalizers.phpcs_normalizer import PhpCsNormalizer
from codequality.normalizers.phpstan_normalizer import PhpStanNormalizer
from codequality.normalizers.psalm_normalizer import PsalmNormalizer
from codequality.normalizers.registry import NormalizerRegistry
from codequality.normalizers.stylelint_normalizer import StyleLintNormalizer
from codequality.services.analysis_service import AnalysisService


def build_analyzer_registry() -> AnalyzerRegistry:
    """Stages in pipeline order: type checkers, style/format linters, then JS linters."""
    return AnalyzerRegistry(
        [
            PsalmAnalyzer(),
            PhpStanAnalyzer(),
            PhpCsAnalyzer(),
            EcsAnalyzer(),
            EsLintAnalyzer(),
            StyleLintAnalyzer(),
            BiomeAnalyzer(),
        ]
    )


def build_normalizer_registry(settings: Settings) -> NormalizerRegistry:
    return NormalizerRegistry(
        [
            PsalmNormalizer(),
            PhpStanNormalizer(),
            PhpCsNormalizer(),
            EcsNormalizer(),
            EsLintNormalizer(),
            StyleLintNormalizer(),
            BiomeNormalizer(reporter=settings.biome_reporter),
        ]
    )


def build_analysis_service(settings: Settings) -> AnalysisService:
    return AnalysisService(build_analyzer_registry(), build_normalizer_registry(settings))
