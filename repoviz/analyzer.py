"""Entry points of the analysis core: project analysis and drift detection."""

from __future__ import annotations

import logging
from collections import Counter
from functools import lru_cache
from typing import Optional, Sequence

from .drift import DriftDetector
from .errors import ValidationError
from .graph_builder import DependencyGraphBuilder
from .mermaid import render_mermaid
from .models import AnalysisResult, DriftResult, FileInput
from .parser import SourceParser, TreeSitterSourceParser

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def default_parser() -> TreeSitterSourceParser:
    return TreeSitterSourceParser()


def validate_batch(files: Sequence[FileInput]) -> None:
    if not files:
        raise ValidationError("At least one file is required")
    duplicates = sorted(path for path, count in Counter(f.path for f in files).items() if count > 1)
    if duplicates:
        raise ValidationError(
            f"Duplicate file paths in batch: {', '.join(duplicates)}",
            details={"duplicates": duplicates},
        )


class ProjectAnalyzer:
    """Coordinates parsing, graph building, rendering and drift detection."""

    def __init__(
        self,
        parser: Optional[SourceParser] = None,
        max_workers: Optional[int] = None,
    ) -> None:
        self.builder = DependencyGraphBuilder(parser or default_parser(), max_workers=max_workers)
        self.drift_detector = DriftDetector()

    def analyze(self, files: Sequence[FileInput]) -> AnalysisResult:
        validate_batch(files)
        logger.info("Analyzing %d files", len(files))

        output = self.builder.build(files)
        diagram = render_mermaid(output.graph)

        logger.info(
            "Analysis complete: %d files, %d nodes", len(output.files), len(output.graph),
        )
        return AnalysisResult(files=output.files, graph=output.graph, diagram=diagram)

    def drift(self, current: AnalysisResult, previous: AnalysisResult) -> DriftResult:
        return _detect_and_log(self.drift_detector, current, previous)


def analyze_project(
    files: Sequence[FileInput],
    max_workers: Optional[int] = None,
) -> AnalysisResult:
    """Parse *files*, build their dependency graph and render its diagram.

    Raises:
        ValidationError: The batch is empty or contains duplicate paths.
        ParseError: A file is not valid syntax for its language.
    """
    return ProjectAnalyzer(max_workers=max_workers).analyze(files)


def detect_drift(current: AnalysisResult, previous: AnalysisResult) -> DriftResult:
    """Classify per-file dependency changes from *previous* to *current*."""
    return _detect_and_log(DriftDetector(), current, previous)


def _detect_and_log(
    detector: DriftDetector,
    current: AnalysisResult,
    previous: AnalysisResult,
) -> DriftResult:
    result = detector.detect(current, previous)
    logger.info(
        "Drift detection complete: %d added, %d removed, %d modified",
        len(result.added), len(result.removed), len(result.modified),
    )
    return result
